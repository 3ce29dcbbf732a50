import matplotlib

matplotlib.use("Agg")

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from topgenes.core.rank import rank_top_genes
from topgenes.core.types import NormalizedMatrix
from topgenes.plotting.heatmap import (
    cluster_order,
    heatmap_matrix,
    log_row_zscore,
    plot_top_genes_heatmap,
)
from topgenes.plotting.styles import HEATMAP_TITLE, diverging_cmap
from topgenes.plotting.utils import figure_format


def _ranked(values: np.ndarray, genes: list[str], samples: list[str]):
    cpm = pd.DataFrame(values, index=genes, columns=samples)
    return rank_top_genes(NormalizedMatrix(cpm=cpm, totals=pd.Series(1.0, index=samples)), {})


def test_log_row_zscore_rows_centered_and_scaled():
    values = pd.DataFrame(
        [[0.0, 3.0, 15.0], [7.0, 7.0, 7.0], [100.0, 10.0, 1.0]],
        index=["a", "b", "c"],
        columns=["S1", "S2", "S3"],
    )
    scaled = log_row_zscore(values)
    np.testing.assert_allclose(scaled.mean(axis=1).to_numpy(), 0.0, atol=1e-12)
    np.testing.assert_allclose(scaled.loc[["a", "c"]].std(axis=1, ddof=1).to_numpy(), 1.0)
    assert (scaled.loc["b"] == 0.0).all()
    np.testing.assert_allclose(scaled.loc["a"].to_numpy(), [-1.0, 0.0, 1.0])


def test_log_row_zscore_single_column_is_zero():
    values = pd.DataFrame([[5.0], [9.0]], index=["a", "b"], columns=["S1"])
    assert (log_row_zscore(values).to_numpy() == 0.0).all()


def test_cluster_order_groups_similar_rows():
    data = np.array([[0.0, 0.0], [10.0, 10.0], [0.1, 0.0], [10.0, 10.1]])
    order, Z = cluster_order(data)
    assert sorted(order) == [0, 1, 2, 3]
    assert Z is not None
    pos = {leaf: i for i, leaf in enumerate(order)}
    assert abs(pos[0] - pos[2]) == 1
    assert abs(pos[1] - pos[3]) == 1


def test_cluster_order_single_item():
    order, Z = cluster_order(np.array([[1.0, 2.0]]))
    assert order == [0]
    assert Z is None


def test_heatmap_matrix_is_a_permutation_of_the_table():
    rng = np.random.default_rng(1)
    values = rng.uniform(1, 1000, size=(10, 4))
    ranked = _ranked(values, [f"g{i}" for i in range(10)], ["S1", "S2", "S3", "S4"])
    matrix = heatmap_matrix(ranked)
    assert sorted(matrix.values.index) == sorted(ranked.frame["gene_name"])
    assert sorted(matrix.values.columns) == ["S1", "S2", "S3", "S4"]
    assert matrix.row_linkage is not None
    assert matrix.col_linkage is not None


def test_plot_writes_pdf(tmp_path: Path):
    rng = np.random.default_rng(2)
    values = rng.uniform(0, 500, size=(10, 3))
    values[4] = 12.0
    ranked = _ranked(values, [f"g{i}" for i in range(10)], ["SRR1", "SRR2", "SRR3"])
    out = tmp_path / "plots" / "heatmap.pdf"
    matrix = plot_top_genes_heatmap(ranked, out)
    assert out.read_bytes()[:4] == b"%PDF"
    assert matrix.values.shape == (10, 3)


def test_plot_format_follows_suffix(tmp_path: Path):
    ranked = _ranked(np.array([[1.0, 5.0], [3.0, 2.0]]), ["a", "b"], ["S1", "S2"])
    out = tmp_path / "heatmap.png"
    plot_top_genes_heatmap(ranked, out, title="custom")
    assert out.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
    assert figure_format(out) == "png"
    assert figure_format(tmp_path / "heatmap") == "pdf"


def test_plot_single_gene_single_sample(tmp_path: Path):
    ranked = _ranked(np.array([[42.0]]), ["only"], ["S1"])
    out = tmp_path / "one.pdf"
    plot_top_genes_heatmap(ranked, out)
    assert out.stat().st_size > 0


def test_plot_empty_table_rejected(tmp_path: Path):
    ranked = _ranked(np.zeros((0, 2)), [], ["S1", "S2"])
    with pytest.raises(ValueError, match="empty"):
        plot_top_genes_heatmap(ranked, tmp_path / "x.pdf")


def test_fixed_title_and_palette():
    assert HEATMAP_TITLE == "Top 10 Expressed Genes (CPM, log2 scale)"
    cmap = diverging_cmap()
    assert cmap.N == 50
    np.testing.assert_allclose(cmap(0.0)[:3], (0.0, 0.0, 128 / 255), atol=1e-6)
    np.testing.assert_allclose(cmap(1.0)[:3], (205 / 255, 38 / 255, 38 / 255), atol=1e-6)
