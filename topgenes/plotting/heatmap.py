"""Clustered heatmap of the top-ranked genes."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import scipy.cluster.hierarchy as sch
import scipy.spatial.distance as ssd
from matplotlib.colors import Normalize

from topgenes.core.types import RankedTable
from topgenes.plotting.styles import (
    DEFAULT_HEATMAP_STYLE,
    HEATMAP_TITLE,
    HeatmapStyle,
    apply_plot_style,
    diverging_cmap,
)
from topgenes.plotting.utils import save_figure

COLORBAR_LABEL = "row z-score of log2(CPM + 1)"


@dataclass(frozen=True)
class HeatmapMatrix:
    """Display values in dendrogram leaf order, plus the linkages behind it."""

    values: pd.DataFrame
    row_linkage: np.ndarray | None
    col_linkage: np.ndarray | None


def log_row_zscore(values: pd.DataFrame) -> pd.DataFrame:
    """log2(x + 1), then z-score each row using the sample standard deviation.

    Rows with zero or undefined spread (including single-column input) are
    set to 0 after centering.
    """
    logged = np.log2(values.to_numpy(dtype=float) + 1.0)
    n_rows, n_cols = logged.shape
    scaled = np.zeros_like(logged)
    if n_rows and n_cols > 1:
        centered = logged - logged.mean(axis=1, keepdims=True)
        sd = logged.std(axis=1, ddof=1)
        ok = np.isfinite(sd) & (sd > 0)
        scaled[ok] = centered[ok] / sd[ok, None]
    return pd.DataFrame(scaled, index=values.index, columns=values.columns)


def cluster_order(
    data: np.ndarray,
    metric: str = "euclidean",
    method: str = "complete",
) -> tuple[list[int], np.ndarray | None]:
    """Leaf order of a hierarchical clustering over the rows of `data`.

    Fewer than two rows cannot be clustered; the identity order is returned
    with no linkage.
    """
    arr = np.asarray(data, dtype=float)
    n = arr.shape[0]
    if n < 2:
        return list(range(n)), None

    dists = ssd.pdist(arr, metric=metric)
    if not np.isfinite(dists).all():
        finite = dists[np.isfinite(dists)]
        fill = float(finite.max()) * 10.0 if finite.size and finite.max() > 0 else 1.0
        dists = np.nan_to_num(dists, nan=fill, posinf=fill, neginf=fill)
    Z = sch.linkage(dists, method=method)
    return sch.leaves_list(Z).tolist(), Z


def heatmap_matrix(
    table: RankedTable,
    metric: str = "euclidean",
    method: str = "complete",
) -> HeatmapMatrix:
    """Scale the ranked CPM values and reorder rows and columns by clustering."""
    scaled = log_row_zscore(table.cpm_values)
    row_order, row_Z = cluster_order(scaled.to_numpy(), metric=metric, method=method)
    col_order, col_Z = cluster_order(scaled.to_numpy().T, metric=metric, method=method)
    ordered = scaled.iloc[row_order, col_order]
    return HeatmapMatrix(values=ordered, row_linkage=row_Z, col_linkage=col_Z)


def _draw_dendrogram(ax: plt.Axes, Z: np.ndarray | None, n_leaves: int, orientation: str, color: str) -> None:
    if Z is not None:
        sch.dendrogram(
            Z,
            ax=ax,
            orientation=orientation,
            no_labels=True,
            color_threshold=0,
            above_threshold_color=color,
        )
    span = 10.0 * n_leaves
    if orientation == "left":
        # Leaf 0 on top, matching the heatmap row order.
        ax.set_ylim(span, 0.0)
    else:
        ax.set_xlim(0.0, span)
    ax.set_xticks([])
    ax.set_yticks([])
    for spine in ax.spines.values():
        spine.set_visible(False)


def plot_top_genes_heatmap(
    table: RankedTable,
    out_path: str | Path,
    *,
    metric: str = "euclidean",
    method: str = "complete",
    title: str = HEATMAP_TITLE,
    fmt: str | None = None,
    style: HeatmapStyle = DEFAULT_HEATMAP_STYLE,
) -> HeatmapMatrix:
    """Render the ranked genes as a clustered heatmap on a fixed-size page.

    Rows are gene names and columns are samples, both in dendrogram leaf
    order. Cell color is the row z-score of log2(CPM + 1) on a three-point
    diverging scale centered at zero.
    """
    if len(table) == 0 or len(table.sample_ids) == 0:
        raise ValueError("Ranked table is empty; nothing to plot.")

    matrix = heatmap_matrix(table, metric=metric, method=method)
    values = matrix.values
    n_rows, n_cols = values.shape

    limit = float(np.abs(values.to_numpy()).max())
    if not np.isfinite(limit) or limit == 0.0:
        limit = 1.0
    norm = Normalize(vmin=-limit, vmax=limit)

    apply_plot_style(style)
    fig = plt.figure(figsize=style.figsize)
    gs = fig.add_gridspec(
        nrows=2,
        ncols=4,
        width_ratios=[
            style.row_dendrogram_ratio,
            1.0,
            style.label_gutter_ratio,
            style.colorbar_ratio,
        ],
        height_ratios=[style.col_dendrogram_ratio, 1.0],
        wspace=0.02,
        hspace=0.02,
    )
    ax_row_d = fig.add_subplot(gs[1, 0])
    ax_heat = fig.add_subplot(gs[1, 1])
    ax_col_d = fig.add_subplot(gs[0, 1])
    ax_cbar = fig.add_subplot(gs[1, 3])

    mesh = ax_heat.pcolormesh(
        values.to_numpy(),
        cmap=diverging_cmap(style),
        norm=norm,
        edgecolors=style.border_color,
        linewidth=style.border_width,
    )
    ax_heat.set_xlim(0, n_cols)
    ax_heat.set_ylim(n_rows, 0)
    ax_heat.set_xticks(np.arange(n_cols) + 0.5)
    ax_heat.set_xticklabels(values.columns.tolist(), rotation=90, fontsize=style.fontsize_col)
    ax_heat.set_yticks(np.arange(n_rows) + 0.5)
    ax_heat.set_yticklabels(values.index.tolist(), fontsize=style.fontsize_row)
    ax_heat.tick_params(left=False, right=True, labelleft=False, labelright=True, length=0)
    ax_heat.yaxis.set_label_position("right")
    ax_heat.set_xlabel("Sample")
    ax_heat.set_ylabel("Gene")
    for spine in ax_heat.spines.values():
        spine.set_visible(False)

    _draw_dendrogram(ax_row_d, matrix.row_linkage, n_rows, "left", style.dendrogram_color)
    _draw_dendrogram(ax_col_d, matrix.col_linkage, n_cols, "top", style.dendrogram_color)

    cbar = fig.colorbar(mesh, cax=ax_cbar)
    cbar.ax.set_ylabel(COLORBAR_LABEL, rotation=-90, va="bottom")

    fig.suptitle(title, fontsize=style.title_fontsize)
    save_figure(fig, Path(out_path), fmt=fmt, style=style)
    return matrix
