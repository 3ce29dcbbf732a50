"""Ranking genes by mean CPM."""

from __future__ import annotations

import numpy as np
import pandas as pd

from topgenes.core.annotation import attach_gene_names
from topgenes.core.types import NormalizedMatrix, RankedTable

MEAN_COLUMN = "mean_cpm"


def rank_top_genes(
    normalized: NormalizedMatrix,
    mapping: dict[str, str],
    top_n: int = 10,
) -> RankedTable:
    """Return the `top_n` genes by mean CPM across samples.

    Ties keep input row order. Columns are `gene_id, gene_name`, one CPM
    column per sample in input order, then `mean_cpm`.
    """
    cpm = normalized.cpm
    samples = normalized.sample_ids
    gene_ids = [str(g) for g in cpm.index]

    values = cpm.to_numpy(dtype=float)
    if values.shape[0] and values.shape[1]:
        means = values.mean(axis=1)
    else:
        means = np.zeros(values.shape[0], dtype=float)
    order = np.argsort(-means, kind="stable")[: max(0, int(top_n))]

    frame = pd.DataFrame(
        {
            "gene_id": [gene_ids[i] for i in order],
            "gene_name": attach_gene_names((gene_ids[i] for i in order), mapping),
        }
    )
    for j, sample in enumerate(samples):
        frame[sample] = values[order, j]
    frame[MEAN_COLUMN] = means[order]

    return RankedTable(
        frame=frame,
        sample_ids=tuple(samples),
        metadata={"n_genes": len(gene_ids), "top_n": int(top_n)},
    )
