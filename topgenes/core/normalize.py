"""Counts-per-million normalization."""

from __future__ import annotations

import warnings

from topgenes.core.types import CountMatrix, NormalizedMatrix
from topgenes.errors import ZeroTotalWarning

CPM_SCALE = 1_000_000.0


def cpm_normalize(
    matrix: CountMatrix,
    scale: float = CPM_SCALE,
    pseudocount: float = 1.0,
) -> NormalizedMatrix:
    """Scale each sample column to counts per `scale` reads.

    Samples with a total of exactly zero are divided by `pseudocount`
    instead, which leaves their values at zero.
    """
    counts = matrix.counts.astype(float)
    totals = counts.sum(axis=0)
    zero_mask = totals == 0
    zero_samples = tuple(str(s) for s in totals.index[zero_mask])
    if zero_samples:
        warnings.warn(
            "Some samples have zero total counts "
            f"({', '.join(zero_samples)}). Using pseudocount for normalization.",
            ZeroTotalWarning,
            stacklevel=2,
        )
        totals = totals.mask(zero_mask, float(pseudocount))

    cpm = counts.div(totals, axis=1) * float(scale)
    return NormalizedMatrix(cpm=cpm, totals=totals, zero_total_samples=zero_samples)
