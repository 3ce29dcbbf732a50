"""Typed containers passed between topgenes pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field

import pandas as pd


@dataclass(frozen=True)
class ColumnSchema:
    """Column roles inferred once from the raw count table."""

    id_column: str
    sample_columns: tuple[str, ...]
    dropped_columns: tuple[str, ...] = ()
    fallback: bool = False


@dataclass(frozen=True)
class CountMatrix:
    """Raw counts.

    - `counts`: genes x samples, indexed by gene id in input order; columns
      are sample ids.
    - `source_headers`: the original header for each sample column.
    """

    counts: pd.DataFrame
    source_headers: tuple[str, ...]
    schema: ColumnSchema

    @property
    def gene_ids(self) -> list[str]:
        return [str(g) for g in self.counts.index]

    @property
    def sample_ids(self) -> list[str]:
        return [str(s) for s in self.counts.columns]


@dataclass(frozen=True)
class NormalizedMatrix:
    """CPM values with the per-sample totals that produced them."""

    cpm: pd.DataFrame
    totals: pd.Series
    zero_total_samples: tuple[str, ...] = ()

    @property
    def sample_ids(self) -> list[str]:
        return [str(s) for s in self.cpm.columns]


@dataclass(frozen=True)
class RankedTable:
    """Top genes by mean CPM, highest first."""

    frame: pd.DataFrame
    sample_ids: tuple[str, ...]
    metadata: dict[str, object] = field(default_factory=dict)

    def __len__(self) -> int:
        return int(self.frame.shape[0])

    @property
    def cpm_values(self) -> pd.DataFrame:
        """Per-sample CPM indexed by gene name, for display."""
        values = self.frame.loc[:, list(self.sample_ids)].astype(float)
        values.index = self.frame["gene_name"].astype(str).tolist()
        return values
