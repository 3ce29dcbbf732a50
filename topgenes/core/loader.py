"""Count-matrix loading and explicit column-schema inference."""

from __future__ import annotations

import io
import re
import warnings
from collections import Counter
from pathlib import Path
from typing import Iterable, Sequence

import pandas as pd

from topgenes.config import FEATURECOUNTS_METADATA_COLUMNS, AnalysisConfig
from topgenes.core.rank import MEAN_COLUMN
from topgenes.core.types import ColumnSchema, CountMatrix
from topgenes.errors import (
    DuplicateSampleWarning,
    EmptyDataError,
    FallbackColumnsWarning,
    LoadError,
)

RESERVED_COLUMNS = ("gene_id", "gene_name", MEAN_COLUMN)


def _strip_comment_lines(path: Path, comment: str) -> str:
    with open(path, "r", encoding="utf-8") as fh:
        return "".join(line for line in fh if not line.startswith(comment))


def _splits_on_whitespace(frame: pd.DataFrame) -> bool:
    """True when a one-column read is really a whitespace-delimited table."""
    header = str(frame.columns[0]).split()
    if len(header) < 2 or frame.shape[0] == 0:
        return False
    return len(str(frame.iloc[0, 0]).split()) > 1


def read_counts(path: str | Path, comment: str = "#") -> pd.DataFrame:
    """Parse a delimited count table, skipping lines that start with `comment`.

    The first column is read as text so gene ids keep leading zeros.
    Raises `LoadError` when the file cannot be read or parsed and
    `EmptyDataError` when it has no data rows or no column beyond the ids.
    """
    counts_path = Path(path)
    try:
        text = _strip_comment_lines(counts_path, comment)
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(f"Cannot read counts file '{counts_path}': {exc}") from exc

    if text.strip() == "":
        raise EmptyDataError(f"Counts file '{counts_path}' has no header or data rows.")

    try:
        frame = pd.read_csv(io.StringIO(text), sep="\t", converters={0: str})
        if frame.shape[1] == 1 and _splits_on_whitespace(frame):
            frame = pd.read_csv(io.StringIO(text), sep=r"\s+", converters={0: str})
    except pd.errors.ParserError as exc:
        raise LoadError(f"Cannot parse counts file '{counts_path}': {exc}") from exc

    if frame.shape[0] == 0 or frame.shape[1] <= 1:
        raise EmptyDataError(
            f"Counts file '{counts_path}' has {frame.shape[0]} rows and "
            f"{frame.shape[1]} columns; need at least one gene and one sample."
        )
    return frame


def _is_count_dtype(series: pd.Series) -> bool:
    return pd.api.types.is_numeric_dtype(series) and not pd.api.types.is_bool_dtype(series)


def infer_schema(
    frame: pd.DataFrame,
    metadata_columns: Iterable[str] = FEATURECOUNTS_METADATA_COLUMNS,
) -> ColumnSchema:
    """Decide once which columns hold sample counts.

    Column 1 is always the gene id. Sample columns are the numeric columns
    after it, minus featureCounts annotation columns. With no numeric
    column left, every non-id, non-annotation column is used instead.
    """
    columns = [str(c) for c in frame.columns]
    id_column = columns[0]
    meta = {str(c) for c in metadata_columns}
    candidates = [c for c in columns[1:] if c not in meta]
    samples = [c for c in candidates if _is_count_dtype(frame[c])]

    fallback = False
    if not samples:
        samples = candidates
        fallback = True
        if samples:
            warnings.warn(
                "Could not identify count columns. Using all columns except first.",
                FallbackColumnsWarning,
                stacklevel=2,
            )
    if not samples:
        raise EmptyDataError(
            "No usable sample columns; only the id and annotation columns are present."
        )

    dropped = tuple(c for c in columns[1:] if c not in samples)
    return ColumnSchema(
        id_column=id_column,
        sample_columns=tuple(samples),
        dropped_columns=dropped,
        fallback=fallback,
    )


def derive_sample_ids(headers: Sequence[str], pattern: str = r"SRR[0-9]+") -> list[str]:
    """Extract run accessions from path-shaped headers.

    >>> derive_sample_ids(["/data/bam/SRR9613403.bam", "ctrl_rep1"])
    ['SRR9613403', 'ctrl_rep1']
    """
    regex = re.compile(pattern)
    ids: list[str] = []
    for header in headers:
        matches = [m.group(0) for m in regex.finditer(str(header))]
        ids.append(matches[-1] if matches else str(header))

    counts = Counter(ids)
    dup = sorted(k for k, n in counts.items() if n > 1)
    if dup:
        warnings.warn(
            f"Headers map to duplicate sample ids ({', '.join(dup)}); "
            "keeping the full headers for those columns.",
            DuplicateSampleWarning,
            stacklevel=2,
        )
        ids = [str(h) if s in dup else s for h, s in zip(headers, ids)]
    return ids


def build_count_matrix(
    frame: pd.DataFrame,
    schema: ColumnSchema,
    sample_pattern: str = r"SRR[0-9]+",
) -> CountMatrix:
    raw = frame.loc[:, list(schema.sample_columns)]
    values = raw.apply(pd.to_numeric, errors="coerce")
    bad = values.isna()
    if bad.to_numpy().any():
        cols = [c for c in values.columns if bad[c].any()]
        raise ValueError(
            f"Sample columns contain missing or non-numeric values: {', '.join(cols)}"
        )
    if (values < 0).to_numpy().any():
        raise ValueError("Counts must be non-negative.")

    sample_ids = derive_sample_ids(list(schema.sample_columns), sample_pattern)
    clash = sorted(set(sample_ids) & set(RESERVED_COLUMNS))
    if clash:
        raise ValueError(f"Sample ids clash with output columns: {', '.join(clash)}")

    values.columns = sample_ids
    values.index = pd.Index(frame[schema.id_column].astype(str).tolist(), name="gene_id")
    return CountMatrix(
        counts=values,
        source_headers=tuple(schema.sample_columns),
        schema=schema,
    )


def load_counts(path: str | Path, config: AnalysisConfig | None = None) -> CountMatrix:
    """Read, type and validate a count file in one step.

    Any failure is reported as `LoadError` (or `EmptyDataError`).
    """
    cfg = config or AnalysisConfig()
    frame = read_counts(path, comment=cfg.comment_char)
    schema = infer_schema(frame, cfg.metadata_columns)
    try:
        return build_count_matrix(frame, schema, cfg.sample_pattern)
    except ValueError as exc:
        raise LoadError(f"Invalid counts in '{path}': {exc}") from exc
