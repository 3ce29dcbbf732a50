"""Gene id to display-name mapping from GTF-like annotation files."""

from __future__ import annotations

import gzip
import re
import warnings
from pathlib import Path
from typing import IO, Iterable

from topgenes.errors import MissingAnnotationWarning

GENE_ID_RE = re.compile(r'gene_id "([^"]*)"')
GENE_NAME_RE = re.compile(r'gene_name "([^"]*)"')


def _open_text(path: Path) -> IO[str]:
    if path.suffix == ".gz":
        return gzip.open(path, "rt", encoding="utf-8", errors="replace")
    return open(path, "r", encoding="utf-8", errors="replace")


def parse_annotation_lines(lines: Iterable[str]) -> dict[str, str]:
    """Collect `gene_id -> gene_name` pairs, first occurrence per id.

    Lines without a well-formed quoted `gene_id` are skipped. A missing or
    empty `gene_name` falls back to the id itself.
    """
    mapping: dict[str, str] = {}
    for line in lines:
        if "gene_id" not in line:
            continue
        id_match = GENE_ID_RE.search(line)
        if id_match is None:
            continue
        gene_id = id_match.group(1)
        if gene_id == "" or gene_id in mapping:
            continue
        name_match = GENE_NAME_RE.search(line)
        gene_name = name_match.group(1) if name_match is not None else ""
        mapping[gene_id] = gene_name or gene_id
    return mapping


def load_annotation_map(path: str | Path) -> dict[str, str]:
    """Read an annotation file into a gene-name map.

    A path that does not exist is not an error: an empty map is returned
    and a `MissingAnnotationWarning` is emitted so callers fall back to ids.
    """
    gtf_path = Path(path)
    if not gtf_path.exists():
        warnings.warn(
            f"Annotation file not found ({gtf_path}). Using gene IDs as names.",
            MissingAnnotationWarning,
            stacklevel=2,
        )
        return {}
    with _open_text(gtf_path) as fh:
        return parse_annotation_lines(fh)


def attach_gene_names(gene_ids: Iterable[str], mapping: dict[str, str]) -> list[str]:
    return [mapping.get(str(g), str(g)) for g in gene_ids]
