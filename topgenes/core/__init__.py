"""Core loading, mapping, normalization and ranking."""

from topgenes.core.annotation import attach_gene_names, load_annotation_map
from topgenes.core.loader import derive_sample_ids, infer_schema, load_counts, read_counts
from topgenes.core.normalize import cpm_normalize
from topgenes.core.rank import rank_top_genes
from topgenes.core.types import ColumnSchema, CountMatrix, NormalizedMatrix, RankedTable

__all__ = [
    "ColumnSchema",
    "CountMatrix",
    "NormalizedMatrix",
    "RankedTable",
    "read_counts",
    "infer_schema",
    "derive_sample_ids",
    "load_counts",
    "load_annotation_map",
    "attach_gene_names",
    "cpm_normalize",
    "rank_top_genes",
]
