"""Heatmap rendering for ranked genes."""

from topgenes.plotting.heatmap import (
    HeatmapMatrix,
    cluster_order,
    heatmap_matrix,
    log_row_zscore,
    plot_top_genes_heatmap,
)
from topgenes.plotting.styles import (
    DEFAULT_HEATMAP_STYLE,
    HEATMAP_TITLE,
    HeatmapStyle,
    apply_plot_style,
    diverging_cmap,
    heatmap_title,
)
from topgenes.plotting.utils import figure_format, save_figure

__all__ = [
    "HeatmapMatrix",
    "HeatmapStyle",
    "DEFAULT_HEATMAP_STYLE",
    "HEATMAP_TITLE",
    "apply_plot_style",
    "diverging_cmap",
    "heatmap_title",
    "log_row_zscore",
    "cluster_order",
    "heatmap_matrix",
    "plot_top_genes_heatmap",
    "figure_format",
    "save_figure",
]
