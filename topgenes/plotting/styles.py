"""Fixed page style for the top-genes heatmap."""

from __future__ import annotations

from dataclasses import dataclass

import matplotlib.pyplot as plt
from matplotlib.colors import LinearSegmentedColormap


def heatmap_title(top_n: int = 10) -> str:
    return f"Top {int(top_n)} Expressed Genes (CPM, log2 scale)"


HEATMAP_TITLE = heatmap_title(10)


@dataclass(frozen=True)
class HeatmapStyle:
    """Centralized heatmap defaults; the layout is not user-configurable."""

    dpi: int = 200
    figsize: tuple[float, float] = (10.0, 8.0)
    # navy -> white -> firebrick3
    palette: tuple[str, str, str] = ("#000080", "#FFFFFF", "#CD2626")
    n_colors: int = 50
    border_color: str = "#999999"
    border_width: float = 0.5
    fontsize_row: int = 10
    fontsize_col: int = 12
    title_fontsize: int = 14
    axis_label_fontsize: int = 11
    dendrogram_color: str = "#404040"
    row_dendrogram_ratio: float = 0.18
    col_dendrogram_ratio: float = 0.12
    label_gutter_ratio: float = 0.22
    colorbar_ratio: float = 0.04


DEFAULT_HEATMAP_STYLE = HeatmapStyle()


def apply_plot_style(style: HeatmapStyle = DEFAULT_HEATMAP_STYLE) -> None:
    """Apply deterministic matplotlib rcParams for the heatmap page."""
    plt.rcParams.update(
        {
            "figure.dpi": style.dpi,
            "savefig.dpi": style.dpi,
            "savefig.facecolor": "white",
            "font.family": "DejaVu Sans",
            "axes.titlesize": style.title_fontsize,
            "axes.labelsize": style.axis_label_fontsize,
            "axes.grid": False,
            "pdf.fonttype": 42,
        }
    )


def diverging_cmap(style: HeatmapStyle = DEFAULT_HEATMAP_STYLE) -> LinearSegmentedColormap:
    return LinearSegmentedColormap.from_list(
        "topgenes_diverging", list(style.palette), N=style.n_colors
    )
