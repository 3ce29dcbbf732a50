"""Shared plotting utilities."""

from __future__ import annotations

from pathlib import Path

import matplotlib.figure
import matplotlib.pyplot as plt

from topgenes.plotting.styles import DEFAULT_HEATMAP_STYLE, HeatmapStyle


def figure_format(path: str | Path, default: str = "pdf") -> str:
    """Output format from the file suffix, `default` when there is none."""
    suffix = Path(path).suffix.lstrip(".").lower()
    return suffix or default


def save_figure(
    fig: matplotlib.figure.Figure,
    out_path: Path,
    *,
    fmt: str | None = None,
    style: HeatmapStyle = DEFAULT_HEATMAP_STYLE,
    close: bool = True,
) -> None:
    """Save figure deterministically and optionally close it."""
    out_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        fig.savefig(
            out_path,
            format=fmt or figure_format(out_path),
            dpi=style.dpi,
            facecolor="white",
        )
    finally:
        if close:
            plt.close(fig)
