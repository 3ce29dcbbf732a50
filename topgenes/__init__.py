"""topgenes public API."""

from topgenes._version import __version__
from topgenes.config import AnalysisConfig, load_json_config
from topgenes.errors import (
    DependencyUnavailable,
    EmptyDataError,
    LoadError,
    MissingAnnotationWarning,
    RenderError,
    ZeroTotalWarning,
)


def run_analysis(*args, **kwargs):
    """Lazy wrapper so importing the package does not pull in pandas/matplotlib."""
    from topgenes.pipeline.run import run_analysis as _run_analysis

    return _run_analysis(*args, **kwargs)


__all__ = [
    "__version__",
    "AnalysisConfig",
    "load_json_config",
    "run_analysis",
    "DependencyUnavailable",
    "LoadError",
    "EmptyDataError",
    "RenderError",
    "ZeroTotalWarning",
    "MissingAnnotationWarning",
]
