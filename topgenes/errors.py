"""Error and warning types raised by topgenes."""

from __future__ import annotations


class TopGenesError(Exception):
    """Base class for fatal topgenes failures."""


class DependencyUnavailable(TopGenesError):
    """A required library cannot be imported."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(
            "Required packages are not installed: "
            + ", ".join(self.missing)
            + ". Install them (e.g. `pip install topgenes`) and rerun."
        )


class LoadError(TopGenesError):
    """The count file cannot be read or parsed."""


class EmptyDataError(LoadError):
    """The count file parsed to no rows or no sample columns."""


class RenderError(TopGenesError):
    """Analysis, ranking, or output rendering failed."""


class TopGenesWarning(RuntimeWarning):
    """Base class for recoverable conditions reported during a run."""


class ZeroTotalWarning(TopGenesWarning):
    """A sample has zero total counts; a pseudocount was used."""


class MissingAnnotationWarning(TopGenesWarning):
    """The annotation file is absent; gene ids are used as names."""


class FallbackColumnsWarning(TopGenesWarning):
    """No numeric sample columns were detected; all non-id columns are used."""


class DuplicateSampleWarning(TopGenesWarning):
    """Several headers resolved to the same sample id."""
