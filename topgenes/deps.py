"""Startup check for the third-party packages a run needs."""

from __future__ import annotations

import importlib.util
from typing import Iterable

from topgenes.errors import DependencyUnavailable

# import name -> distribution name
REQUIRED_PACKAGES: tuple[tuple[str, str], ...] = (
    ("numpy", "numpy"),
    ("pandas", "pandas"),
    ("scipy", "scipy"),
    ("matplotlib", "matplotlib"),
)


def missing_dependencies(
    packages: Iterable[tuple[str, str]] = REQUIRED_PACKAGES,
) -> list[str]:
    """Return distribution names whose import module cannot be found."""
    missing: list[str] = []
    for module_name, dist_name in packages:
        if importlib.util.find_spec(module_name) is None:
            missing.append(dist_name)
    return missing


def check_dependencies(
    packages: Iterable[tuple[str, str]] = REQUIRED_PACKAGES,
) -> None:
    """Fail fast with the full list of missing packages.

    Nothing is installed at runtime; the environment has to be prepared
    before the analysis runs.
    """
    missing = missing_dependencies(packages)
    if missing:
        raise DependencyUnavailable(missing)
