"""Configuration loading utilities for topgenes runs."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

FEATURECOUNTS_METADATA_COLUMNS: tuple[str, ...] = (
    "Chr",
    "Start",
    "End",
    "Strand",
    "Length",
)


def load_json_config(path: str | Path) -> dict[str, Any]:
    """Load and validate an analysis config from a JSON file."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    if config_path.suffix.lower() != ".json":
        raise ValueError(
            f"Unsupported config format for '{config_path}'. Use a .json config file."
        )

    try:
        with open(config_path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except json.JSONDecodeError as exc:
        raise ValueError(
            f"Invalid JSON in config '{config_path}' at line {exc.lineno}, "
            f"column {exc.colno}: {exc.msg}"
        ) from exc

    if not isinstance(data, dict):
        raise ValueError(
            f"Invalid config root in '{config_path}': expected JSON object, got {type(data).__name__}."
        )
    return data


@dataclass(frozen=True)
class AnalysisConfig:
    """Numeric and parsing parameters for one run."""

    top_n: int = 10
    cpm_scale: float = 1_000_000.0
    pseudocount: float = 1.0
    comment_char: str = "#"
    sample_pattern: str = r"SRR[0-9]+"
    metadata_columns: tuple[str, ...] = FEATURECOUNTS_METADATA_COLUMNS
    distance_metric: str = "euclidean"
    linkage_method: str = "complete"

    def __post_init__(self) -> None:
        if int(self.top_n) <= 0:
            raise ValueError(f"top_n must be positive, got {self.top_n}.")
        if float(self.cpm_scale) <= 0:
            raise ValueError(f"cpm_scale must be positive, got {self.cpm_scale}.")
        if float(self.pseudocount) <= 0:
            raise ValueError(f"pseudocount must be positive, got {self.pseudocount}.")
        if len(str(self.comment_char)) != 1:
            raise ValueError("comment_char must be a single character.")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnalysisConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        kwargs = dict(data)
        if "metadata_columns" in kwargs:
            columns = kwargs["metadata_columns"]
            if not isinstance(columns, (list, tuple)):
                raise ValueError(
                    "metadata_columns must be a list of column names, "
                    f"got {type(columns).__name__}."
                )
            kwargs["metadata_columns"] = tuple(str(c) for c in columns)
        return cls(**kwargs)


def resolve_config(path: str | Path | None) -> AnalysisConfig:
    """Defaults when `path` is None, else defaults overridden by the JSON file."""
    if path is None:
        return AnalysisConfig()
    return AnalysisConfig.from_dict(load_json_config(path))


def config_dict(config: AnalysisConfig) -> dict[str, Any]:
    d = asdict(config)
    d["metadata_columns"] = list(config.metadata_columns)
    return d
