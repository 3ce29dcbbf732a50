"""End-to-end top-expressed-genes run: load, map, normalize, rank, render."""

from __future__ import annotations

import logging
import warnings
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from topgenes.config import AnalysisConfig, config_dict
from topgenes.core.annotation import load_annotation_map
from topgenes.core.loader import load_counts
from topgenes.core.normalize import cpm_normalize
from topgenes.core.rank import MEAN_COLUMN, rank_top_genes
from topgenes.core.types import RankedTable
from topgenes.errors import RenderError, TopGenesWarning
from topgenes.pipeline.io import ensure_dir, staged_outputs, write_ranked_table
from topgenes.plotting.heatmap import plot_top_genes_heatmap
from topgenes.plotting.styles import heatmap_title
from topgenes.plotting.utils import figure_format

LOGGER_NAME = "topgenes"


@dataclass(frozen=True)
class RunResult:
    table_path: Path
    heatmap_path: Path
    ranked: RankedTable
    zero_total_samples: tuple[str, ...]
    annotation_size: int


@contextmanager
def _warnings_to_logger(logger: logging.Logger) -> Iterator[None]:
    """Send topgenes warnings to `logger` as they are raised."""
    with warnings.catch_warnings():
        warnings.simplefilter("always", TopGenesWarning)
        default_show = warnings.showwarning

        def _show(message, category, filename, lineno, file=None, line=None):
            if issubclass(category, TopGenesWarning):
                logger.warning("%s", message)
            else:
                default_show(message, category, filename, lineno, file, line)

        warnings.showwarning = _show
        yield


def prepare_output_dirs(*paths: str | Path) -> None:
    for p in paths:
        ensure_dir(Path(p).parent)


def run_analysis(
    counts_path: str | Path,
    heatmap_path: str | Path,
    table_path: str | Path,
    annotation_path: str | Path,
    config: AnalysisConfig | None = None,
    logger: logging.Logger | None = None,
) -> RunResult:
    """Run the analysis and write the ranked table and heatmap.

    Load failures propagate as `LoadError` / `EmptyDataError` before any
    output is staged. Every later failure is raised as `RenderError`, and
    neither output file is created in that case.
    """
    cfg = config or AnalysisConfig()
    log = logger or logging.getLogger(LOGGER_NAME)
    heatmap_out = Path(heatmap_path)
    table_out = Path(table_path)

    prepare_output_dirs(heatmap_out, table_out)

    with _warnings_to_logger(log):
        log.info("Config: %s", config_dict(cfg))
        matrix = load_counts(counts_path, config=cfg)
        log.info(
            "Loaded %d genes x %d samples from %s (samples: %s)",
            matrix.counts.shape[0],
            matrix.counts.shape[1],
            counts_path,
            ", ".join(matrix.sample_ids),
        )
        if matrix.schema.dropped_columns:
            log.info("Ignored non-sample columns: %s", ", ".join(matrix.schema.dropped_columns))

        try:
            mapping = load_annotation_map(annotation_path)
            log.info("Annotation entries: %d", len(mapping))
            normalized = cpm_normalize(
                matrix, scale=cfg.cpm_scale, pseudocount=cfg.pseudocount
            )
            ranked = rank_top_genes(normalized, mapping, top_n=cfg.top_n)
            log.info(
                "Ranked top %d of %d genes by mean CPM",
                len(ranked),
                ranked.metadata["n_genes"],
            )
            with staged_outputs(table_out, heatmap_out) as (table_tmp, heatmap_tmp):
                write_ranked_table(ranked, table_tmp)
                plot_top_genes_heatmap(
                    ranked,
                    heatmap_tmp,
                    metric=cfg.distance_metric,
                    method=cfg.linkage_method,
                    title=heatmap_title(cfg.top_n),
                    fmt=figure_format(heatmap_out),
                )
        except Exception as exc:
            raise RenderError(f"{type(exc).__name__}: {exc}") from exc

    log.info("Analysis complete!")
    log.info("Top %d genes table saved to: %s", len(ranked), table_out)
    log.info("Heatmap saved to: %s", heatmap_out)
    summary = ranked.frame.loc[:, ["gene_id", "gene_name", MEAN_COLUMN]]
    log.info("Top %d genes:\n%s", len(ranked), summary.to_string(index=False))

    return RunResult(
        table_path=table_out,
        heatmap_path=heatmap_out,
        ranked=ranked,
        zero_total_samples=normalized.zero_total_samples,
        annotation_size=len(mapping),
    )
