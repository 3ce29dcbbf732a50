"""Command-line interface for the top-expressed-genes analysis."""

from __future__ import annotations

import argparse
import os
from typing import Iterable

from topgenes.config import resolve_config
from topgenes.deps import check_dependencies
from topgenes.errors import DependencyUnavailable, EmptyDataError, LoadError, RenderError
from topgenes.pipeline.io import setup_logger


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Normalize a gene x sample count matrix to CPM, rank the most "
            "expressed genes, and write a table plus a clustered heatmap."
        )
    )
    parser.add_argument("counts", help="featureCounts-style count table")
    parser.add_argument("heatmap", help="Output heatmap path (format from suffix, PDF by default)")
    parser.add_argument("table", help="Output CSV path for the ranked genes")
    parser.add_argument("annotation", help="GTF-like annotation file (may be absent)")
    parser.add_argument("--config", default=None, help="Optional JSON analysis config")
    parser.add_argument("--log-file", default=None, help="Also write the run log here")
    return parser.parse_args(list(argv) if argv is not None else None)


def main(argv: Iterable[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (if None, uses sys.argv).

    Returns:
        Exit code (0 for success, 1 for any fatal error).
    """
    args = parse_args(argv)
    logger = setup_logger("topgenes", args.log_file)

    try:
        check_dependencies()
    except DependencyUnavailable as exc:
        logger.error("%s", exc)
        return 1

    try:
        config = resolve_config(args.config)
    except (FileNotFoundError, ValueError, TypeError) as exc:
        logger.error("Invalid config: %s", exc)
        return 1

    os.environ.setdefault("MPLBACKEND", "Agg")
    from topgenes.pipeline.run import run_analysis

    try:
        run_analysis(
            args.counts,
            args.heatmap,
            args.table,
            args.annotation,
            config=config,
            logger=logger,
        )
    except EmptyDataError as exc:
        logger.error("Counts file appears to be empty or invalid: %s Exiting.", exc)
        return 1
    except LoadError as exc:
        logger.error("Could not load counts file: %s Exiting.", exc)
        return 1
    except RenderError as exc:
        logger.error("Error in analysis: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
