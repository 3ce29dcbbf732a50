"""Pipeline I/O, logging, and staged output helpers."""

from __future__ import annotations

import logging
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from topgenes.core.types import RankedTable

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def ensure_dir(path: str | Path) -> None:
    p = Path(path)
    if str(p) in ("", "."):
        return
    p.mkdir(parents=True, exist_ok=True)


def setup_logger(logger_name: str, log_path: str | Path | None = None) -> logging.Logger:
    """Configure a named logger writing to stdout and, optionally, a file."""
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.INFO)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    formatter = logging.Formatter(LOG_FORMAT)
    if log_path is not None:
        log_path = Path(log_path)
        ensure_dir(log_path.parent)
        fh = logging.FileHandler(log_path, mode="w", encoding="utf-8")
        fh.setFormatter(formatter)
        logger.addHandler(fh)
    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(formatter)
    logger.addHandler(sh)
    return logger


def write_ranked_table(table: RankedTable, path: str | Path) -> Path:
    """Write the ranked table as CSV with a header and no index column."""
    out = Path(path)
    ensure_dir(out.parent)
    table.frame.to_csv(out, index=False)
    return out


@contextmanager
def staged_outputs(*targets: str | Path) -> Iterator[list[Path]]:
    """Yield hidden staging paths next to `targets`.

    When the block finishes, every staging file is renamed onto its target.
    When it raises, the staging files are deleted and no target is touched.
    The caller creates the staging files, so they get the same mode as any
    other file it writes.
    """
    finals = [Path(t) for t in targets]
    staging: list[Path] = []
    try:
        for final in finals:
            ensure_dir(final.parent)
            staging.append(final.with_name(f".{final.stem}.tmp{final.suffix}"))
        yield staging
        for tmp, final in zip(staging, finals):
            os.replace(tmp, final)
    finally:
        for tmp in staging:
            if tmp.exists():
                tmp.unlink()
