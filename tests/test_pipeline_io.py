from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from topgenes.core.rank import rank_top_genes
from topgenes.core.types import NormalizedMatrix
from topgenes.pipeline.io import ensure_dir, setup_logger, staged_outputs, write_ranked_table


def test_write_ranked_table_has_no_index(tmp_path: Path):
    cpm = pd.DataFrame([[1.0, 2.0], [4.0, 8.0]], index=["a", "b"], columns=["SRR1", "SRR2"])
    ranked = rank_top_genes(
        NormalizedMatrix(cpm=cpm, totals=pd.Series(1.0, index=cpm.columns)), {"a": "Alpha"}
    )
    out = write_ranked_table(ranked, tmp_path / "nested" / "top.csv")
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "gene_id,gene_name,SRR1,SRR2,mean_cpm"
    assert lines[1] == "b,b,4.0,8.0,6.0"
    assert lines[2] == "a,Alpha,1.0,2.0,1.5"
    back = pd.read_csv(out)
    np.testing.assert_allclose(back["mean_cpm"], [6.0, 1.5])


def test_staged_outputs_moves_on_success(tmp_path: Path):
    a = tmp_path / "a.csv"
    b = tmp_path / "sub" / "b.pdf"
    with staged_outputs(a, b) as (tmp_a, tmp_b):
        assert tmp_a.parent == a.parent
        assert tmp_b.suffix == ".pdf"
        tmp_a.write_text("x", encoding="utf-8")
        tmp_b.write_text("y", encoding="utf-8")
        assert not a.exists()
    assert a.read_text(encoding="utf-8") == "x"
    assert b.read_text(encoding="utf-8") == "y"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["a.csv", "sub"]


def test_staged_outputs_cleans_up_on_failure(tmp_path: Path):
    a = tmp_path / "a.csv"
    b = tmp_path / "b.pdf"
    with pytest.raises(RuntimeError, match="boom"):
        with staged_outputs(a, b) as (tmp_a, _tmp_b):
            tmp_a.write_text("x", encoding="utf-8")
            raise RuntimeError("boom")
    assert list(tmp_path.iterdir()) == []


def test_setup_logger_replaces_handlers(tmp_path: Path):
    log_path = tmp_path / "logs" / "run.log"
    logger = setup_logger("test_topgenes_io", log_path)
    setup_logger("test_topgenes_io", log_path)
    assert len(logger.handlers) == 2
    logger.info("hello")
    for h in logger.handlers:
        h.flush()
    assert "| INFO | hello" in log_path.read_text(encoding="utf-8")
    stdout_only = setup_logger("test_topgenes_io")
    assert len(stdout_only.handlers) == 1
    assert isinstance(stdout_only.handlers[0], logging.StreamHandler)


def test_ensure_dir_ignores_current_dir(tmp_path: Path):
    ensure_dir("")
    ensure_dir(tmp_path / "x" / "y")
    assert (tmp_path / "x" / "y").is_dir()


def test_staged_outputs_follow_umask(tmp_path: Path):
    a = tmp_path / "top.csv"
    b = tmp_path / "heatmap.pdf"
    old = os.umask(0o022)
    try:
        with staged_outputs(a, b) as (tmp_a, tmp_b):
            tmp_a.write_text("x", encoding="utf-8")
            tmp_b.write_bytes(b"%PDF")
    finally:
        os.umask(old)
    assert stat.S_IMODE(a.stat().st_mode) == 0o644
    assert stat.S_IMODE(b.stat().st_mode) == 0o644
