from __future__ import annotations

import importlib.util
from pathlib import Path

from topgenes import cli


def _load_script_module(script_name: str):
    root = Path(__file__).resolve().parents[1]
    script_path = root / "scripts" / script_name
    spec = importlib.util.spec_from_file_location(script_name.replace(".py", ""), script_path)
    if spec is None or spec.loader is None:
        raise RuntimeError(f"Unable to load script module: {script_path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_script_entrypoint_uses_cli_main():
    module = _load_script_module("top_expressed_genes.py")
    assert module.main is cli.main


def test_cli_parse_args_positional_order():
    args = cli.parse_args(["counts.txt", "plots/h.pdf", "tables/t.csv", "genes.gtf"])
    assert args.counts == "counts.txt"
    assert args.heatmap == "plots/h.pdf"
    assert args.table == "tables/t.csv"
    assert args.annotation == "genes.gtf"
    assert args.config is None
    assert args.log_file is None


def test_package_import_is_lazy():
    import topgenes

    assert callable(topgenes.run_analysis)
    assert topgenes.__version__
