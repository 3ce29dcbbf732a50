#!/usr/bin/env python3
"""Rank the most expressed genes of a count matrix and draw their heatmap.

Usage:
  python scripts/top_expressed_genes.py counts.txt heatmap.pdf top_genes.csv genes.gtf
"""

from __future__ import annotations

from topgenes.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
