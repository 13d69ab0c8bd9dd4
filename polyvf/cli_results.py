"""
Result printing and saving for the polygon view factor tool.
"""

import csv
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List
import logging

logger = logging.getLogger(__name__)

RESULTS_HEADER = ["timestamp", "geometry", "order", "F12", "F21", "A1", "A2",
                  "reciprocity_residual", "time_s"]


def print_single_line_summary(result: Dict[str, Any]) -> None:
    """Print a single-line summary of one calculation."""
    ref = result.get("reference")
    ref_part = "" if ref is None else f"  reference={ref:.6f}"
    print(
        f"[order={result['order']}] F12={result['F12']:.6f}  F21={result['F21']:.6f}  "
        f"A1={result['A1']:.6f}  A2={result['A2']:.6f}{ref_part}  ({result['time_s']:.3f}s)"
    )


def print_sweep_table(rows: List[Dict[str, Any]]) -> None:
    """Print a convergence table, one row per quadrature order."""
    print("=== Convergence study ===")
    print(f"{'order':>5}  {'F12':>12}  {'F21':>12}  {'|dF12|':>10}")
    prev = None
    for r in rows:
        delta = "" if prev is None else f"{abs(r['F12'] - prev):.3e}"
        print(f"{r['order']:>5}  {r['F12']:>12.8f}  {r['F21']:>12.8f}  {delta:>10}")
        prev = r["F12"]
    print("=" * 45)


def append_results_csv(rows: List[Dict[str, Any]], outdir: Path) -> Path:
    """Append result rows to <outdir>/results.csv, writing the header for a new file."""
    path = Path(outdir) / "results.csv"
    new_file = not path.exists() or os.path.getsize(path) == 0
    stamp = datetime.now().isoformat(timespec="seconds")
    with open(path, "a", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        if new_file:
            writer.writerow(RESULTS_HEADER)
        for r in rows:
            writer.writerow([
                stamp, r.get("geometry", ""), r["order"],
                f"{r['F12']:.10g}", f"{r['F21']:.10g}", f"{r['A1']:.10g}", f"{r['A2']:.10g}",
                f"{r['reciprocity_residual']:.3e}", f"{r['time_s']:.4f}",
            ])
    logger.debug("Appended %d row(s) to %s", len(rows), path)
    return path
