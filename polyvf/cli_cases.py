"""
Validation case execution for the polygon view factor tool.

Runs every case in a YAML file, compares against expected values and
closed-form references, and writes one summary CSV row per case.
"""

import csv
import time
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .analytical import reference_view_factor
from .constants import STATUS_FAILED, STATUS_OK, STATUS_SKIPPED
from .errors import ViewFactorError, YamlError
from .io_yaml import coerce_case_to_kwargs, load_cases, validate_case_schema
from .util.paths import get_outdir, stamped_path
from .view_factor import compute_view_factor

logger = logging.getLogger(__name__)

SUMMARY_HEADER = [
    "id", "order", "F12", "F21", "A1", "A2", "expected", "rel_err",
    "reference", "rel_err_to_ref", "status", "time_s", "notes",
]


def _rel_err(value: float, target: Optional[float]) -> str:
    if target is None or target == 0:
        return ""
    return f"{abs(value - target) / abs(target):.6f}"


def _tolerance_note(rel_err: str, tol: Dict[str, Any]) -> str:
    if rel_err == "" or "rel" not in tol:
        return ""
    return "within tolerance" if float(rel_err) <= float(tol["rel"]) else "OUTSIDE tolerance"


def run_single_case(case: Dict[str, Any], plot: bool = False,
                    plots_dir: Optional[Path] = None,
                    workers: Optional[int] = None) -> List[Any]:
    """Compute one enabled case and return its summary row."""
    kw = coerce_case_to_kwargs(case)

    start = time.perf_counter()
    res = compute_view_factor(kw["polygon_a"], kw["polygon_b"], kw["quadrature_order"],
                              validate=kw["validate"], workers=workers)
    elapsed = time.perf_counter() - start

    expected = kw["expected"]
    rel_err = _rel_err(res.F12, expected)

    ref = ""
    rel_err_to_ref = ""
    if kw["reference"]:
        ref_value = reference_view_factor(kw["reference"])
        ref = f"{ref_value:.8f}"
        rel_err_to_ref = _rel_err(res.F12, ref_value)

    if plot and plots_dir is not None:
        from .plot3d import plot_geometry_3d
        plot_geometry_3d(kw["polygon_a"], kw["polygon_b"],
                         stamped_path(plots_dir, f"{kw['id']}_geometry.html"),
                         title=f"{kw['id']}: F12={res.F12:.6f}")

    logger.info("Case %s: F12=%.6f F21=%.6f (%.3fs)", kw["id"], res.F12, res.F21, elapsed)
    return [
        kw["id"], kw["quadrature_order"],
        f"{res.F12:.8f}", f"{res.F21:.8f}", f"{res.A1:.8f}", f"{res.A2:.8f}",
        "" if expected is None else expected, rel_err, ref, rel_err_to_ref,
        STATUS_OK, f"{elapsed:.4f}", _tolerance_note(rel_err, kw["expected_tol"]),
    ]


def run_cases(cases_path: str, outdir: str, plot: bool = False,
              workers: Optional[int] = None) -> int:
    """Run validation cases from YAML file and generate summary CSV.

    Args:
        cases_path: Path to YAML cases file
        outdir: Output directory for results
        plot: Whether to write 3D geometry views
        workers: Optional process-pool size passed to each calculation

    Returns:
        Exit code (0 for success, 1 if the cases file could not be read)
    """
    try:
        cases = load_cases(cases_path)
    except YamlError as e:
        logger.error(f"Error loading cases: {e}")
        return 1

    outdir_path = get_outdir(outdir)
    plots_dir = None
    if plot:
        plots_dir = outdir_path / "plots"
        plots_dir.mkdir(parents=True, exist_ok=True)

    summary_csv = outdir_path / "cases_summary.csv"
    blank = [""] * 9
    with open(summary_csv, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(SUMMARY_HEADER)
        for case in cases:
            case_id = case.get("id", "<unknown>") if isinstance(case, dict) else "<unknown>"
            try:
                validate_case_schema(case)
                if not case["enabled"]:
                    writer.writerow([case_id, *blank, STATUS_SKIPPED, "", "disabled"])
                    continue
                writer.writerow(run_single_case(case, plot, plots_dir, workers))
            except (ViewFactorError, ValueError, KeyError, TypeError) as e:
                logger.warning("Case %s failed: %s", case_id, e)
                writer.writerow([case_id, *blank, STATUS_FAILED, "", str(e)])

    print(f"Wrote: {summary_csv}")
    if plot:
        print(f"Plots saved to: {plots_dir}")
    return 0
