"""
Command-line interface for the polygon view factor tool.

This module wires argument parsing, logging, calculation and output together.
"""

from __future__ import annotations
import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .analytical import reference_view_factor
from .cli_cases import run_cases
from .cli_parser import create_parser, validate_args
from .cli_results import append_results_csv, print_single_line_summary, print_sweep_table
from .errors import ViewFactorError, YamlError
from .io_yaml import load_geometry, save_results, save_sample_cases
from .util.paths import get_outdir, stamped_path
from .view_factor import compute_view_factor

logger = logging.getLogger(__name__)


def _setup_logging(args) -> None:
    """Set up logging configuration."""
    if getattr(args, 'verbose', False):
        args.log_level = "DEBUG"

    level = getattr(logging, getattr(args, 'log_level', 'INFO'), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if args.log_level != "DEBUG":
        logging.getLogger("matplotlib").setLevel(logging.WARNING)
        logging.getLogger("PIL").setLevel(logging.WARNING)
        logging.getLogger("fontTools").setLevel(logging.WARNING)


def run_calculation(args: argparse.Namespace) -> List[Dict[str, Any]]:
    """
    Run the geometry file given by --geometry for --order, or for every order in --sweep.

    Returns:
        One result dict per order with keys order, F12, F21, A1, A2,
        reciprocity_residual, reference (closed-form F12 or None), time_s, geometry
    """
    geom = load_geometry(args.geometry)
    poly_a, poly_b = geom["surface_a"], geom["surface_b"]
    reference = None
    if "reference" in geom:
        try:
            reference = reference_view_factor(geom["reference"])
        except (ValueError, KeyError, TypeError) as e:
            raise YamlError(f"Invalid reference in {args.geometry}: {e}") from e
    orders = list(args.sweep) if args.sweep else [args.order]

    rows = []
    for i, order in enumerate(orders):
        start = time.perf_counter()
        res = compute_view_factor(poly_a, poly_b, order,
                                  validate=bool(args.validate) and i == 0,
                                  workers=args.workers)
        rows.append({
            "geometry": str(args.geometry),
            "order": order,
            "F12": res.F12, "F21": res.F21, "A1": res.A1, "A2": res.A2,
            "reciprocity_residual": res.reciprocity_residual(),
            "reference": reference,
            "time_s": time.perf_counter() - start,
        })

    if args.plot:
        _write_plots(args, poly_a, poly_b, rows)
    return rows


def _write_plots(args, poly_a, poly_b, rows) -> None:
    from .plot3d import plot_geometry_3d
    outdir = get_outdir(args.outdir)
    html = plot_geometry_3d(poly_a, poly_b, stamped_path(outdir, "geometry.html"),
                            title=f"{Path(args.geometry).name}: F12={rows[-1]['F12']:.6f}")
    print(f"3D geometry saved to: {html}")
    if len(rows) > 1:
        from .plotting import plot_convergence
        png = plot_convergence([r["order"] for r in rows], [r["F12"] for r in rows],
                               stamped_path(outdir, "convergence.png"),
                               reference=rows[0]["reference"],
                               title=f"Convergence - {Path(args.geometry).name}")
        print(f"Convergence plot saved to: {png}")


def main_with_args(args: argparse.Namespace) -> int:
    """Run the tool for already-parsed arguments.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    if args.version:
        from . import __version__
        print(__version__)
        return 0

    _setup_logging(args)

    if args.write_sample:
        save_sample_cases(Path(args.write_sample))
        print(f"Wrote: {args.write_sample}")
        return 0

    try:
        validate_args(args)
    except ValueError as e:
        logger.error(str(e))
        return 2

    if args.cases:
        return run_cases(args.cases, args.outdir, plot=args.plot, workers=args.workers)

    try:
        rows = run_calculation(args)
    except ViewFactorError as e:
        logger.error(f"Calculation failed: {e}")
        return 2

    if len(rows) > 1:
        print_sweep_table(rows)
    else:
        print_single_line_summary(rows[0])
    path = append_results_csv(rows, get_outdir(args.outdir))
    print(f"Results appended to: {path}")
    if args.save_results:
        save_results({f"order_{r['order']}": {**r, "quadrature_order": r["order"]} for r in rows},
                     Path(args.save_results))
        print(f"Results saved to: {args.save_results}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main CLI entry point."""
    parser = create_parser()
    argv = sys.argv[1:] if argv is None else list(argv)

    # If no arguments provided, show help and exit with code 2
    if not argv:
        parser.print_help()
        sys.exit(2)

    args = parser.parse_args(argv)
    sys.exit(main_with_args(args))


if __name__ == "__main__":
    main()
