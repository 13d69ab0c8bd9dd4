"""
Command-line argument parsing for the polygon view factor tool.

Argument definitions and the cross-argument checks argparse cannot express.
"""

from __future__ import annotations
import argparse
from pathlib import Path

from .constants import DEFAULT_QUADRATURE_ORDER

SAVE_FORMATS = (".csv", ".json", ".yaml", ".yml")


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {text!r}")
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return value


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="polyvf",
        description="View factors between planar polygons by double contour integration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=r"""
Examples:
  # Single geometry, default 7-point rule
  python main.py --geometry pair.yaml

  # Convergence study with plots
  python main.py --geometry pair.yaml --sweep 1 2 3 4 5 6 7 --plot

  # Also keep the run as JSON
  python main.py --geometry pair.yaml --save-results run.json

  # Validation cases from YAML
  python main.py --cases docs/validation_cases.yaml --outdir results

  # Write a sample cases file to start from
  python main.py --write-sample cases.yaml

Preconditions (checked only with --validate):
  - Both surfaces are planar and not self-intersecting
  - Neither surface crosses the plane of the other
        """
    )

    parser.add_argument('--version', action='store_true', help='Print version and exit')

    inputs = parser.add_argument_group('inputs')
    inputs.add_argument('--geometry', metavar='PATH',
                        help="YAML file with 'surface_a' and 'surface_b'")
    inputs.add_argument('--cases', metavar='PATH',
                        help='YAML file of validation cases (writes cases_summary.csv)')
    inputs.add_argument('--write-sample', metavar='PATH',
                        help='Write a sample cases YAML file and exit')

    calc = parser.add_argument_group('calculation')
    calc.add_argument('--order', type=_positive_int, default=DEFAULT_QUADRATURE_ORDER, metavar='N',
                      help=f'Gauss-Legendre points per segment (default: {DEFAULT_QUADRATURE_ORDER})')
    calc.add_argument('--sweep', type=_positive_int, nargs='+', metavar='N',
                      help='Run a convergence study over these quadrature orders')
    calc.add_argument('--validate', action='store_true',
                      help='Check planarity, simplicity and plane separation before computing')
    calc.add_argument('--workers', type=_positive_int, default=None, metavar='N',
                      help='Evaluate segment rows in a process pool of N workers')

    out = parser.add_argument_group('output')
    out.add_argument('--outdir', default='results', metavar='DIR',
                     help='Output directory (default: results)')
    out.add_argument('--plot', action='store_true',
                     help='Write a 3D geometry view (and convergence plot with --sweep)')
    out.add_argument('--save-results', metavar='PATH',
                     help='Also write the run to PATH; format from the suffix (.csv, .json, .yaml)')
    out.add_argument('--log-level', default='INFO',
                     choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                     help='Logging level (default: INFO)')
    out.add_argument('--verbose', '-v', action='store_true', help='Enable verbose logging')
    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Check argument combinations argparse cannot express.

    Raises:
        ValueError: If the combination of arguments is invalid
    """
    if args.version or args.write_sample:
        return
    if bool(args.geometry) == bool(args.cases):
        raise ValueError("Exactly one of --geometry or --cases is required")
    if args.cases and args.sweep:
        raise ValueError("--sweep applies to --geometry runs only")
    if args.save_results:
        if args.cases:
            raise ValueError("--save-results applies to --geometry runs only")
        if Path(args.save_results).suffix.lower() not in SAVE_FORMATS:
            raise ValueError(f"--save-results must end in one of {', '.join(SAVE_FORMATS)}")
