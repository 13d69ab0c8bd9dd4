"""
View factor between two planar polygons by double contour integration.

The boundary of each polygon is split into straight segments; every ordered
pair (segment of A, segment of B) contributes a 2D Gauss-Legendre sum of the
log-distance kernel. The total S gives

    F12 = |S| / (8 pi A1),   F21 = |S| / (8 pi A2)

so the reciprocity relation F12 A1 == F21 A2 holds by construction.

Preconditions (not checked unless validate=True): both polygons are planar
and simple, and neither surface crosses the plane of the other.
"""

from __future__ import annotations
import math
import logging
from concurrent.futures import ProcessPoolExecutor
from typing import Iterable, List, NamedTuple, Optional, Sequence

import numpy as np

from .area import projected_area
from .constants import DEFAULT_QUADRATURE_ORDER
from .contour import segment_row_integral
from .errors import DegenerateGeometryError, InvalidInputError
from .geometry import as_polygon, close_polygon, polygon_normal, segment_arrays, validate_pair
from .quadrature import check_order, gauss_legendre

logger = logging.getLogger(__name__)


class ViewFactorResult(NamedTuple):
    F12: float
    F21: float
    A1: float
    A2: float

    def reciprocity_residual(self) -> float:
        """|F12 A1 - F21 A2|; zero up to rounding."""
        return abs(self.F12 * self.A1 - self.F21 * self.A2)


def _row_sum(args) -> float:
    p1, p2, starts, ends, abscissas, weights = args
    # coincident quadrature points give ln(0); reported by contour_sum
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.sum(segment_row_integral(p1, p2, starts, ends, abscissas, weights)))


def _check_workers(workers: Optional[int]) -> Optional[int]:
    if workers is None:
        return None
    if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
        raise InvalidInputError(f"workers must be a positive integer, got {workers!r}")
    return workers


def contour_sum(polygon_a, polygon_b,
                quadrature_order: int = DEFAULT_QUADRATURE_ORDER,
                workers: Optional[int] = None) -> float:
    """
    Accumulate the double contour sum S over all segment pairs.

    Rows (one per segment of A, in order) are summed over the segments of B
    and then added in A order, so the result does not depend on `workers`.

    Args:
        polygon_a, polygon_b: (L, 3) vertex sequences
        quadrature_order: Gauss-Legendre points per segment
        workers: evaluate rows in a process pool of this size (None or 1 = serial)

    Returns:
        S (signed)

    Raises:
        DegenerateGeometryError: if S is not finite, which happens when the
            surfaces share a boundary segment
    """
    a = as_polygon(polygon_a, "polygon A")
    b = as_polygon(polygon_b, "polygon B")
    order = check_order(quadrature_order)
    workers = _check_workers(workers)
    abscissas, weights = gauss_legendre(order)

    starts_a, ends_a = segment_arrays(a)
    starts_b, ends_b = segment_arrays(b)
    tasks = [(p1, p2, starts_b, ends_b, abscissas, weights) for p1, p2 in zip(starts_a, ends_a)]

    if workers is not None and workers > 1:
        with ProcessPoolExecutor(max_workers=workers) as pool:
            rows = list(pool.map(_row_sum, tasks))
    else:
        rows = [_row_sum(task) for task in tasks]

    S = 0.0
    for row in rows:
        S += row
    if not math.isfinite(S):
        raise DegenerateGeometryError(
            f"Contour sum is not finite (S={S}): surfaces share a boundary segment"
        )
    logger.debug("Contour sum over %d x %d segments (order %d): S=%.10g", len(a), len(b), order, S)
    return S


def compute_view_factor(polygon_a, polygon_b,
                        quadrature_order: int = DEFAULT_QUADRATURE_ORDER,
                        *, validate: bool = False,
                        workers: Optional[int] = None) -> ViewFactorResult:
    """
    View factors between two planar polygons.

    Args:
        polygon_a: vertices of surface 1 in perimeter order, each listed once
        polygon_b: vertices of surface 2 in perimeter order, each listed once
        quadrature_order: Gauss-Legendre points per segment (default 7)
        validate: run the strict planarity / simplicity / plane-separation checks
        workers: optional process-pool size for the segment loop

    Returns:
        ViewFactorResult(F12, F21, A1, A2); A1 and A2 are positive areas.

    Raises:
        InvalidInputError: malformed polygons or order
        GeometryPreconditionError: a strict check failed (validate=True only)
        DegenerateGeometryError: a polygon has zero area, or the surfaces share
            a boundary segment
        NumericalNonConvergenceError: the quadrature rule could not be generated
    """
    a = as_polygon(polygon_a, "polygon A")
    b = as_polygon(polygon_b, "polygon B")
    order = check_order(quadrature_order)

    # normals first: a degenerate polygon should fail before the expensive loop
    n_a = polygon_normal(a)
    n_b = polygon_normal(b)
    if validate:
        validate_pair(a, b)

    S = contour_sum(a, b, order, workers=workers)

    A1 = abs(projected_area(close_polygon(a), n_a))
    A2 = abs(projected_area(close_polygon(b), n_b))
    F12 = abs(S) / (8.0 * math.pi * A1)
    F21 = abs(S) / (8.0 * math.pi * A2)
    logger.debug("A1=%.6g A2=%.6g F12=%.6g F21=%.6g", A1, A2, F12, F21)
    return ViewFactorResult(F12, F21, A1, A2)


def convergence_study(polygon_a, polygon_b, orders: Iterable[int],
                      workers: Optional[int] = None) -> List[ViewFactorResult]:
    """Evaluate the same geometry for each quadrature order in `orders`."""
    results = []
    for order in orders:
        res = compute_view_factor(polygon_a, polygon_b, order, workers=workers)
        logger.info("order=%d F12=%.8f F21=%.8f", order, res.F12, res.F21)
        results.append(res)
    return results


def successive_changes(values: Sequence[float]) -> List[float]:
    """Absolute change between consecutive entries (convergence diagnostic)."""
    return [abs(b - a) for a, b in zip(values[:-1], values[1:])]
