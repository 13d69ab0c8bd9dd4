"""
Area of a planar polygon in 3D by projection onto a coordinate plane.

Sunday's algorithm (geomalgorithms.com, "Area of Triangles and Polygons"):
drop the coordinate along which the normal is largest, apply the 2D
boundary sum to the remaining pair, and rescale by that normal component.
"""

from __future__ import annotations
import logging
from typing import Sequence

import numpy as np

from .geometry import as_polygon, close_polygon, polygon_normal

logger = logging.getLogger(__name__)

# dropped axis -> (a, b) coordinate pair, ordered so the projected winding is
# counter-clockwise when the normal component along the dropped axis is positive
_PROJECTIONS = {0: (1, 2), 1: (2, 0), 2: (0, 1)}


def dominant_axis(normal: Sequence[float]) -> int:
    """Index of the largest absolute normal component (ties go to x, then y)."""
    ax, ay, az = (abs(float(c)) for c in normal)
    if ax >= ay and ax >= az:
        return 0
    if ay >= az:
        return 1
    return 2


def projected_area(closed_vertices: np.ndarray, normal: Sequence[float]) -> float:
    """
    Signed area of a closed planar polygon.

    Args:
        closed_vertices: (n+1, 3) array whose last row repeats the first
        normal: unit normal of the polygon plane

    Returns:
        Signed area; positive when the vertices wind counter-clockwise about
        `normal`.
    """
    V = np.asarray(closed_vertices, dtype=float)
    N = np.asarray(normal, dtype=float)
    n = V.shape[0] - 1

    axis = dominant_axis(N)
    a, b = _PROJECTIONS[axis]

    interior = np.sum(V[1:n, a] * (V[2:n + 1, b] - V[0:n - 1, b]))
    wrap = V[n, a] * (V[1, b] - V[n - 1, b])
    area = float((interior + wrap) / (2.0 * N[axis]))
    logger.debug("Projected area over %d vertices: dropped axis %d, area %.10g", n, axis, area)
    return area


def polygon_area(vertices) -> float:
    """Unsigned area of an open vertex list (closes it and derives the normal)."""
    poly = as_polygon(vertices)
    return abs(projected_area(close_polygon(poly), polygon_normal(poly)))
