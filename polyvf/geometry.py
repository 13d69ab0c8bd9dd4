"""
Polygon utilities for contour-integral view factor calculations.

Polygons are (L, 3) float arrays of vertices in perimeter order, each vertex
listed once; the boundary is implicitly closed from the last vertex back to
the first. Helpers here normalise user input, derive segments and normals,
build common test surfaces, and provide the optional strict precondition
checks (planarity, simplicity, plane separation and shared boundary segments).
"""

from __future__ import annotations
import logging
from typing import Iterator, Sequence, Tuple

import numpy as np
from shapely.geometry import Polygon as ShapelyPolygon

from .constants import DEGENERATE_TOL, PLANARITY_TOL
from .errors import DegenerateGeometryError, GeometryPreconditionError, InvalidInputError

logger = logging.getLogger(__name__)


def _unit(v: np.ndarray) -> np.ndarray:
    n = np.linalg.norm(v)
    return v / n if n != 0 else v


def _orthonormal_basis(n: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """In-plane axes (t1, t2) completing the unit normal n to a right-handed frame."""
    n = _unit(np.asarray(n, dtype=float))
    # pick a vector not parallel to n
    tmp = np.array([1.0, 0.0, 0.0]) if abs(n[0]) < 0.9 else np.array([0.0, 1.0, 0.0])
    t1 = _unit(np.cross(n, tmp))
    t2 = np.cross(n, t1)
    return t1, t2, n


def _extent(vertices: np.ndarray) -> float:
    return float(np.max(np.ptp(vertices, axis=0)))


def as_polygon(vertices: Sequence[Sequence[float]], name: str = "polygon") -> np.ndarray:
    """
    Validate and convert a vertex sequence to an (L, 3) float array.

    A trailing vertex equal to the first one is treated as an explicit
    closing vertex and dropped.

    Raises:
        InvalidInputError: ragged or non-3D coordinates, non-finite values,
            or fewer than 3 distinct vertices
    """
    try:
        arr = np.array(vertices, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"{name}: vertices must be a sequence of (x, y, z) triples ({e})") from e

    if arr.ndim != 2 or arr.shape[1] != 3:
        raise InvalidInputError(f"{name}: expected shape (L, 3), got {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise InvalidInputError(f"{name}: vertices must be finite")
    if arr.shape[0] > 3 and np.array_equal(arr[0], arr[-1]):
        logger.debug("%s: dropping explicit closing vertex", name)
        arr = arr[:-1]
    if arr.shape[0] < 3:
        raise InvalidInputError(f"{name}: at least 3 vertices required, got {arr.shape[0]}")
    return arr


def close_polygon(vertices: np.ndarray) -> np.ndarray:
    """Return the vertices with the first one repeated at the end."""
    return np.vstack([vertices, vertices[:1]])


def segment_arrays(vertices: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Start and end points of every boundary segment, including the closing one."""
    return vertices, np.roll(vertices, -1, axis=0)


def iter_segments(vertices: np.ndarray) -> Iterator[Tuple[np.ndarray, np.ndarray]]:
    starts, ends = segment_arrays(vertices)
    for p, q in zip(starts, ends):
        yield p, q


def newell_normal(vertices: np.ndarray) -> np.ndarray:
    """Unnormalised Newell normal; its length is twice the polygon area."""
    nxt = np.roll(vertices, -1, axis=0)
    return np.array([
        np.sum((vertices[:, 1] - nxt[:, 1]) * (vertices[:, 2] + nxt[:, 2])),
        np.sum((vertices[:, 2] - nxt[:, 2]) * (vertices[:, 0] + nxt[:, 0])),
        np.sum((vertices[:, 0] - nxt[:, 0]) * (vertices[:, 1] + nxt[:, 1])),
    ])


def polygon_normal(vertices: np.ndarray) -> np.ndarray:
    """
    Unit normal of a planar polygon.

    Uses the cross product of the first two edges from vertex 0. If the first
    three vertices are collinear, falls back to the Newell normal, which spans
    the same plane.

    Raises:
        DegenerateGeometryError: if both estimates vanish (zero-area polygon)
    """
    scale2 = _extent(vertices) ** 2
    cp = np.cross(vertices[1] - vertices[0], vertices[2] - vertices[0])
    norm = np.linalg.norm(cp)
    if norm > DEGENERATE_TOL * scale2 and norm > 0.0:
        return cp / norm

    cp = newell_normal(vertices)
    norm = np.linalg.norm(cp)
    if norm > DEGENERATE_TOL * scale2 and norm > 0.0:
        logger.debug("First corner is collinear; using Newell normal")
        return cp / norm

    raise DegenerateGeometryError("Polygon normal is zero: polygon is degenerate (zero area)")


def rectangle(origin: Sequence[float], u: Sequence[float], v: Sequence[float]) -> np.ndarray:
    """Four corners o, o+u, o+u+v, o+v (counter-clockwise about u x v)."""
    o = np.asarray(origin, dtype=float)
    u = np.asarray(u, dtype=float)
    v = np.asarray(v, dtype=float)
    return np.array([o, o + u, o + u + v, o + v])


def regular_polygon(center: Sequence[float], normal: Sequence[float],
                    radius: float, sides: int) -> np.ndarray:
    """
    Regular N-gon inscribed in a circle, counter-clockwise about `normal`.
    Used to approximate circular disks.
    """
    if sides < 3:
        raise InvalidInputError(f"A regular polygon needs at least 3 sides, got {sides}")
    if radius <= 0:
        raise InvalidInputError("Radius must be positive")
    t1, t2, _ = _orthonormal_basis(normal)
    c = np.asarray(center, dtype=float)
    angles = np.linspace(0.0, 2.0 * np.pi, sides, endpoint=False)
    return c + radius * (np.cos(angles)[:, None] * t1 + np.sin(angles)[:, None] * t2)


# ------------------------------------------------------------------
# Optional strict precondition checks
# ------------------------------------------------------------------

def plane_residual(vertices: np.ndarray) -> float:
    """Largest distance of any vertex from the least-squares plane."""
    pts = np.asarray(vertices, float)
    c = pts.mean(axis=0)
    _, _, vt = np.linalg.svd(pts - c)
    n = vt[-1]
    return float(np.max(np.abs((pts - c) @ n)))


def check_coplanar(vertices: np.ndarray, name: str = "polygon", tol: float = PLANARITY_TOL) -> None:
    residual = plane_residual(vertices)
    if residual > tol * _extent(vertices):
        raise GeometryPreconditionError(f"{name} is not planar (max plane residual {residual:.3e})")


def to_plane_2d(vertices: np.ndarray, normal: np.ndarray) -> np.ndarray:
    """In-plane (u, v) coordinates of the vertices."""
    t1, t2, _ = _orthonormal_basis(normal)
    rel = vertices - vertices[0]
    return np.column_stack((rel @ t1, rel @ t2))


def check_simple(vertices: np.ndarray, name: str = "polygon") -> None:
    """Raise if the polygon boundary self-intersects."""
    uv = to_plane_2d(vertices, polygon_normal(vertices))
    poly = ShapelyPolygon(uv)
    if not poly.is_valid:
        raise GeometryPreconditionError(f"{name} is self-intersecting")


def check_plane_separation(surface: np.ndarray, other: np.ndarray,
                           surface_name: str = "surface", other_name: str = "other",
                           tol: float = PLANARITY_TOL) -> None:
    """
    Raise if `other` has vertices strictly on both sides of the plane of `surface`.
    Vertices lying in the plane are allowed.
    """
    n = polygon_normal(surface)
    d = (other - surface[0]) @ n
    band = tol * max(_extent(surface), _extent(other))
    if np.any(d > band) and np.any(d < -band):
        raise GeometryPreconditionError(f"{other_name} intersects the plane of {surface_name}")


def check_shared_boundary(polygon_a: np.ndarray, polygon_b: np.ndarray,
                          name_a: str = "polygon A", name_b: str = "polygon B",
                          tol: float = PLANARITY_TOL) -> None:
    """
    Raise if a boundary segment of one polygon overlaps a segment of the other
    along a common line over a non-zero length. Touching at a single point is allowed.
    """
    starts_b, ends_b = segment_arrays(polygon_b)
    band = tol * max(_extent(polygon_a), _extent(polygon_b))
    for p, q in iter_segments(polygon_a):
        length = float(np.linalg.norm(q - p))
        if length == 0.0:
            continue
        u = (q - p) / length
        rel_s = starts_b - p
        rel_e = ends_b - p
        on_line = ((np.linalg.norm(np.cross(rel_s, u), axis=1) <= band)
                   & (np.linalg.norm(np.cross(rel_e, u), axis=1) <= band))
        ts = rel_s @ u
        te = rel_e @ u
        overlap = np.minimum(np.maximum(ts, te), length) - np.maximum(np.minimum(ts, te), 0.0)
        if np.any(on_line & (overlap > band)):
            raise GeometryPreconditionError(f"{name_a} and {name_b} share a boundary segment")


def validate_pair(polygon_a: np.ndarray, polygon_b: np.ndarray) -> None:
    """Run every strict precondition check on a polygon pair."""
    for name, poly in (("polygon A", polygon_a), ("polygon B", polygon_b)):
        check_coplanar(poly, name)
        check_simple(poly, name)
    check_plane_separation(polygon_a, polygon_b, "polygon A", "polygon B")
    check_plane_separation(polygon_b, polygon_a, "polygon B", "polygon A")
    check_shared_boundary(polygon_a, polygon_b)
