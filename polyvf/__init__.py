"""
Polygon View Factor Tool

Radiative view factors between arbitrary planar polygons in 3D by double
contour integration with Gauss-Legendre quadrature.
"""

__version__ = "1.0.0"

from .view_factor import compute_view_factor, contour_sum, convergence_study, ViewFactorResult
from .quadrature import gauss_legendre
from .area import projected_area, polygon_area
from .errors import (
    ViewFactorError,
    InvalidInputError,
    GeometryPreconditionError,
    DegenerateGeometryError,
    NumericalNonConvergenceError,
)

__all__ = [
    "compute_view_factor",
    "contour_sum",
    "convergence_study",
    "ViewFactorResult",
    "gauss_legendre",
    "projected_area",
    "polygon_area",
    "ViewFactorError",
    "InvalidInputError",
    "GeometryPreconditionError",
    "DegenerateGeometryError",
    "NumericalNonConvergenceError",
]
