"""
Exception types raised by the view factor calculation.
"""


class ViewFactorError(Exception):
    """Base class for all polyvf errors."""
    pass


class InvalidInputError(ViewFactorError, ValueError):
    """Raised when polygons or the quadrature order are malformed."""
    pass


class GeometryPreconditionError(InvalidInputError):
    """Raised by strict validation when a surface is non-planar, self-intersecting,
    or crosses the plane of the other surface."""
    pass


class DegenerateGeometryError(ViewFactorError, ValueError):
    """Raised when a polygon has no well-defined normal (zero area)."""
    pass


class NumericalNonConvergenceError(ViewFactorError, ArithmeticError):
    """Raised when Newton refinement of a Legendre root exceeds its iteration cap."""
    pass


class YamlError(ViewFactorError):
    """Exception raised for YAML loading and validation errors."""
    pass
