"""
Gauss-Legendre quadrature rules.

Abscissas are the roots of the degree-n Legendre polynomial, located by
Newton-Raphson from the standard asymptotic initial estimate; weights follow
from the polynomial derivative at each root (Numerical Recipes, gauleg).
"""

from __future__ import annotations
import math
import numbers
import logging
from typing import Callable, Tuple

import numpy as np

from .constants import EPS, MAX_NEWTON_ITERATIONS
from .errors import InvalidInputError, NumericalNonConvergenceError

logger = logging.getLogger(__name__)


def _legendre_with_derivative(n: int, z: float) -> Tuple[float, float, float]:
    """
    Evaluate P_n(z), P_{n-1}(z) and P'_n(z) with the three-term recurrence
      P_k = ((2k-1) z P_{k-1} - (k-1) P_{k-2}) / k,   P_0 = 1, P_-1 = 0
    """
    p1, p2 = 1.0, 0.0
    for k in range(1, n + 1):
        p3 = p2
        p2 = p1
        p1 = ((2.0 * k - 1.0) * z * p2 - (k - 1.0) * p3) / k
    pp = n * (z * p1 - p2) / (z * z - 1.0)
    return p1, p2, pp


def check_order(n) -> int:
    """Return n as an int, raising InvalidInputError unless it is an integer >= 1."""
    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        raise InvalidInputError(f"Quadrature order must be an integer, got {n!r}")
    if n < 1:
        raise InvalidInputError(f"Quadrature order must be >= 1, got {n}")
    return int(n)


def gauss_legendre(
    n: int,
    eps: float = EPS,
    max_iter: int = MAX_NEWTON_ITERATIONS,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Generate an n-point Gauss-Legendre rule on [-1, 1].

    Args:
        n: Number of points (>= 1)
        eps: Convergence threshold on successive Newton iterates
        max_iter: Maximum Newton updates per root

    Returns:
        (abscissas, weights), both of length n; abscissas strictly increasing.
        The rule is exact for polynomials of degree <= 2n - 1.

    Raises:
        InvalidInputError: If n is not a positive integer
        NumericalNonConvergenceError: If a root fails to converge within max_iter
    """
    n = check_order(n)
    abscissas = np.zeros(n)
    weights = np.zeros(n)

    for i in range(1, (n + 1) // 2 + 1):
        z = math.cos(math.pi * (i - 0.25) / (n + 0.5))
        for _ in range(max_iter):
            p1, _p2, pp = _legendre_with_derivative(n, z)
            z_prev = z
            z = z_prev - p1 / pp
            if abs(z - z_prev) <= eps:
                break
        else:
            raise NumericalNonConvergenceError(
                f"Legendre root {i} of P_{n} did not converge in {max_iter} iterations "
                f"(last step {abs(z - z_prev):.3e})"
            )

        w = 2.0 / ((1.0 - z * z) * pp * pp)
        abscissas[i - 1] = -z
        abscissas[n - i] = z
        weights[i - 1] = w
        weights[n - i] = w

    logger.debug("Generated %d-point Gauss-Legendre rule", n)
    return abscissas, weights


def integrate(func: Callable[[np.ndarray], np.ndarray], n: int,
              a: float = -1.0, b: float = 1.0) -> float:
    """Integrate func over [a, b] with an n-point rule (func must accept arrays)."""
    x, w = gauss_legendre(n)
    half = 0.5 * (b - a)
    mid = 0.5 * (b + a)
    return float(half * np.sum(w * func(mid + half * x)))
