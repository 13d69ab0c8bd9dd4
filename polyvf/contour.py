"""
Kernel of the double contour integral for view factors.

By Stokes' theorem the view factor double area integral reduces to

    F12 = 1 / (2 pi A1) * sum over segment pairs of  ∮∮ ln(R) dr1 . dr2

Each straight segment is parameterised on [-1, 1] so a 2D Gauss-Legendre rule
can integrate the pair; the Jacobian (1/2 per segment) is folded into the
8 pi normalisation applied by the assembler.

Accuracy degrades for segments that touch or nearly touch: ln(R) -> -inf as
R -> 0 and the rule has no special treatment for that singularity.
"""

from __future__ import annotations
import numpy as np


def contour_integrand(s, t, p1, p2, p3, p4):
    """
    Integrand for one segment pair.

    Args:
        s: parameter(s) on segment 2 (P3 -> P4), in [-1, 1]
        t: parameter(s) on segment 1 (P1 -> P2), in [-1, 1]
        p1, p2: endpoints of segment 1
        p3, p4: endpoints of segment 2

    Returns:
        ln(|x2(s) - x1(t)|) * ((P2 - P1) . (P4 - P3)), broadcast over s and t.
    """
    s = np.asarray(s, dtype=float)
    t = np.asarray(t, dtype=float)
    p1, p2, p3, p4 = (np.asarray(p, dtype=float) for p in (p1, p2, p3, p4))
    d1 = p2 - p1
    d2 = p4 - p3

    x1 = p1 + ((t + 1.0) / 2.0)[..., None] * d1
    x2 = p3 + ((s + 1.0) / 2.0)[..., None] * d2
    r = np.linalg.norm(x2 - x1, axis=-1)
    return np.log(r) * np.dot(d1, d2)


def segment_pair_integral(p1, p2, p3, p4, abscissas: np.ndarray, weights: np.ndarray) -> float:
    """sum_k sum_m w_k w_m INT(a_k, a_m) for a single segment pair."""
    S, T = np.meshgrid(abscissas, abscissas, indexing="ij")
    return float(np.sum(np.outer(weights, weights) * contour_integrand(S, T, p1, p2, p3, p4)))


def segment_row_integral(p1: np.ndarray, p2: np.ndarray,
                         starts: np.ndarray, ends: np.ndarray,
                         abscissas: np.ndarray, weights: np.ndarray) -> np.ndarray:
    """
    Quadrature sums of segment (p1 -> p2) against many segments at once.

    Args:
        p1, p2: endpoints of the fixed segment
        starts, ends: (M, 3) endpoints of the other polygon's segments
        abscissas, weights: Gauss-Legendre rule

    Returns:
        (M,) array; entry j equals segment_pair_integral(p1, p2, starts[j], ends[j], ...)
    """
    d1 = p2 - p1
    d2 = ends - starts                                    # (M, 3)
    x1 = p1 + ((abscissas + 1.0) / 2.0)[:, None] * d1     # (GP, 3) points at t
    x2 = starts[:, None, :] + ((abscissas + 1.0) / 2.0)[None, :, None] * d2[:, None, :]  # (M, GP, 3) at s

    diff = x2[:, :, None, :] - x1[None, None, :, :]       # (M, GP_s, GP_t, 3)
    log_r = np.log(np.linalg.norm(diff, axis=-1))
    w2 = np.outer(weights, weights)
    return np.einsum("jkm,km->j", log_r, w2) * (d2 @ d1)
