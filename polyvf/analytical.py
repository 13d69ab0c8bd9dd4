"""
Closed-form view factors used to validate the contour integral.

Formulas are the standard catalogue results (Howell, "A Catalog of Radiation
Heat Transfer Configuration Factors"): coaxial parallel disks and directly
opposed parallel rectangles.
"""

from __future__ import annotations
import math
from typing import Any, Dict


def vf_coaxial_disks(r1: float, r2: float, separation: float) -> float:
    """
    F12 from disk 1 (radius r1) to a parallel coaxial disk 2 (radius r2).

      R1 = r1/h, R2 = r2/h, S = 1 + (1 + R2^2) / R1^2
      F12 = (S - sqrt(S^2 - 4 (r2/r1)^2)) / 2
    """
    if r1 <= 0 or r2 <= 0 or separation <= 0:
        raise ValueError("Radii and separation must be positive")
    R1 = r1 / separation
    R2 = r2 / separation
    S = 1.0 + (1.0 + R2 * R2) / (R1 * R1)
    return 0.5 * (S - math.sqrt(S * S - 4.0 * (r2 / r1) ** 2))


def vf_parallel_rectangles(a: float, b: float, separation: float) -> float:
    """
    F12 between two identical, directly opposed parallel rectangles a x b.

      X = a/c, Y = b/c
      F = 2/(pi X Y) * { ln sqrt((1+X^2)(1+Y^2)/(1+X^2+Y^2))
                         + X sqrt(1+Y^2) atan(X/sqrt(1+Y^2))
                         + Y sqrt(1+X^2) atan(Y/sqrt(1+X^2))
                         - X atan X - Y atan Y }
    """
    if a <= 0 or b <= 0 or separation <= 0:
        raise ValueError("Dimensions and separation must be positive")
    X = a / separation
    Y = b / separation
    x1 = math.sqrt(1.0 + X * X)
    y1 = math.sqrt(1.0 + Y * Y)
    total = (
        0.5 * math.log((x1 * x1 * y1 * y1) / (1.0 + X * X + Y * Y))
        + X * y1 * math.atan(X / y1)
        + Y * x1 * math.atan(Y / x1)
        - X * math.atan(X)
        - Y * math.atan(Y)
    )
    return 2.0 / (math.pi * X * Y) * total


def reference_view_factor(reference: Dict[str, Any]) -> float:
    """
    Dispatch a reference description (as found in YAML cases) to a closed form.

    Supported:
      {type: coaxial_disks, r1, r2, separation}
      {type: parallel_rectangles, a, b, separation}
    """
    kind = reference.get("type")
    if kind == "coaxial_disks":
        return vf_coaxial_disks(float(reference["r1"]), float(reference["r2"]),
                                float(reference["separation"]))
    if kind == "parallel_rectangles":
        return vf_parallel_rectangles(float(reference["a"]), float(reference["b"]),
                                      float(reference["separation"]))
    raise ValueError(f"Unknown reference type: {kind!r}")
