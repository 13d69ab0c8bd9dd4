"""
Matplotlib plots for view factor convergence studies.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Optional, Sequence

import numpy as np


def _ensure_headless_matplotlib() -> None:
    import matplotlib
    if os.name == "nt" or not os.environ.get("DISPLAY"):
        matplotlib.use("Agg")


def plot_convergence(orders: Sequence[int], f12: Sequence[float], out_png: str | Path,
                     reference: Optional[float] = None, title: str | None = None) -> Path:
    """
    Plot F12 against quadrature order, with the absolute change between
    successive orders on a log axis underneath.

    Args:
        orders: Quadrature orders evaluated
        f12: F12 for each order
        out_png: Output PNG path
        reference: Optional closed-form value drawn as a horizontal line
        title: Optional figure title

    Returns:
        Path of the written PNG
    """
    _ensure_headless_matplotlib()
    import matplotlib.pyplot as plt

    orders = np.asarray(orders, dtype=int)
    f12 = np.asarray(f12, dtype=float)

    fig, (ax_vf, ax_dv) = plt.subplots(2, 1, figsize=(7, 7), sharex=True)
    ax_vf.plot(orders, f12, "o-", color="tab:blue", label="F12 (contour integral)")
    if reference is not None:
        ax_vf.axhline(reference, color="black", linestyle="--", linewidth=1.0,
                      label=f"reference = {reference:.6f}")
    ax_vf.set_ylabel("F12")
    ax_vf.grid(True, alpha=0.3)
    ax_vf.legend(loc="best")

    if len(orders) > 1:
        dv = np.abs(np.diff(f12))
        # zero changes cannot be drawn on a log axis
        dv = np.where(dv > 0, dv, np.nan)
        ax_dv.semilogy(orders[1:], dv, "s-", color="tab:red")
    ax_dv.set_xlabel("Gauss-Legendre points per segment")
    ax_dv.set_ylabel("|ΔF12|")
    ax_dv.grid(True, which="both", alpha=0.3)

    fig.suptitle(title or "View factor convergence")
    fig.tight_layout()
    out_png = Path(out_png)
    out_png.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(out_png, dpi=150)
    plt.close(fig)
    return out_png
