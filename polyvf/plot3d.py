"""
Interactive 3D view of a polygon pair (Plotly HTML).
"""

from __future__ import annotations
from pathlib import Path

import numpy as np


def _edge_loop(poly: np.ndarray):
    loop = np.vstack([poly, poly[0:1]])
    return loop[:, 0], loop[:, 1], loop[:, 2]


def _fan_mesh(poly: np.ndarray, name: str, color: str):
    """Triangle fan from vertex 0; exact for convex polygons, indicative otherwise."""
    import plotly.graph_objects as go
    n = len(poly)
    i = np.zeros(n - 2, dtype=int)
    j = np.arange(1, n - 1)
    k = np.arange(2, n)
    return go.Mesh3d(x=poly[:, 0], y=poly[:, 1], z=poly[:, 2], i=i, j=j, k=k,
                     color=color, opacity=0.6, name=name,
                     flatshading=True, showscale=False)


def plot_geometry_3d(polygon_a, polygon_b, out_html: str | Path, *, title: str | None = None,
                     return_fig: bool = False):
    """
    Write both surfaces as filled meshes with boundary outlines to an HTML file.
    """
    import plotly.graph_objects as go

    traces = []
    for poly, name, color in ((polygon_a, "Surface A", "red"), (polygon_b, "Surface B", "black")):
        poly = np.asarray(poly, dtype=float)
        traces.append(_fan_mesh(poly, name, color))
        x, y, z = _edge_loop(poly)
        traces.append(go.Scatter3d(x=x, y=y, z=z, mode="lines",
                                   line=dict(width=3, color=color),
                                   name=f"{name} edge", showlegend=False))

    fig = go.Figure(data=traces)
    fig.update_layout(title=title or "Surface A / Surface B - 3D",
                      scene_aspectmode="data",
                      legend=dict(orientation="h", y=1.02, x=0.0))
    out_html = Path(out_html)
    out_html.parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(str(out_html), include_plotlyjs="cdn")
    if return_fig:
        return fig
    return out_html
