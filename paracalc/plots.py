# plots.py
# Plotly figures for the calculator pages
# ---------------------------------------
# - Surface mesh of f(x, y) (holes stay NaN so Plotly leaves gaps)
# - Critical point markers on top of the surface
# - Animated walk over SampledField.points (fixed cadence, restartable)

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import numpy as np
import plotly.graph_objects as go

from . import config
from .analysis import CriticalPoint, RangeLike, SampledField, as_range, evaluate_grid, resolve_engine
from .engine import ExpressionEngine

logger = logging.getLogger(__name__)

SCENE = dict(
    xaxis=dict(title="x", showgrid=True, gridcolor="rgba(255,255,255,0.06)"),
    yaxis=dict(title="y", showgrid=True, gridcolor="rgba(255,255,255,0.06)"),
    zaxis=dict(title="z = f(x, y)", showgrid=True, gridcolor="rgba(255,255,255,0.06)"),
    camera=dict(eye=dict(x=1.5, y=1.5, z=1.3)),
)


# ----------------------------
# 1) SURFACE GRID
# ----------------------------
def surface_grid(expression: str,
                 x_range: RangeLike = config.PLOT_WINDOW,
                 y_range: RangeLike = config.PLOT_WINDOW,
                 step: float = config.PLOT_STEP,
                 engine: Optional[ExpressionEngine] = None) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Mesh for the surface plot. ``Z[i, j]`` is f(xs[j], ys[i]) (Plotly layout)."""
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    xr, yr = as_range(x_range), as_range(y_range)

    xs = np.arange(xr.min, xr.max + step / 2, step)
    ys = np.arange(yr.min, yr.max + step / 2, step)
    X, Y = np.meshgrid(xs, ys, indexing="xy")
    Z = evaluate_grid(resolve_engine(engine), expression, X, Y)
    return xs, ys, Z


# ----------------------------
# 2) FIGURES
# ----------------------------
def surface_figure(expression: str, xs: np.ndarray, ys: np.ndarray, Z: np.ndarray,
                   candidates: Optional[List[CriticalPoint]] = None) -> go.Figure:
    fig = go.Figure()
    fig.add_trace(go.Surface(
        x=xs, y=ys, z=Z,
        name="f(x,y)",
        colorscale="Viridis",
        hovertemplate="x=%{x:.4f}<br>y=%{y:.4f}<br>z=%{z:.4f}<extra></extra>",
        showscale=False,
    ))

    if candidates:
        fig.add_trace(go.Scatter3d(
            x=[p.x for p in candidates],
            y=[p.y for p in candidates],
            z=[p.value for p in candidates],
            mode="markers",
            name="Candidatos críticos",
            marker=dict(size=6, color="#FF4B4B", line=dict(width=1, color="rgba(0,0,0,0.2)")),
            hovertemplate="x=%{x:.3f}<br>y=%{y:.3f}<br>z=%{z:.5f}<extra></extra>",
        ))

    fig.update_layout(
        template="plotly_dark",
        autosize=True,
        margin=dict(l=0, r=0, t=40, b=0),
        title=dict(text=f"f(x, y) = {expression}", font=dict(size=18)),
        scene=SCENE,
    )
    return fig


def _walk_frame(sampled: SampledField, k: int, trail: int) -> List[go.Scatter3d]:
    start = max(0, k - trail)
    path = sampled.points[start:k + 1]
    head = sampled.points[k]
    return [
        go.Scatter3d(
            x=[p.x for p in path], y=[p.y for p in path], z=[p.z for p in path],
            mode="lines",
            line=dict(color="rgba(30,144,255,0.8)", width=4),
        ),
        go.Scatter3d(
            x=[head.x], y=[head.y], z=[head.z],
            mode="markers",
            marker=dict(size=7, color="#FF4B4B"),
        ),
    ]


def walk_figure(expression: str, sampled: SampledField, stride: Optional[int] = None,
                frame_ms: int = 80, trail: int = 40, max_frames: int = 200) -> go.Figure:
    """Animated walk stepping through ``sampled.points`` in scan order.

    Frames are fixed once built, so replaying (or pressing Reiniciar) walks the
    same finite path again.
    """
    fig = go.Figure()
    pts = sampled.points
    if not pts:
        fig.update_layout(template="plotly_dark", title="Sin muestras finitas para animar", scene=SCENE)
        return fig

    if stride is None:
        stride = max(1, len(pts) // max_frames)
    indices = list(range(0, len(pts), stride))
    if indices[-1] != len(pts) - 1:
        indices.append(len(pts) - 1)

    fig.add_trace(go.Scatter3d(
        x=[p.x for p in pts], y=[p.y for p in pts], z=[p.z for p in pts],
        mode="markers",
        name="samples",
        marker=dict(size=2, color=[p.z for p in pts], colorscale="Viridis", opacity=0.35),
        hoverinfo="skip",
    ))
    for tr in _walk_frame(sampled, indices[0], trail):
        fig.add_trace(tr)

    fig.frames = [
        go.Frame(data=_walk_frame(sampled, k, trail), traces=[1, 2], name=str(n))
        for n, k in enumerate(indices)
    ]

    play = dict(frame=dict(duration=frame_ms, redraw=True), fromcurrent=True, transition=dict(duration=0))
    restart = dict(frame=dict(duration=frame_ms, redraw=True), mode="immediate", transition=dict(duration=0))
    fig.update_layout(
        template="plotly_dark",
        margin=dict(l=0, r=0, t=40, b=0),
        title=dict(text=f"Recorrido sobre f(x, y) = {expression}  |  z ∈ [{sampled.min:.4g}, {sampled.max:.4g}]"),
        scene=SCENE,
        showlegend=False,
        updatemenus=[dict(
            type="buttons",
            showactive=False,
            x=0.0, y=0.0, xanchor="left", yanchor="bottom",
            buttons=[
                dict(label="Reproducir", method="animate", args=[None, play]),
                dict(label="Pausa", method="animate",
                     args=[[None], dict(frame=dict(duration=0, redraw=False), mode="immediate")]),
                dict(label="Reiniciar", method="animate", args=[[fig.frames[0].name], restart]),
            ],
        )],
    )
    logger.debug("Walk figure for %r: %d frame(s), stride %d", expression, len(indices), stride)
    return fig
