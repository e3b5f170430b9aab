from __future__ import annotations

import math
from typing import List, Optional, Sequence

import plotly.graph_objects as go

from orbit_kit.lambert.solver import LambertSolution, TransferGeometry
from orbit_kit.lambert.time_of_flight import x2tof


def _sample_x(revolutions: int, n_points: int) -> List[float]:
    # Open interval: the curve is unbounded at x = -1 (and at x = 1 for N > 0)
    lo, hi = -0.99, (0.99 if revolutions > 0 else 5.0)
    step = (hi - lo) / (n_points - 1)
    return [lo + i * step for i in range(n_points)]


def tof_curve_figure(
    s: float,
    c: float,
    long_way: bool,
    revolutions: int = 0,
    tof: Optional[float] = None,
    solutions: Sequence[LambertSolution] = (),
    n_points: int = 400,
) -> go.Figure:
    """
    Time-of-flight curve of a transfer in the rectified plane used by the solver:
      - N = 0: log(x + 1) against log(T)
      - N > 0: tan(x pi / 2) against T
    plus an optional horizontal line at the requested tof and a marker per
    solution. The figure is returned, not written.
    """
    if n_points < 2:
        raise ValueError(f"n_points must be at least 2. Got: {n_points}")
    geometry = TransferGeometry.from_semi_perimeter(s, c, long_way)
    multi_rev = revolutions > 0

    def u_of(x: float) -> float:
        return math.tan(x * math.pi / 2.0) if multi_rev else math.log(x + 1.0)

    def w_of(t: float) -> float:
        return t if multi_rev else math.log(t)

    us = []
    ws = []
    for x in _sample_x(revolutions, n_points):
        t = x2tof(x, s, c, long_way, revolutions)
        if not math.isfinite(t) or t <= 0:
            continue
        us.append(u_of(x))
        ws.append(w_of(t))

    fig = go.Figure()
    fig.add_trace(go.Scatter(x=us, y=ws, mode="lines", name=f"N={revolutions}"))

    if tof is not None:
        fig.add_trace(go.Scatter(
            x=[us[0], us[-1]], y=[w_of(tof), w_of(tof)],
            mode="lines",
            name="target tof",
            line=dict(dash="dash"),
        ))

    for i, sol in enumerate(solutions):
        t = x2tof(sol.x, s, c, long_way, revolutions)
        fig.add_trace(go.Scatter(
            x=[u_of(sol.x)], y=[w_of(t)],
            mode="markers",
            name=f"solution {i} (x={sol.x:.6f})",
            marker=dict(size=8),
        ))

    way = "long way" if long_way else "short way"
    fig.update_layout(
        title=f"Time of flight, s={s:g}, c={c:g}, θ={math.degrees(geometry.theta):.2f}° ({way})",
        xaxis_title="tan(x·π/2)" if multi_rev else "log(x + 1)",
        yaxis_title="T" if multi_rev else "log(T)",
        margin=dict(l=40, r=20, t=50, b=40),
        legend=dict(orientation="h"),
    )
    return fig
