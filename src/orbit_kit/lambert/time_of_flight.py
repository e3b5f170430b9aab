"""
Time of flight of a conic arc as a function of Battin's variable x.

Units are non-dimensional: r1 = 1, mu = 1. The geometry is given by the
semi-perimeter s and the chord c of the triangle (r1, r2, chord).
"""

from __future__ import annotations

import math


def x2tof(x: float, s: float, c: float, long_way: bool, revolutions: int = 0) -> float:
    """
    Time of flight implied by Battin's variable x.

    x < 1 is an ellipse (a = am / (1 - x^2) > 0), x > 1 a hyperbola, x == 1 the
    parabola. Lagrange's equation is used in each regime; for multiple
    revolutions each full orbit adds 2*pi*a^1.5.

    Args:
        x: Battin's variable, x > -1
        s: semi-perimeter
        c: chord
        long_way: True selects the transfer with theta > pi
        revolutions: number of complete revolutions (ellipses only)

    Returns:
        Time of flight in units of sqrt(r1^3/mu). math.inf where the curve is
        unbounded (x <= -1, or x >= 1 with revolutions > 0).
    """
    if x <= -1.0:
        return math.inf
    if x >= 1.0 and revolutions > 0:
        return math.inf
    if x == 1.0:
        return parabolic_tof(s, c, long_way)

    am = s / 2.0
    a = am / (1.0 - x * x)

    if x < 1.0:
        beta = 2.0 * math.asin(math.sqrt((s - c) / (2.0 * a)))
        if long_way:
            beta = -beta
        alfa = 2.0 * math.acos(x)
        return a * math.sqrt(a) * (
            (alfa - math.sin(alfa)) - (beta - math.sin(beta)) + 2.0 * math.pi * revolutions
        )

    alfa = 2.0 * math.acosh(x)
    beta = 2.0 * math.asinh(math.sqrt((s - c) / (-2.0 * a)))
    if long_way:
        beta = -beta
    return -a * math.sqrt(-a) * ((math.sinh(alfa) - alfa) - (math.sinh(beta) - beta))


def parabolic_tof(s: float, c: float, long_way: bool) -> float:
    """Euler's parabolic time of flight: sqrt(2)/3 * (s^1.5 -/+ (s - c)^1.5)."""
    sign = 1.0 if long_way else -1.0
    return math.sqrt(2.0) / 3.0 * (s ** 1.5 + sign * (s - c) ** 1.5)


def tof_curve(ix: float, s: float, c: float, tof: float, long_way: bool) -> float:
    """
    Zero-revolution residual in the rectified plane.

    ix = log(x + 1); returns log(T(x)) - log(tof).
    """
    t = x2tof(math.exp(ix) - 1.0, s, c, long_way, 0)
    if t <= 0.0:
        # underflow deep in the hyperbolic tail
        return -math.inf
    return math.log(t) - math.log(tof)


def tof_curve_multi_rev(ix: float, s: float, c: float, tof: float, long_way: bool, revolutions: int) -> float:
    """
    Multi-revolution residual.

    ix = tan(x * pi / 2), which maps x in (-1, 1) onto the real line;
    returns T(x) - tof.
    """
    return x2tof(math.atan(ix) * 2.0 / math.pi, s, c, long_way, revolutions) - tof
