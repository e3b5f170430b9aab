# Two-body Kepler equations

from __future__ import annotations

import math


def wrap_to_2pi(angle_rad: float) -> float:
    """Wrap angle to [0, 2pi)."""
    two_pi = 2.0 * math.pi
    return angle_rad % two_pi


def solve_keplers_equation(M_rad: float, e: float, tol: float = 1e-12, max_iter: int = 50) -> float:
    """
    Eccentric anomaly E of an ellipse (0 <= e < 1) from Newton iterations on
        f(E) = E - e sin(E) - M

    f' = 1 - e cos(E) >= 1 - e stays positive, so every step is defined.

    Returns:
        E_rad wrapped to [0, 2pi)
    """
    if not (0.0 <= e < 1.0):
        raise ValueError("Elliptic Kepler solver requires 0 <= e < 1.")

    M = wrap_to_2pi(M_rad)
    # M + e sin M is within e^2 of the root; starting from pi converges for any e
    E = M + e * math.sin(M) if e < 0.8 else math.pi

    for _ in range(max_iter):
        step = (E - e * math.sin(E) - M) / (1.0 - e * math.cos(E))
        E -= step
        if abs(step) < tol:
            return wrap_to_2pi(E)

    raise RuntimeError(f"Elliptic Kepler solver did not converge in {max_iter} iterations (M={M_rad}, e={e}).")


def solve_hyperbolic_keplers_equation(M_rad: float, e: float, tol: float = 1e-12, max_iter: int = 100) -> float:
    """
    Hyperbolic anomaly H (e > 1) from Newton iterations on
        f(H) = e sinh(H) - H - M

    f is convex on each side of H = 0 and f' = e cosh(H) - 1 >= e - 1, so
    from the log starting guess Newton converges monotonically after at most
    one overshoot, including near-parabolic orbits with e -> 1.

    Args:
        M_rad: hyperbolic mean anomaly (unbounded, not wrapped)
        e: eccentricity (e > 1)

    Returns:
        H
    """
    if not e > 1.0:
        raise ValueError("Hyperbolic Kepler solver requires e > 1.")

    H = math.copysign(math.log(2.0 * abs(M_rad) / e + 1.8), M_rad)

    for _ in range(max_iter):
        step = (e * math.sinh(H) - H - M_rad) / (e * math.cosh(H) - 1.0)
        H -= step
        if abs(step) < tol * max(1.0, abs(H)):
            return H

    raise RuntimeError(f"Hyperbolic Kepler solver did not converge in {max_iter} iterations (M={M_rad}, e={e}).")


def true_to_eccentric_anomaly(nu_rad: float, e: float) -> float:
    """Eccentric anomaly E (elliptic) from true anomaly."""
    return math.atan2(math.sqrt(1.0 - e * e) * math.sin(nu_rad), e + math.cos(nu_rad))


def eccentric_to_true_anomaly(E_rad: float, e: float) -> float:
    sin_v = math.sqrt(1.0 - e * e) * math.sin(E_rad)
    cos_v = math.cos(E_rad) - e
    return math.atan2(sin_v, cos_v)


def true_to_hyperbolic_anomaly(nu_rad: float, e: float) -> float:
    """Hyperbolic anomaly H from true anomaly (|nu| below the asymptote angle)."""
    return 2.0 * math.atanh(math.sqrt((e - 1.0) / (e + 1.0)) * math.tan(nu_rad / 2.0))


def hyperbolic_to_true_anomaly(H: float, e: float) -> float:
    return 2.0 * math.atan(math.sqrt((e + 1.0) / (e - 1.0)) * math.tanh(H / 2.0))
