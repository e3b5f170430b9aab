"""
Lambert's problem in its minimal two-dimensional form.

The transfer is described by the triangle formed by r1 = 1, r2 and the chord
joining them: semi-perimeter s and chord c, in units where r1 = 1 and mu = 1.
The time-of-flight equation is solved for Battin's variable x in a rectified
plane ([log(x+1), log(tof)] for single-revolution transfers,
[tan(x*pi/2), tof] for multiple revolutions) where the curves are close to
linear, and the radial/tangential velocities at both ends are recovered from
the root.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from orbit_kit.core.config import DEFAULT_CONFIG, SolverConfig
from orbit_kit.core.errors import (
    DegenerateGeometryError,
    InvalidBranchSelectorError,
    InvalidGeometryError,
    InvalidRevolutionCountError,
    InvalidTimeOfFlightError,
)
from orbit_kit.lambert.time_of_flight import tof_curve, tof_curve_multi_rev
from orbit_kit.numerics.root_finding import regula_falsi

logger = logging.getLogger(__name__)

# Starting intervals for the root search in the rectified variable
ZERO_REV_INTERVAL: Tuple[float, float] = (math.log(1.0 - 0.5), math.log(1.0 + 0.5))
LEFT_BRANCH_INTERVAL: Tuple[float, float] = (
    math.tan(-0.5234 * math.pi / 2.0),
    math.tan(-0.2234 * math.pi / 2.0),
)
RIGHT_BRANCH_INTERVAL: Tuple[float, float] = (
    math.tan(0.7234 * math.pi / 2.0),
    math.tan(0.5234 * math.pi / 2.0),
)

# sin(theta/2) and eta below this are treated as zero
_DEGENERATE_EPS = 1e-12


class Branch(str, Enum):
    """Which of the two multi-revolution solutions to return."""
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def parse(cls, value: Union["Branch", str]) -> "Branch":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key in ("l", "left"):
                return cls.LEFT
            if key in ("r", "right"):
                return cls.RIGHT
        raise InvalidBranchSelectorError(
            f"invalid branch selector: {value!r} (expected 'left' or 'right')"
        )


@dataclass(frozen=True)
class TransferGeometry:
    """
    Transfer triangle in units of r1.

    s: semi-perimeter
    c: chord
    long_way: True for the transfer with theta > pi
    r2: second radius, 2s - c - 1
    theta: transfer angle (rad), in (pi, 2pi) for long-way transfers
    lam: sqrt(r2) * cos(theta/2) / s
    """
    s: float
    c: float
    long_way: bool
    r2: float
    theta: float
    lam: float

    @property
    def am(self) -> float:
        """Semi-major axis of the minimum energy ellipse."""
        return self.s / 2.0

    @classmethod
    def from_semi_perimeter(cls, s: float, c: float, long_way: bool) -> "TransferGeometry":
        if not (math.isfinite(s) and math.isfinite(c)) or c < 0:
            raise InvalidGeometryError(f"semi-perimeter and chord must be finite and non-negative. Got: s={s}, c={c}")
        if c > s:
            raise InvalidGeometryError(f"chord exceeds semi-perimeter bound: c={c} > s={s}")

        r2 = 2.0 * s - c - 1.0
        if r2 <= 0:
            raise InvalidGeometryError(f"s={s}, c={c} give a non-positive second radius r2={r2}")

        cos_theta = (1.0 - c * c) / r2 / 2.0 + r2 / 2.0
        if abs(cos_theta) > 1.0 + 1e-9:
            raise InvalidGeometryError(f"s={s}, c={c} do not form a triangle with r1 = 1")
        # s == c puts cos_theta on -1 up to rounding
        cos_theta = max(-1.0, min(1.0, cos_theta))

        theta = math.acos(cos_theta)
        if long_way:
            theta = 2.0 * math.pi - theta
        lam = math.sqrt(r2) * math.cos(theta / 2.0) / s
        return cls(s=s, c=c, long_way=bool(long_way), r2=r2, theta=theta, lam=lam)


@dataclass(frozen=True)
class LambertSolution:
    """
    Solution of the 2D Lambert problem (units r1 = 1, mu = 1).

    vr1, vt1: radial and tangential velocity at r1
    vr2, vt2: radial and tangential velocity at r2
    a: semi-major axis (negative for hyperbolae)
    p: parameter, a * (1 - e^2)
    x: Battin's variable at the root
    iterations: root search iterations; equal to the cap means no convergence
    converged: whether the residual met the tolerance
    """
    vr1: float
    vt1: float
    vr2: float
    vt2: float
    a: float
    p: float
    x: float
    iterations: int
    converged: bool
    geometry: TransferGeometry

    @property
    def is_hyperbolic(self) -> bool:
        return self.x >= 1.0

    @property
    def velocities(self) -> Tuple[float, float, float, float]:
        return (self.vr1, self.vt1, self.vr2, self.vt2)


def _check_inputs(s: float, c: float, tof: float, revolutions: int, branch) -> Branch:
    # Order matters: each failure is reported before any computation
    if not tof > 0:
        raise InvalidTimeOfFlightError(f"non-positive time of flight: tof={tof}")
    if c > s:
        raise InvalidGeometryError(f"chord exceeds semi-perimeter bound: c={c} > s={s}")
    parsed = Branch.parse(branch)
    if isinstance(revolutions, bool) or not isinstance(revolutions, int) or revolutions < 0:
        raise InvalidRevolutionCountError(f"revolution count must be a non-negative integer. Got: {revolutions!r}")
    return parsed


def recover_velocities(geometry: TransferGeometry, x: float) -> Tuple[float, float, float, float, float, float]:
    """
    Velocities, semi-major axis and parameter of the conic through x.

    Returns:
        (vr1, vt1, vr2, vt2, a, p)

    Raises:
        DegenerateGeometryError when a denominator vanishes (parabola x = 1,
        eta = 0) or the result is not finite.
    """
    s = geometry.s
    c = geometry.c
    am = geometry.am

    if x * x == 1.0:
        raise DegenerateGeometryError(f"x={x} has no finite semi-major axis (parabolic transfer)")
    a = am / (1.0 - x * x)

    if x < 1.0:
        # ellipse
        beta = 2.0 * math.asin(math.sqrt((s - c) / (2.0 * a)))
        if geometry.long_way:
            beta = -beta
        alfa = 2.0 * math.acos(x)
        psi = (alfa - beta) / 2.0
        eta2 = 2.0 * a * math.sin(psi) ** 2 / s
    else:
        # hyperbola
        beta = 2.0 * math.asinh(math.sqrt((c - s) / (2.0 * a)))
        if geometry.long_way:
            beta = -beta
        alfa = 2.0 * math.acosh(x)
        psi = (alfa - beta) / 2.0
        eta2 = -2.0 * a * math.sinh(psi) ** 2 / s

    eta = math.sqrt(eta2)
    if eta < _DEGENERATE_EPS:
        raise DegenerateGeometryError(f"eta={eta} vanishes at x={x}: straight-line transfer")

    half = geometry.theta / 2.0
    p = (geometry.r2 / (am * eta2)) * math.sin(half) ** 2
    sigma1 = (1.0 / (eta * math.sqrt(am))) * (2.0 * geometry.lam * am - (geometry.lam + x * eta))

    vr1 = sigma1
    vt1 = math.sqrt(p)
    vt2 = vt1 / geometry.r2
    # cot(theta/2) is finite at theta = pi; its poles at 0 and 2pi are rejected up front
    vr2 = -vr1 + (vt1 - vt2) * math.cos(half) / math.sin(half)

    out = (vr1, vt1, vr2, vt2, a, p)
    if not all(math.isfinite(v) for v in out):
        raise DegenerateGeometryError(f"non-finite solution at x={x}: {out}")
    return out


def lambert_2d(
    s: float,
    c: float,
    tof: float,
    long_way: bool,
    revolutions: int = 0,
    branch: Union[Branch, str] = Branch.LEFT,
    config: Optional[SolverConfig] = None,
) -> LambertSolution:
    """
    Solve the Lambert problem in its minimal two-dimensional formulation.

    Args:
        s: semi-perimeter of the triangle formed by r1 = 1, r2 and the chord
        c: chord joining r1 and r2
        tof: time of flight in units of sqrt(r1^3/mu)
        long_way: True selects the transfer with theta > pi
        revolutions: number of complete revolutions N (default 0)
        branch: left or right solution of the N > 0 time-of-flight curve
        config: iteration cap and tolerance of the root search

    Returns:
        LambertSolution. When the root search exhausts its iteration cap the
        best estimate is returned with converged=False and iterations equal to
        the cap; a warning is logged.

    Raises:
        InvalidTimeOfFlightError: tof <= 0
        InvalidGeometryError: c > s, or s and c do not form a triangle
        InvalidBranchSelectorError: branch not in {left, right}
        InvalidRevolutionCountError: revolutions < 0
        DegenerateGeometryError: rectilinear transfer (theta = 0 or 2pi), eta = 0
    """
    parsed_branch = _check_inputs(s, c, tof, revolutions, branch)
    config = config or DEFAULT_CONFIG

    geometry = TransferGeometry.from_semi_perimeter(s, c, long_way)
    if abs(math.sin(geometry.theta / 2.0)) < _DEGENERATE_EPS:
        raise DegenerateGeometryError(
            f"transfer angle theta={geometry.theta} is a multiple of 2*pi: the transfer plane is undefined"
        )

    if revolutions == 0:
        ia, ib = ZERO_REV_INTERVAL
        result = regula_falsi(
            lambda ix: tof_curve(ix, s, c, tof, long_way),
            ia, ib, config.max_iterations, config.tolerance,
        )
        x = math.exp(result.root) - 1.0
    else:
        ia, ib = LEFT_BRANCH_INTERVAL if parsed_branch is Branch.LEFT else RIGHT_BRANCH_INTERVAL
        result = regula_falsi(
            lambda ix: tof_curve_multi_rev(ix, s, c, tof, long_way, revolutions),
            ia, ib, config.max_iterations, config.tolerance,
        )
        x = math.atan(result.root) * 2.0 / math.pi

    if not result.converged:
        logger.warning(
            "Lambert time-of-flight search did not converge after %d/%d iterations "
            "(s=%g, c=%g, tof=%g, long_way=%s, N=%d, branch=%s, residual=%g)",
            result.iterations, config.max_iterations, s, c, tof, long_way,
            revolutions, parsed_branch.value, result.residual,
        )

    vr1, vt1, vr2, vt2, a, p = recover_velocities(geometry, x)
    return LambertSolution(
        vr1=vr1, vt1=vt1, vr2=vr2, vt2=vt2, a=a, p=p, x=x,
        iterations=result.iterations,
        converged=result.converged,
        geometry=geometry,
    )
