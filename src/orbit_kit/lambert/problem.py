"""
Dimensional Lambert problem between two position vectors.

The problem is reduced to the 2D solver by measuring lengths in units of
|r1| and times in units of sqrt(|r1|^3 / mu); the radial and tangential
velocity components it returns are rotated back into the inertial frame.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Union

from orbit_kit.core.config import SolverConfig
from orbit_kit.core.errors import DegenerateGeometryError, InvalidTimeOfFlightError
from orbit_kit.core.frames import Vector3, add, cross, norm, scale, sub, unit
from orbit_kit.lambert.solver import Branch, LambertSolution, lambert_2d
from orbit_kit.physics.orbit import Orbit

logger = logging.getLogger(__name__)

# |r1 x r2| below this fraction of |r1||r2| means the positions are collinear
_COLLINEAR_TOL = 1e-12


@dataclass(frozen=True)
class LambertTransfer:
    """
    Transfer arc from r1 to r2 in time tof.

    v1, v2 are the inertial velocities at departure and arrival; solution
    is the underlying non-dimensional 2D solution.
    """
    r1: Vector3
    r2: Vector3
    v1: Vector3
    v2: Vector3
    tof: float
    mu: float
    solution: LambertSolution

    @property
    def converged(self) -> bool:
        return self.solution.converged

    @property
    def semi_major_axis(self) -> float:
        return self.solution.a * norm(self.r1)

    def departure_orbit(self) -> Orbit:
        return Orbit.from_position_velocity(self.r1, self.v1, self.mu)

    def arrival_orbit(self) -> Orbit:
        return Orbit.from_position_velocity(self.r2, self.v2, self.mu)


def solve_lambert(
    r1: Vector3,
    r2: Vector3,
    tof: float,
    mu: float,
    clockwise: bool = False,
    revolutions: int = 0,
    branch: Union[Branch, str] = Branch.LEFT,
    config: Optional[SolverConfig] = None,
) -> LambertTransfer:
    """
    Solve Lambert's problem for position vectors r1, r2 and time of flight tof.

    The transfer moves counter-clockwise about +z unless clockwise=True; the
    long-way (theta > pi) arc is picked accordingly.

    Args:
        r1: departure position
        r2: arrival position
        tof: time of flight (time unit of mu)
        mu: gravitational parameter
        clockwise: travel clockwise about +z
        revolutions: number of complete revolutions
        branch: left/right multi-revolution solution
        config: root search settings

    Returns:
        LambertTransfer

    Raises:
        InvalidTimeOfFlightError, InvalidGeometryError, InvalidBranchSelectorError,
        InvalidRevolutionCountError: bad inputs
        DegenerateGeometryError: r1 and r2 are collinear (transfer plane undefined)
        ValueError: zero-length position or non-positive mu
    """
    if not tof > 0:
        raise InvalidTimeOfFlightError(f"non-positive time of flight: tof={tof}")
    if not (math.isfinite(mu) and mu > 0):
        raise ValueError(f"Gravitational parameter must be positive and finite. Got: {mu}")

    R = norm(r1)
    r2_mag = norm(r2)
    if R == 0 or r2_mag == 0:
        raise ValueError("Position vectors must be non-zero.")

    # Non-dimensional units
    V = math.sqrt(mu / R)
    T = R / V

    h = cross(r1, r2)
    if norm(h) <= _COLLINEAR_TOL * R * r2_mag:
        raise DegenerateGeometryError("r1 and r2 are collinear: the transfer plane is undefined")

    c = norm(sub(r2, r1)) / R
    s = (1.0 + r2_mag / R + c) / 2.0

    long_way = h[2] < 0
    if clockwise:
        long_way = not long_way

    solution = lambert_2d(s, c, tof / T, long_way, revolutions, branch, config)

    ir1 = unit(r1)
    ir2 = unit(r2)
    ih = unit(h)
    if long_way:
        ih = scale(ih, -1.0)
    it1 = cross(ih, ir1)
    it2 = cross(ih, ir2)

    v1 = scale(add(scale(ir1, solution.vr1), scale(it1, solution.vt1)), V)
    v2 = scale(add(scale(ir2, solution.vr2), scale(it2, solution.vt2)), V)

    logger.debug(
        "Lambert transfer: theta=%.6f rad, x=%.12g, iterations=%d",
        solution.geometry.theta, solution.x, solution.iterations,
    )
    return LambertTransfer(r1=tuple(r1), r2=tuple(r2), v1=v1, v2=v2, tof=tof, mu=mu, solution=solution)
