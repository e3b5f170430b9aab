# src/orbit_kit/physics/orbit.py

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

from orbit_kit.core.constants import ECCENTRICITY_TOL
from orbit_kit.core.errors import OrbitNotInitializedError
from orbit_kit.core.frames import Vector3, cross, dot, norm, perifocal_to_eci, scale, sub
from orbit_kit.physics.gravity import (
    eccentric_to_true_anomaly,
    hyperbolic_to_true_anomaly,
    solve_hyperbolic_keplers_equation,
    solve_keplers_equation,
    true_to_eccentric_anomaly,
    true_to_hyperbolic_anomaly,
    wrap_to_2pi,
)

logger = logging.getLogger(__name__)

# |n| below this fraction of |h| means the orbit lies in the reference plane
_EQUATORIAL_TOL = 1e-11


class OrbitType(Enum):
    CIRCULAR = "circular"
    ELLIPTICAL = "elliptical"
    PARABOLIC = "parabolic"
    HYPERBOLIC = "hyperbolic"


def classify_eccentricity(e: float) -> OrbitType:
    if e < ECCENTRICITY_TOL:
        return OrbitType.CIRCULAR
    if abs(e - 1.0) <= ECCENTRICITY_TOL:
        return OrbitType.PARABOLIC
    if e < 1.0:
        return OrbitType.ELLIPTICAL
    return OrbitType.HYPERBOLIC


@dataclass(frozen=True)
class StateVector:
    """Cartesian position and velocity in a common inertial frame."""
    position: Vector3
    velocity: Vector3

    def __post_init__(self):
        if len(self.position) != 3 or len(self.velocity) != 3:
            raise ValueError("Position and velocity must have three components.")
        if not all(math.isfinite(x) for x in (*self.position, *self.velocity)):
            raise ValueError(f"State vector must be finite. Got: {self.position}, {self.velocity}")


@dataclass(frozen=True)
class OrbitalElements:
    """
    Classical orbital elements of an elliptic or hyperbolic orbit.

    Units:
        a: semi-major axis, same length unit as mu (negative for hyperbolae)
        e: eccentricity (e >= 0, e != 1)
        inc_rad: inclination in radians
        raan_rad: right ascension of ascending node in radians
        argp_rad: argument of periapsis in radians
        nu_rad: true anomaly in radians

    Circular orbits carry argp_rad = 0 and nu_rad is the argument of latitude
    (the true longitude when also equatorial); equatorial orbits carry
    raan_rad = 0.
    """
    a: float
    e: float
    inc_rad: float
    raan_rad: float
    argp_rad: float
    nu_rad: float

    def __post_init__(self):
        if not (math.isfinite(self.e) and self.e >= 0.0):
            raise ValueError(f"Eccentricity must be finite and non-negative. Got: {self.e}")
        if abs(self.e - 1.0) <= ECCENTRICITY_TOL:
            raise ValueError("Parabolic orbits (e = 1) have no finite semi-major axis.")
        if not math.isfinite(self.a):
            raise ValueError(f"Semi-major axis must be finite. Got: {self.a}")
        if self.e < 1.0 and self.a <= 0:
            raise ValueError(f"Semi-major axis must be positive for e < 1. Got: {self.a}")
        if self.e > 1.0 and self.a >= 0:
            raise ValueError(f"Semi-major axis must be negative for e > 1. Got: {self.a}")
        if not (0.0 <= self.inc_rad <= math.pi):
            raise ValueError(f"Inclination must be in range [0, π] radians. Got: {self.inc_rad}")
        if not math.isfinite(self.raan_rad):
            raise ValueError(f"RAAN must be finite. Got: {self.raan_rad}")
        if not math.isfinite(self.argp_rad):
            raise ValueError(f"Argument of periapsis must be finite. Got: {self.argp_rad}")
        if not math.isfinite(self.nu_rad):
            raise ValueError(f"True anomaly must be finite. Got: {self.nu_rad}")
        if self.e > 1.0 and 1.0 + self.e * math.cos(self.nu_rad) <= 0:
            raise ValueError(f"True anomaly {self.nu_rad} lies beyond the hyperbolic asymptote.")

    @property
    def p(self) -> float:
        """Semi-latus rectum a(1 - e^2)."""
        return self.a * (1.0 - self.e * self.e)

    @property
    def orbit_type(self) -> OrbitType:
        return classify_eccentricity(self.e)


def eccentricity_vector(r: Vector3, v: Vector3, mu: float) -> Vector3:
    """e = ((v^2 - mu/r) r - (r.v) v) / mu"""
    r_mag = norm(r)
    v2 = dot(v, v)
    return scale(sub(scale(r, v2 - mu / r_mag), scale(v, dot(r, v))), 1.0 / mu)


def _angle_about(a: Vector3, b: Vector3, h_hat: Vector3) -> float:
    # Angle from a to b measured positively about h_hat, in [0, 2pi)
    return wrap_to_2pi(math.atan2(dot(cross(a, b), h_hat), dot(a, b)))


def rv_to_coe(r: Vector3, v: Vector3, mu: float) -> OrbitalElements:
    """
    Convert a Cartesian state to classical orbital elements.

    Raises:
        ValueError for a zero position, rectilinear motion (h = 0) or a
        parabolic state.
    """
    r_mag = norm(r)
    if r_mag == 0:
        raise ValueError("Position vector must be non-zero.")
    h = cross(r, v)
    h_mag = norm(h)
    if h_mag == 0:
        raise ValueError("Rectilinear motion (zero angular momentum) has no orbital elements.")
    h_hat = scale(h, 1.0 / h_mag)

    e_vec = eccentricity_vector(r, v, mu)
    e = norm(e_vec)
    energy = dot(v, v) / 2.0 - mu / r_mag
    if abs(e - 1.0) <= ECCENTRICITY_TOL or energy == 0:
        raise ValueError("Parabolic orbits (e = 1) have no finite semi-major axis.")
    a = -mu / (2.0 * energy)

    inc = math.atan2(math.hypot(h[0], h[1]), h[2])

    # Node vector k x h
    n = (-h[1], h[0], 0.0)
    equatorial = norm(n) <= _EQUATORIAL_TOL * h_mag
    circular = e < ECCENTRICITY_TOL
    x_hat = (1.0, 0.0, 0.0)

    raan = 0.0 if equatorial else wrap_to_2pi(math.atan2(n[1], n[0]))
    line_of_nodes = x_hat if equatorial else n

    if circular:
        argp = 0.0
        nu = _angle_about(line_of_nodes, r, h_hat)
    else:
        argp = _angle_about(line_of_nodes, e_vec, h_hat)
        nu = _angle_about(e_vec, r, h_hat)

    return OrbitalElements(a=a, e=e, inc_rad=inc, raan_rad=raan, argp_rad=argp, nu_rad=nu)


def coe_to_rv(elements: OrbitalElements, mu: float) -> Tuple[Vector3, Vector3]:
    """
    Convert orbital elements to inertial position and velocity.

    Returns:
        r, v in the length/time units of mu
    """
    e = elements.e
    nu = elements.nu_rad
    p = elements.p

    r_mag = p / (1.0 + e * math.cos(nu))

    # Position and velocity in PQW
    r_pqw: Vector3 = (r_mag * math.cos(nu), r_mag * math.sin(nu), 0.0)
    k = math.sqrt(mu / p)
    v_pqw: Vector3 = (-k * math.sin(nu), k * (e + math.cos(nu)), 0.0)

    return perifocal_to_eci(r_pqw, v_pqw, elements.raan_rad, elements.inc_rad, elements.argp_rad)


class Orbit:
    """
    Two-body orbit around a body of gravitational parameter mu.

    Holds either a Cartesian state or classical elements and derives the
    other lazily; setting one representation invalidates the other.
    propagate() advances the orbit in place along its Keplerian conic.
    """

    def __init__(self, mu: float):
        if not (math.isfinite(mu) and mu > 0):
            raise ValueError(f"Gravitational parameter must be positive and finite. Got: {mu}")
        self._mu = mu
        self._init = False
        self._type: Optional[OrbitType] = None
        self._state_vector: Optional[StateVector] = None
        self._orbital_elements: Optional[OrbitalElements] = None

    @classmethod
    def from_state_vector(cls, state_vector: StateVector, mu: float) -> "Orbit":
        orbit = cls(mu)
        orbit.set_state_vector(state_vector)
        return orbit

    @classmethod
    def from_position_velocity(cls, position: Vector3, velocity: Vector3, mu: float) -> "Orbit":
        return cls.from_state_vector(StateVector(tuple(position), tuple(velocity)), mu)

    @classmethod
    def from_elements(cls, elements: OrbitalElements, mu: float) -> "Orbit":
        orbit = cls(mu)
        orbit.set_orbital_elements(elements)
        return orbit

    def set_state_vector(self, state_vector: StateVector) -> None:
        r = state_vector.position
        if norm(r) == 0:
            raise ValueError("Position vector must be non-zero.")
        self._state_vector = state_vector
        self._orbital_elements = None
        self._type = classify_eccentricity(norm(eccentricity_vector(r, state_vector.velocity, self._mu)))
        self._init = True

    def set_position_velocity(self, position: Vector3, velocity: Vector3) -> None:
        self.set_state_vector(StateVector(tuple(position), tuple(velocity)))

    def set_orbital_elements(self, elements: OrbitalElements) -> None:
        self._orbital_elements = elements
        self._state_vector = None
        self._type = elements.orbit_type
        self._init = True

    def _require_init(self) -> None:
        if not self._init:
            raise OrbitNotInitializedError("Orbit has no state; set a state vector or orbital elements first.")

    @property
    def state_vector(self) -> StateVector:
        self._require_init()
        if self._state_vector is None:
            r, v = coe_to_rv(self._orbital_elements, self._mu)
            self._state_vector = StateVector(r, v)
        return self._state_vector

    @property
    def orbital_elements(self) -> OrbitalElements:
        self._require_init()
        if self._orbital_elements is None:
            sv = self._state_vector
            self._orbital_elements = rv_to_coe(sv.position, sv.velocity, self._mu)
        return self._orbital_elements

    @property
    def mu(self) -> float:
        return self._mu

    @property
    def orbit_type(self) -> OrbitType:
        self._require_init()
        return self._type

    @property
    def is_init(self) -> bool:
        return self._init

    def propagate(self, time_of_flight: float) -> None:
        """
        Advance the orbit by time_of_flight (negative values propagate backwards).

        Raises:
            OrbitNotInitializedError: no state has been set
            ValueError: parabolic orbits cannot be propagated
        """
        self._require_init()
        if self._type is OrbitType.PARABOLIC:
            raise ValueError("Propagation of parabolic orbits is not supported.")
        if not math.isfinite(time_of_flight):
            raise ValueError(f"Time of flight must be finite. Got: {time_of_flight}")

        elements = self.orbital_elements
        a = elements.a
        e = elements.e

        if e < 1.0:
            n = math.sqrt(self._mu / (a ** 3))
            E0 = true_to_eccentric_anomaly(elements.nu_rad, e)
            M = E0 - e * math.sin(E0) + n * time_of_flight
            E = solve_keplers_equation(M, e)
            nu = eccentric_to_true_anomaly(E, e)
        else:
            n = math.sqrt(self._mu / ((-a) ** 3))
            H0 = true_to_hyperbolic_anomaly(elements.nu_rad, e)
            M = e * math.sinh(H0) - H0 + n * time_of_flight
            H = solve_hyperbolic_keplers_equation(M, e)
            nu = hyperbolic_to_true_anomaly(H, e)

        logger.debug("Propagated %s orbit by %g: nu %g -> %g", self._type.value, time_of_flight, elements.nu_rad, nu)
        self.set_orbital_elements(replace(elements, nu_rad=wrap_to_2pi(nu)))
