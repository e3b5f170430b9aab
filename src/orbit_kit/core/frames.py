from __future__ import annotations

import math
from typing import Tuple

Vector3 = Tuple[float, float, float]


def rot3(angle_rad: float, v: Vector3) -> Vector3:
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    x, y, z = v
    return (c * x - s * y, s * x + c * y, z)


def rot1(angle_rad: float, v: Vector3) -> Vector3:
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    x, y, z = v
    return (x, c * y - s * z, s * y + c * z)


def dot(a: Vector3, b: Vector3) -> float:
    return a[0]*b[0] + a[1]*b[1] + a[2]*b[2]


def cross(a: Vector3, b: Vector3) -> Vector3:
    return (
        a[1]*b[2] - a[2]*b[1],
        a[2]*b[0] - a[0]*b[2],
        a[0]*b[1] - a[1]*b[0],
    )


def add(a: Vector3, b: Vector3) -> Vector3:
    return (a[0]+b[0], a[1]+b[1], a[2]+b[2])


def sub(a: Vector3, b: Vector3) -> Vector3:
    return (a[0]-b[0], a[1]-b[1], a[2]-b[2])


def scale(v: Vector3, k: float) -> Vector3:
    return (v[0]*k, v[1]*k, v[2]*k)


def norm(a: Vector3) -> float:
    return math.sqrt(dot(a, a))


def unit(a: Vector3) -> Vector3:
    """Unit vector along a. Raises ValueError for the zero vector."""
    n = norm(a)
    if n == 0:
        raise ValueError("Cannot normalize a zero vector.")
    return (a[0]/n, a[1]/n, a[2]/n)


def perifocal_to_eci(r_pqw: Vector3, v_pqw: Vector3, raan_rad: float, inc_rad: float, argp_rad: float) -> Tuple[Vector3, Vector3]:
    """
    Convert position and velocity from the perifocal (PQW) frame to the inertial frame.

    Args:
        r_pqw: Position vector in PQW frame
        v_pqw: Velocity vector in PQW frame
        raan_rad: Right ascension of ascending node (radians)
        inc_rad: Inclination (radians)
        argp_rad: Argument of periapsis (radians)

    Returns:
        (r_eci, v_eci): Position and velocity in the inertial frame
    """
    # R3(raan) * R1(inc) * R3(argp), argument of periapsis applied first

    # First rotation: R3(argp)
    r_temp = rot3(argp_rad, r_pqw)
    v_temp = rot3(argp_rad, v_pqw)

    # Second rotation: R1(inc)
    r_temp = rot1(inc_rad, r_temp)
    v_temp = rot1(inc_rad, v_temp)

    # Third rotation: R3(raan)
    r_eci = rot3(raan_rad, r_temp)
    v_eci = rot3(raan_rad, v_temp)

    return r_eci, v_eci
