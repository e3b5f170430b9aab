"""
Failure kinds raised by the Lambert solvers and the Orbit abstraction.

Input validation errors derive from ValueError so callers that only care
about "bad input" can catch that. Non-convergence of the time-of-flight
root search is not an error: it is reported on the solution itself.
"""

from __future__ import annotations


class LambertError(ValueError):
    """Base class for Lambert problem failures."""


class InvalidTimeOfFlightError(LambertError):
    """Time of flight is zero or negative."""


class InvalidGeometryError(LambertError):
    """Semi-perimeter / chord pair does not describe a transfer triangle."""


class InvalidBranchSelectorError(LambertError):
    """Branch is neither left nor right."""


class InvalidRevolutionCountError(LambertError):
    """Revolution count is negative or not an integer."""


class DegenerateGeometryError(LambertError):
    """The transfer is rectilinear or the velocity recovery divides by zero."""


class OrbitNotInitializedError(RuntimeError):
    """State was requested from an Orbit that has never been given one."""
