from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Any, Mapping

from orbit_kit.core.constants import ASTRO_MAX_ITER, ASTRO_TOLERANCE


@dataclass(frozen=True)
class SolverConfig:
    """
    Settings for the time-of-flight root search.

    Attributes:
        max_iterations: iteration cap; reaching it means the search did not converge
        tolerance: the search stops once |f(x)| drops below this value
    """
    max_iterations: int = ASTRO_MAX_ITER
    tolerance: float = ASTRO_TOLERANCE

    def __post_init__(self):
        if isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, int):
            raise ValueError(f"max_iterations must be an integer. Got: {self.max_iterations!r}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1. Got: {self.max_iterations}")
        if not math.isfinite(self.tolerance) or self.tolerance <= 0:
            raise ValueError(f"tolerance must be positive and finite. Got: {self.tolerance}")

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "SolverConfig":
        """Build a config from a plain mapping, rejecting unknown option names."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ValueError(f"Unknown solver option(s): {', '.join(unknown)}")
        return cls(**dict(options))


DEFAULT_CONFIG = SolverConfig()
