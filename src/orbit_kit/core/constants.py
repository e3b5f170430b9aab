from __future__ import annotations

# Earth gravitational parameter (mu) in km^3/s^2 (WGS-84 standard value)
MU_EARTH_KM3_S2: float = 398600.4418

# Sun gravitational parameter in km^3/s^2
MU_SUN_KM3_S2: float = 1.32712440018e11

# Astronomical unit in km
AU_KM: float = 149597870.691

# Iteration cap and residual tolerance for the time-of-flight root search
ASTRO_MAX_ITER: int = 50
ASTRO_TOLERANCE: float = 1e-9

# Eccentricity below which an orbit is treated as circular / near 1 as parabolic
ECCENTRICITY_TOL: float = 1e-10
