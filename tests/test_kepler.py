import math
import pytest

from orbit_kit.physics.gravity import (
    solve_keplers_equation,
    solve_hyperbolic_keplers_equation,
    true_to_eccentric_anomaly,
    eccentric_to_true_anomaly,
    true_to_hyperbolic_anomaly,
    hyperbolic_to_true_anomaly,
)


@pytest.mark.parametrize("M", [0.0, 0.5, 2.0, 5.0, 7.5, -1.0])
def test_circular_orbit_eccentric_anomaly_is_mean_anomaly(M):
    assert math.isclose(solve_keplers_equation(M, 0.0), M % (2 * math.pi), abs_tol=1e-12)


@pytest.mark.parametrize("e", [0.05, 0.4, 0.79, 0.8, 0.99])
@pytest.mark.parametrize("M", [0.01, 1.0, 3.1, 6.0])
def test_elliptic_kepler_residual(M, e):
    E = solve_keplers_equation(M, e)
    assert 0.0 <= E < 2 * math.pi
    assert abs(E - e * math.sin(E) - M) < 1e-10


def test_kepler_high_eccentricity():
    E = solve_keplers_equation(M_rad=0.2, e=0.95)
    assert abs(E - 0.95 * math.sin(E) - 0.2) < 1e-10


def test_kepler_rejects_hyperbolic_eccentricity():
    with pytest.raises(ValueError, match="0 <= e < 1"):
        solve_keplers_equation(1.0, 1.5)


@pytest.mark.parametrize("M", [-20.0, -1.0, 0.0, 0.3, 4.0, 50.0])
def test_hyperbolic_kepler_residual(M):
    e = 1.8
    H = solve_hyperbolic_keplers_equation(M, e)
    assert abs(e * math.sinh(H) - H - M) < 1e-9 * max(1.0, abs(M))


def test_hyperbolic_kepler_rejects_elliptic_eccentricity():
    with pytest.raises(ValueError, match="e > 1"):
        solve_hyperbolic_keplers_equation(1.0, 0.5)


def test_eccentric_anomaly_roundtrip():
    e = 0.3
    for nu in [0.0, 0.7, 2.5, -1.2]:
        E = true_to_eccentric_anomaly(nu, e)
        assert math.isclose(eccentric_to_true_anomaly(E, e), nu, abs_tol=1e-12)


def test_hyperbolic_anomaly_roundtrip():
    e = 2.0
    for nu in [0.0, 0.5, -1.5, 2.0]:
        H = true_to_hyperbolic_anomaly(nu, e)
        assert math.isclose(hyperbolic_to_true_anomaly(H, e), nu, abs_tol=1e-12)


@pytest.mark.parametrize("e", [1.01, 1.001, 1.0001])
@pytest.mark.parametrize("M", [-0.5, 1e-6, 0.5, 0.9])
def test_hyperbolic_kepler_near_parabolic(M, e):
    H = solve_hyperbolic_keplers_equation(M, e)
    assert abs(e * math.sinh(H) - H - M) < 1e-10
    assert math.copysign(1.0, H) == math.copysign(1.0, M)


def test_hyperbolic_kepler_zero_mean_anomaly():
    assert abs(solve_hyperbolic_keplers_equation(0.0, 1.0001)) < 1e-9
