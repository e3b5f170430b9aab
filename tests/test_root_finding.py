"""
Tests for the derivative-free root finder.
"""
import math
import pytest

from orbit_kit.numerics.root_finding import RootResult, regula_falsi


class TestConvergence:
    def test_linear_function_single_step(self):
        result = regula_falsi(lambda x: 2.0 * x - 1.0, 0.0, 3.0)
        assert result.converged
        assert result.iterations == 1
        assert abs(result.root - 0.5) < 1e-15

    def test_bracketed_cubic(self):
        result = regula_falsi(lambda x: x**3 - 2.0, 0.0, 10.0, max_iterations=100, tolerance=1e-12)
        assert result.converged
        assert abs(result.root - 2.0 ** (1.0 / 3.0)) < 1e-10
        assert abs(result.residual) < 1e-12
        assert result.iterations < 100

    def test_bracket_keeps_shrinking_from_both_sides(self):
        # Plain regula falsi would keep one endpoint fixed and crawl on exp
        result = regula_falsi(lambda x: math.exp(x) - 10.0, -5.0, 10.0, max_iterations=60, tolerance=1e-12)
        assert result.converged
        assert abs(result.root - math.log(10.0)) < 1e-12

    def test_unbracketed_start_uses_secant_steps(self):
        # Both starting points lie on the same side of the root
        result = regula_falsi(lambda x: math.log(x) - 1.0, 0.5, 1.0)
        assert result.converged
        assert abs(result.root - math.e) < 1e-8

    def test_starting_point_already_a_root(self):
        result = regula_falsi(lambda x: x - 1.0, 1.0, 5.0)
        assert result == RootResult(root=1.0, residual=0.0, iterations=0, converged=True)

    def test_closure_parameters(self):
        target = 0.3
        result = regula_falsi(lambda x: math.sin(x) - target, 0.0, 1.0)
        assert result.converged
        assert abs(math.sin(result.root) - target) < 1e-9


class TestNonConvergence:
    def test_iteration_cap_reported(self):
        result = regula_falsi(lambda x: x**3 - 2.0, 0.0, 10.0, max_iterations=3, tolerance=1e-9)
        assert result.iterations == 3
        assert result.converged is False
        assert math.isfinite(result.root)

    def test_best_estimate_returned_at_cap(self):
        f = lambda x: x**3 - 2.0
        result = regula_falsi(f, 0.0, 10.0, max_iterations=5, tolerance=1e-15)
        assert result.converged is False
        assert result.residual == f(result.root)
        assert abs(result.residual) <= 2.0

    def test_flat_function_stalls(self):
        result = regula_falsi(lambda x: 1.0, 0.0, 1.0)
        assert result.converged is False
        assert result.iterations == 0

    def test_overflow_stops_search(self):
        # The first secant step lands on x = 1 where exp(1000) overflows
        result = regula_falsi(lambda x: math.exp(1000.0 * x) - 2.0, -1.0, 0.0)
        assert result.converged is False
        assert result.iterations == 1
        assert result.root == 0.0
        assert result.residual == -1.0

    def test_no_real_root_never_converges(self):
        result = regula_falsi(lambda x: x * x + 1.0, -1.0, 2.0, max_iterations=200)
        assert result.converged is False
        assert result.residual >= 1.0
        assert math.isfinite(result.residual)

    def test_non_finite_start(self):
        result = regula_falsi(lambda x: 1.0 / x if x else math.inf, 0.0, 1.0)
        assert result.converged is False
        assert result.iterations == 0
        assert result.root == 1.0
