"""
Derivative-free scalar root finding.

The Lambert solver only ever hands this module a plain callable, so the
solver is written against `Callable[[float], float]` and nothing else.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable

from orbit_kit.core.constants import ASTRO_MAX_ITER, ASTRO_TOLERANCE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RootResult:
    """
    Outcome of a root search.

    root: best estimate of the root
    residual: f(root)
    iterations: interpolation steps performed (== max_iterations when the cap was hit)
    converged: True when |residual| < tolerance
    """
    root: float
    residual: float
    iterations: int
    converged: bool


def _evaluate(f: Callable[[float], float], x: float) -> float:
    # Overflow / division by zero far outside the useful range reads as "no value here"
    try:
        return float(f(x))
    except ArithmeticError as exc:
        logger.debug("Function evaluation failed at x=%r: %s", x, exc)
        return math.nan


def regula_falsi(
    f: Callable[[float], float],
    a: float,
    b: float,
    max_iterations: int = ASTRO_MAX_ITER,
    tolerance: float = ASTRO_TOLERANCE,
) -> RootResult:
    """
    Find x with |f(x)| < tolerance starting from the two points a and b.

    Each step samples the linear interpolation
        c = (a f(b) - b f(a)) / (f(b) - f(a))
    When f(a) and f(b) have opposite signs, the endpoint lying on the same side
    as c is replaced and the retained endpoint's value is halved (Illinois
    variant) so the bracket keeps shrinking from both sides. When the two
    points do not bracket a sign change the step is a plain secant step and
    the oldest point is dropped.

    Non-convergence is not an error: the best estimate seen so far is returned
    with converged=False. Running out of iterations reports
    iterations == max_iterations; a breakdown (f(a) == f(b) or a non-finite
    value) stops early.

    Args:
        f: continuous scalar function
        a, b: starting points (ideally a bracket)
        max_iterations: iteration cap
        tolerance: residual tolerance

    Returns:
        RootResult
    """
    fa = _evaluate(f, a)
    fb = _evaluate(f, b)

    best_x, best_f = a, fa
    if not math.isfinite(fa) or (math.isfinite(fb) and abs(fb) < abs(fa)):
        best_x, best_f = b, fb

    if not (math.isfinite(fa) and math.isfinite(fb)):
        logger.debug("Non-finite value at a starting point: f(%r)=%r, f(%r)=%r", a, fa, b, fb)
        return RootResult(best_x, best_f, 0, False)

    if abs(best_f) < tolerance:
        return RootResult(best_x, best_f, 0, True)

    for n in range(1, max_iterations + 1):
        if fb == fa:
            logger.debug("Interpolation stalled after %d iterations (f(a) == f(b))", n - 1)
            return RootResult(best_x, best_f, n - 1, False)

        c = (a * fb - b * fa) / (fb - fa)
        fc = _evaluate(f, c)
        if not math.isfinite(fc):
            logger.debug("Non-finite value f(%r) at iteration %d", c, n)
            return RootResult(best_x, best_f, n, False)

        if abs(fc) < abs(best_f):
            best_x, best_f = c, fc
        if abs(fc) < tolerance:
            logger.debug("Converged in %d iterations: x=%r, f=%r", n, c, fc)
            return RootResult(c, fc, n, True)

        if (fa < 0) != (fb < 0):
            if (fc < 0) != (fb < 0):
                # Root lies between b and c: b becomes the far endpoint
                a, fa = b, fb
            else:
                fa *= 0.5
            b, fb = c, fc
        else:
            a, fa = b, fb
            b, fb = c, fc

    logger.debug("Iteration cap %d reached: best x=%r, f=%r", max_iterations, best_x, best_f)
    return RootResult(best_x, best_f, max_iterations, False)
