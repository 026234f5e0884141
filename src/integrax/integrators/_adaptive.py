"""Adaptive step-size control utilities for embedded Runge-Kutta methods.

Provides the error-norm computation and step-size adjustment logic used by
:func:`~integrax.integrators.solve_ivp` for the RK23 and RK45 pairs. The
algorithms follow the standard embedded Runge-Kutta error control approach:

1. Compute a normalized RMS error using mixed absolute/relative tolerances.
2. Accept the step if the normalized error is <= 1.0.
3. Grow the next step after acceptance, or shrink and retry after
   rejection, using the error and the order of the embedded solution.
"""

from __future__ import annotations

import math

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from integrax.config import get_dtype
from integrax.constants import (
    STEP_MAX_GROWTH,
    STEP_MIN_SHRINK,
    STEP_SAFETY,
    STEP_SHRINK_EXPONENT,
)


@jax.jit
def _scaled_rms(error_vec: Array, scale: Array) -> Array:
    return jnp.sqrt(jnp.mean(jnp.square(error_vec / scale)))


def compute_error_norm(
    error_vec: ArrayLike,
    state_new: ArrayLike,
    state_old: ArrayLike,
    abs_tol: float,
    rel_tol: float,
) -> float:
    """Compute the normalized error norm for adaptive step-size control.

    Uses a mixed absolute/relative tolerance per component with the
    root-mean-square norm over components. The step is accepted when the
    returned value is <= 1.0.

    The per-component tolerance is:

    .. math::

        \\text{tol}_i = \\text{abs\\_tol} + \\text{rel\\_tol}
            \\cdot \\max(|y^{\\text{new}}_i|, |y^{\\text{old}}_i|)

    Args:
        error_vec: Difference between high-order and low-order solutions.
        state_new: High-order solution (candidate state).
        state_old: State at the beginning of the step.
        abs_tol: Absolute error tolerance.
        rel_tol: Relative error tolerance.

    Returns:
        float: Normalized error. NaN if the error vector holds NaN.
    """
    dtype = get_dtype()
    error_vec = jnp.asarray(error_vec, dtype=dtype)
    state_new = jnp.asarray(state_new, dtype=dtype)
    state_old = jnp.asarray(state_old, dtype=dtype)

    scale = abs_tol + rel_tol * jnp.maximum(jnp.abs(state_new), jnp.abs(state_old))
    return float(_scaled_rms(error_vec, scale))


def growth_factor(error: float, error_order: int) -> float:
    """Step multiplier after an accepted step.

    .. math::

        \\min\\left(5, 0.9 \\cdot \\text{error}^{-1/(q+1)}\\right)

    where *q* is the order of the embedded solution. A zero error yields
    the maximum growth, as does a NaN error, which carries no step-size
    information.

    Args:
        error: Normalized error of the accepted step.
        error_order: Order of the embedded (error-estimating) solution.

    Returns:
        float: Factor in ``(0, 5]``.
    """
    if error == 0.0 or math.isnan(error):
        return STEP_MAX_GROWTH
    exponent = 1.0 / (error_order + 1.0)
    return min(STEP_MAX_GROWTH, STEP_SAFETY * error ** -exponent)


def shrink_factor(error: float) -> float:
    """Step multiplier after a rejected step.

    .. math::

        \\max\\left(0.1, 0.9 \\cdot \\text{error}^{-1/4}\\right)

    Args:
        error: Normalized error of the rejected step (> 1, possibly inf).

    Returns:
        float: Factor in ``[0.1, 0.9)``.
    """
    return max(STEP_MIN_SHRINK, STEP_SAFETY * error ** -STEP_SHRINK_EXPONENT)


def estimate_first_step(
    f0: ArrayLike,
    y0: ArrayLike,
    abs_tol: float,
    rel_tol: float,
    span: float,
    max_step: float,
) -> float:
    """Estimate a starting step magnitude from the initial derivative.

    With ``d0 = rms(y0 / s)`` and ``d1 = rms(f0 / s)``, where
    ``s = abs_tol + rel_tol * |y0|``, the estimate is ``0.01 * d0 / d1``,
    falling back to ``1e-6`` when either norm is tiny. The result is
    bounded by a tenth of the integration span and by *max_step*.

    Args:
        f0: Derivative at the initial point.
        y0: Initial state.
        abs_tol: Absolute error tolerance.
        rel_tol: Relative error tolerance.
        span: Length of the integration interval (magnitude).
        max_step: Largest allowed step magnitude.

    Returns:
        float: Positive step magnitude.
    """
    dtype = get_dtype()
    y0 = jnp.asarray(y0, dtype=dtype)
    f0 = jnp.asarray(f0, dtype=dtype)
    scale = abs_tol + rel_tol * jnp.abs(y0)
    d0 = float(_scaled_rms(y0, scale))
    d1 = float(_scaled_rms(f0, scale))

    if math.isfinite(d0) and math.isfinite(d1) and d0 >= 1e-5 and d1 >= 1e-5:
        h = 0.01 * d0 / d1
    else:
        h = 1e-6
    return min(h, 0.1 * abs(span), max_step)
