"""Adaptive initial value problem driver.

Integrates ``dy/dt = f(t, y)`` from ``t_span[0]`` to ``t_span[1]`` with one
of the explicit Runge-Kutta step functions. For the embedded pairs (RK23,
RK45) every step attempt is judged by the scaled RMS error norm: accepted
steps advance the solution and grow the next step, rejected steps shrink
and retry from the same point. RK4 takes fixed steps and accepts them all.

The natural (adaptive) trajectory is returned unless ``t_eval`` is given,
in which case it is resampled onto ``t_eval`` by linear interpolation
between the two bracketing steps.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from integrax._callbacks import call_vector
from integrax.config import get_dtype
from integrax.constants import IVP_END_RTOL
from integrax.integrators._adaptive import (
    compute_error_norm,
    estimate_first_step,
    growth_factor,
    shrink_factor,
)
from integrax.integrators._types import IVPConfig, Method, ODEResult, StepResult, Tableau
from integrax.integrators.dp54 import DP54_TABLEAU, dp54_step
from integrax.integrators.rk4 import RK4_TABLEAU, rk4_step
from integrax.integrators.rk23 import RK23_TABLEAU, rk23_step

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "The solver successfully reached the end of the integration interval."

_STEPPERS: dict[Method, tuple[Callable[..., StepResult], Tableau]] = {
    Method.RK4: (rk4_step, RK4_TABLEAU),
    Method.RK23: (rk23_step, RK23_TABLEAU),
    Method.RK45: (dp54_step, DP54_TABLEAU),
}


def _validate_inputs(t_span, y0: ArrayLike) -> tuple[float, float, Array]:
    if len(t_span) != 2:
        raise ValueError(f"t_span must hold exactly two values, got {len(t_span)}")
    t0, tf = float(t_span[0]), float(t_span[1])
    if not (math.isfinite(t0) and math.isfinite(tf)):
        raise ValueError(f"t_span must be finite, got ({t0}, {tf})")

    y = jnp.asarray(y0, dtype=get_dtype())
    if y.ndim != 1:
        raise ValueError(f"y0 must be one-dimensional, got shape {y.shape}")
    if y.size == 0:
        raise ValueError("y0 must not be empty")
    return t0, tf, y


def _validate_t_eval(t_eval: ArrayLike, t0: float, tf: float) -> Array:
    te = jnp.asarray(t_eval, dtype=get_dtype())
    if te.ndim != 1:
        raise ValueError(f"t_eval must be one-dimensional, got shape {te.shape}")
    lo, hi = min(t0, tf), max(t0, tf)
    if te.size and (float(jnp.min(te)) < lo or float(jnp.max(te)) > hi):
        raise ValueError(f"t_eval values must lie within t_span [{lo}, {hi}]")
    return te


def _resample(t: Array, y: Array, t_eval: Array, direction: float) -> Array:
    """Linearly interpolate each state component of ``(t, y)`` at *t_eval*."""
    if direction < 0.0:
        t = t[::-1]
        y = y[::-1]
    return jax.vmap(lambda column: jnp.interp(t_eval, t, column), in_axes=1, out_axes=1)(y)


def solve_ivp(
    fun: Callable[[float, Array], ArrayLike],
    t_span: tuple[float, float],
    y0: ArrayLike,
    config: IVPConfig | None = None,
) -> ODEResult:
    """Solve an initial value problem for a system of ODEs.

    Integration runs from ``t_span[0]`` to ``t_span[1]``; a final time
    before the initial time integrates backward. Each step attempt is
    clamped so it does not overshoot the final time, and the run completes
    once the final time is reached to within a relative ``1e-12``.

    Derivative calls that raise, or that return the wrong number of
    components, contribute a zero derivative. NaN derivatives propagate
    into the solution.

    Args:
        fun: Right-hand side ``fun(t, y) -> dy/dt`` with ``y`` of shape
            ``(n,)``.
        t_span: Initial and final time ``(t0, tf)``.
        y0: Initial state, shape ``(n,)``, non-empty.
        config: Solver settings. Defaults to ``IVPConfig()`` (RK45,
            ``rtol=1e-3``, ``atol=1e-6``).

    Returns:
        ODEResult: Output times, states of shape ``(len(t), n)``, a
        ``success`` flag, a termination message and the number of
        derivative evaluations. When the step-attempt cap is hit,
        ``success`` is ``False`` and the trajectory covers the part of
        the interval reached so far.

    Raises:
        ValueError: If *t_span* is malformed or non-finite, *y0* is empty
            or not one-dimensional, or ``t_eval`` lies outside *t_span*.

    Examples:
        ```python
        import jax.numpy as jnp
        from integrax.integrators import solve_ivp
        sol = solve_ivp(lambda t, y: -y, (0.0, 1.0), jnp.array([1.0]))
        sol.y[-1, 0]  # ~exp(-1)
        ```
    """
    if config is None:
        config = IVPConfig()
    t0, tf, y = _validate_inputs(t_span, y0)
    t_eval = None if config.t_eval is None else _validate_t_eval(config.t_eval, t0, tf)

    step, tableau = _STEPPERS[config.method]
    adaptive = config.method.adaptive
    direction = 1.0 if tf >= t0 else -1.0
    end_tol = IVP_END_RTOL * max(abs(tf), 1.0)

    nfev = 0

    def rhs(t: float, state: Array) -> ArrayLike:
        nonlocal nfev
        nfev += 1
        return fun(t, state)

    ts = [t0]
    ys = [y]
    t = t0
    success = True
    message = SUCCESS_MESSAGE
    attempts = 0
    rejected = 0

    if abs(tf - t) > end_tol:
        if config.first_step is None:
            f0 = call_vector(rhs, t0, y)
            h_abs = estimate_first_step(
                f0, y, config.atol, config.rtol, tf - t0, config.max_step
            )
        else:
            h_abs = min(config.first_step, config.max_step)

        while abs(tf - t) > end_tol:
            if attempts >= config.max_attempts:
                success = False
                message = (
                    f"Maximum number of step attempts ({config.max_attempts}) exceeded "
                    f"at t={t}."
                )
                logger.warning(
                    "solve_ivp stopped at t=%g of [%g, %g] after %d step attempts",
                    t, t0, tf, attempts,
                )
                break
            attempts += 1

            h_abs = min(h_abs, abs(tf - t))
            h = direction * h_abs
            result = step(rhs, t, y, h)

            if adaptive:
                norm = compute_error_norm(result.error, result.state, y, config.atol, config.rtol)
                if norm > 1.0:
                    rejected += 1
                    h_abs *= shrink_factor(norm)
                    continue

            t_new = t + h
            if abs(tf - t_new) <= end_tol:
                t_new = tf
            t = t_new
            y = result.state
            ts.append(t)
            ys.append(y)

            if adaptive:
                h_abs = min(h_abs * growth_factor(norm, tableau.error_order), config.max_step)

    logger.debug(
        "solve_ivp %s: %d accepted, %d rejected steps, nfev=%d",
        config.method.value, len(ts) - 1, rejected, nfev,
    )

    dtype = get_dtype()
    t_out = jnp.asarray(ts, dtype=dtype)
    y_out = jnp.stack(ys)
    if t_eval is not None:
        if not success:
            t_eval = t_eval[direction * (t_eval - t) <= 0.0]
        y_out = _resample(t_out, y_out, t_eval, direction)
        t_out = t_eval

    return ODEResult(t=t_out, y=y_out, success=success, message=message, nfev=nfev)
