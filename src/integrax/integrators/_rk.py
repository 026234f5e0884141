"""Tableau-driven explicit Runge-Kutta stage evaluation.

All step functions share one stage pattern: stage ``i`` is evaluated at
``t + C[i] * h`` with input state ``y + h * sum_j A[i][j] * k[j]``. The new
state is ``y + h * sum_j B[j] * k[j]`` and, when the tableau has error
weights, the local error estimate is ``h * sum_j E[j] * k[j]``.
"""

from __future__ import annotations

from collections.abc import Callable

import jax.numpy as jnp
from jax import Array

from integrax.config import get_dtype
from integrax.integrators._types import StepResult, Tableau


def rk_step(
    f: Callable[[float, Array], Array],
    t: float,
    y: Array,
    h: float,
    tableau: Tableau,
) -> StepResult:
    """Advance *y* by one step of size *h* using *tableau*.

    Args:
        f: Right-hand side ``f(t, y) -> dy/dt``, called once per stage.
        t: Current time.
        y: Current state, shape ``(n,)``.
        h: Step size. May be negative for backward integration.
        tableau: Butcher tableau of the method.

    Returns:
        StepResult: New state and, for embedded pairs, the error vector.
    """
    dtype = get_dtype()
    k = [f(t, y)]
    for i in range(1, tableau.stages):
        coupling = jnp.asarray(tableau.A[i], dtype=dtype)
        y_stage = y + h * jnp.dot(coupling, jnp.stack(k))
        k.append(f(t + tableau.C[i] * h, y_stage))

    stages = jnp.stack(k)
    y_new = y + h * jnp.dot(jnp.asarray(tableau.B, dtype=dtype), stages)

    error = None
    if tableau.E is not None:
        error = h * jnp.dot(jnp.asarray(tableau.E, dtype=dtype), stages)
    return StepResult(state=y_new, error=error)
