"""Dormand-Prince 5(4) embedded integrator step (DP54, "RK45").

Implements the Dormand-Prince embedded Runge-Kutta method with a 5th-order
solution for propagation and a 4th-order solution for error estimation.
The method uses 7 stages per step. The 7th stage is evaluated at the
5th-order solution (First-Same-As-Last); this implementation recomputes it
on the next step rather than caching it, so every step function call is
independent of the previous one.

The Butcher tableau coefficients are the standard Dormand-Prince values:

- Nodes (c): [0, 1/5, 3/10, 4/5, 8/9, 1, 1]
- 5th-order weights (b_high): [35/384, 0, 500/1113, 125/192, -2187/6784, 11/84, 0]
- 4th-order weights (b_low): [5179/57600, 0, 7571/16695, 393/640, -92097/339200,
  187/2100, 1/40]
"""

from __future__ import annotations

from collections.abc import Callable

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from integrax._callbacks import call_vector
from integrax.config import get_dtype
from integrax.integrators._rk import rk_step
from integrax.integrators._types import StepResult, Tableau

# 5th-order weights (primary solution), identical to the last coupling row
_B_HIGH = (35.0 / 384.0, 0.0, 500.0 / 1113.0, 125.0 / 192.0, -2187.0 / 6784.0, 11.0 / 84.0, 0.0)

# 4th-order weights (error estimation)
_B_LOW = (
    5179.0 / 57600.0,
    0.0,
    7571.0 / 16695.0,
    393.0 / 640.0,
    -92097.0 / 339200.0,
    187.0 / 2100.0,
    1.0 / 40.0,
)

DP54_TABLEAU = Tableau(
    A=(
        (),
        (1.0 / 5.0,),
        (3.0 / 40.0, 9.0 / 40.0),
        (44.0 / 45.0, -56.0 / 15.0, 32.0 / 9.0),
        (19372.0 / 6561.0, -25360.0 / 2187.0, 64448.0 / 6561.0, -212.0 / 729.0),
        (9017.0 / 3168.0, -355.0 / 33.0, 46732.0 / 5247.0, 49.0 / 176.0, -5103.0 / 18656.0),
        _B_HIGH[:6],
    ),
    C=(0.0, 1.0 / 5.0, 3.0 / 10.0, 4.0 / 5.0, 8.0 / 9.0, 1.0, 1.0),
    B=_B_HIGH,
    E=tuple(bh - bl for bh, bl in zip(_B_HIGH, _B_LOW)),
    order=5,
    error_order=4,
)


def dp54_step(
    dynamics: Callable[[float, Array], ArrayLike],
    t: float,
    state: ArrayLike,
    dt: float,
) -> StepResult:
    """Perform a single Dormand-Prince 5(4) step.

    No step-size control happens here; the error vector is returned for
    the caller to judge (see :func:`~integrax.integrators.solve_ivp`).

    Args:
        dynamics: ODE right-hand side function ``f(t, x) -> dx/dt``.
        t: Current time.
        state: Current state vector.
        dt: Timestep. May be negative for backward integration.

    Returns:
        StepResult: Named tuple with fields:
            - ``state``: 5th-order state at ``t + dt``.
            - ``error``: 5th-order minus 4th-order solution.

    Examples:
        ```python
        import jax.numpy as jnp
        from integrax.integrators import dp54_step
        def harmonic(t, x):
            return jnp.array([x[1], -x[0]])
        result = dp54_step(harmonic, 0.0, jnp.array([1.0, 0.0]), 0.1)
        result.state  # ~[cos(0.1), -sin(0.1)]
        ```
    """
    state = jnp.asarray(state, dtype=get_dtype())
    return rk_step(
        lambda ti, xi: call_vector(dynamics, ti, xi), float(t), state, float(dt), DP54_TABLEAU
    )
