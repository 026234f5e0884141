"""Classic 4th-order Runge-Kutta step (RK4).

Implements the standard four-stage, 4th-order explicit Runge-Kutta method.
This is a fixed-step method: it carries no embedded solution, so
:func:`rk4_step` returns no error estimate and :func:`solve_ivp` accepts
every RK4 step.

The Butcher tableau for RK4 is:

.. math::

    \\begin{array}{c|cccc}
    0   &     &     &     &   \\\\
    1/2 & 1/2 &     &     &   \\\\
    1/2 &  0  & 1/2 &     &   \\\\
    1   &  0  &  0  &  1  &   \\\\
    \\hline
        & 1/6 & 1/3 & 1/3 & 1/6
    \\end{array}

The local truncation error is :math:`O(h^5)` and the global error is
:math:`O(h^4)`.
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

RK4_TABLEAU = Tableau(
    A=(
        (),
        (1.0 / 2.0,),
        (0.0, 1.0 / 2.0),
        (0.0, 0.0, 1.0),
    ),
    C=(0.0, 1.0 / 2.0, 1.0 / 2.0, 1.0),
    B=(1.0 / 6.0, 1.0 / 3.0, 1.0 / 3.0, 1.0 / 6.0),
    E=None,
    order=4,
    error_order=None,
)


def rk4_step(
    dynamics: Callable[[float, Array], ArrayLike],
    t: float,
    state: ArrayLike,
    dt: float,
) -> StepResult:
    """Perform a single RK4 integration step.

    Advances the state from time ``t`` to ``t + dt``. A call of
    *dynamics* that fails contributes a zero derivative for that stage.

    Args:
        dynamics: ODE right-hand side function ``f(t, x) -> dx/dt``.
        t: Current time.
        state: Current state vector.
        dt: Timestep to take. May be negative for backward integration.

    Returns:
        StepResult: Named tuple with fields:
            - ``state``: State at ``t + dt``.
            - ``error``: Always ``None``.

    Examples:
        ```python
        import jax.numpy as jnp
        from integrax.integrators import rk4_step
        def harmonic(t, x):
            return jnp.array([x[1], -x[0]])
        result = rk4_step(harmonic, 0.0, jnp.array([1.0, 0.0]), 0.01)
        result.state  # ~[cos(0.01), -sin(0.01)]
        ```
    """
    state = jnp.asarray(state, dtype=get_dtype())
    return rk_step(
        lambda ti, xi: call_vector(dynamics, ti, xi), float(t), state, float(dt), RK4_TABLEAU
    )
