"""Bogacki-Shampine 3(2) embedded integrator step (RK23).

Implements the Bogacki-Shampine embedded Runge-Kutta pair with a 3rd-order
solution for propagation and a 2nd-order solution for error estimation.
The method uses 4 stages per step; the 4th stage is evaluated at the new
state, which is why the 3rd-order weights end in zero.

The Butcher tableau coefficients are:

- Nodes (c): [0, 1/2, 3/4, 1]
- 3rd-order weights (b): [2/9, 1/3, 4/9, 0]
- 2nd-order weights (b_low): [7/24, 1/4, 1/3, 1/8]
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

_B = (2.0 / 9.0, 1.0 / 3.0, 4.0 / 9.0, 0.0)

_B_LOW = (7.0 / 24.0, 1.0 / 4.0, 1.0 / 3.0, 1.0 / 8.0)

RK23_TABLEAU = Tableau(
    A=(
        (),
        (1.0 / 2.0,),
        (0.0, 3.0 / 4.0),
        (2.0 / 9.0, 1.0 / 3.0, 4.0 / 9.0),
    ),
    C=(0.0, 1.0 / 2.0, 3.0 / 4.0, 1.0),
    B=_B,
    E=tuple(b - bl for b, bl in zip(_B, _B_LOW)),
    order=3,
    error_order=2,
)


def rk23_step(
    dynamics: Callable[[float, Array], ArrayLike],
    t: float,
    state: ArrayLike,
    dt: float,
) -> StepResult:
    """Perform a single Bogacki-Shampine 3(2) step.

    No step-size control happens here; the error vector is returned for
    the caller to judge (see :func:`~integrax.integrators.solve_ivp`).

    Args:
        dynamics: ODE right-hand side function ``f(t, x) -> dx/dt``.
        t: Current time.
        state: Current state vector.
        dt: Timestep. May be negative for backward integration.

    Returns:
        StepResult: Named tuple with fields:
            - ``state``: 3rd-order state at ``t + dt``.
            - ``error``: 3rd-order minus 2nd-order solution.

    Examples:
        ```python
        import jax.numpy as jnp
        from integrax.integrators import rk23_step
        result = rk23_step(lambda t, x: -x, 0.0, jnp.array([1.0]), 0.1)
        result.state  # ~[exp(-0.1)]
        ```
    """
    state = jnp.asarray(state, dtype=get_dtype())
    return rk_step(
        lambda ti, xi: call_vector(dynamics, ti, xi), float(t), state, float(dt), RK23_TABLEAU
    )
