"""Numerical ODE integrators.

Provides fixed-step and adaptive explicit Runge-Kutta step functions and
two drivers built on them, using JAX arrays throughout.

Available step functions:

- :func:`rk4_step` -- Classic 4th-order Runge-Kutta (fixed step)
- :func:`rk23_step` -- Bogacki-Shampine 3(2) (adaptive step)
- :func:`dp54_step` -- Dormand-Prince 5(4) (adaptive step, "RK45")

All step functions share a common interface::

    result = step_fn(dynamics, t, state, dt)

where ``dynamics(t, x) -> dx`` defines the ODE right-hand side, and the
result is a :class:`StepResult` named tuple.

Drivers:

- :func:`solve_ivp` -- Adaptive integration over ``(t0, tf)``
- :func:`odeint` -- Integration over a time grid, ``func(y, t)`` convention
"""

from integrax.integrators._types import (
    IVPConfig,
    Method,
    ODEResult,
    OdeintConfig,
    StepResult,
    Tableau,
)
from integrax.integrators.dp54 import DP54_TABLEAU, dp54_step
from integrax.integrators.odeint import odeint
from integrax.integrators.rk4 import RK4_TABLEAU, rk4_step
from integrax.integrators.rk23 import RK23_TABLEAU, rk23_step
from integrax.integrators.solve_ivp import solve_ivp

__all__ = [
    "DP54_TABLEAU",
    "IVPConfig",
    "Method",
    "ODEResult",
    "OdeintConfig",
    "RK23_TABLEAU",
    "RK4_TABLEAU",
    "StepResult",
    "Tableau",
    "dp54_step",
    "odeint",
    "rk23_step",
    "rk4_step",
    "solve_ivp",
]
