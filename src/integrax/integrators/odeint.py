"""Grid-chained ODE integration.

:func:`odeint` integrates ``dy/dt = func(y, t)`` over a caller-supplied time
grid by running :func:`~integrax.integrators.solve_ivp` (RK45) once per
consecutive pair of grid points, each run starting from the final state of
the previous one. Note the argument order of *func*: state first, time
second.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from integrax.config import get_dtype
from integrax.integrators._types import IVPConfig, Method, OdeintConfig
from integrax.integrators.solve_ivp import SUCCESS_MESSAGE, solve_ivp

logger = logging.getLogger(__name__)


def odeint(
    func: Callable[..., ArrayLike],
    y0: ArrayLike,
    t: ArrayLike,
    config: OdeintConfig | None = None,
    args: tuple = (),
    full_output: bool = False,
) -> Array | tuple[Array, dict[str, Any]]:
    """Integrate a system of ODEs and report the state at every grid time.

    Segments that do not converge are logged and integration continues
    from the last state they reached.

    Args:
        func: Right-hand side ``func(y, t, *args) -> dy/dt``.
        y0: Initial state at ``t[0]``, shape ``(n,)``, non-empty.
        t: Time grid, at least two points. May decrease for backward
            integration.
        config: Tolerances. Defaults to ``OdeintConfig()``
            (``rtol = atol = 1.49e-8``).
        args: Extra positional arguments passed to *func*.
        full_output: If ``True``, also return a dictionary with the total
            number of derivative evaluations (``"nfe"``), whether every
            segment converged (``"success"``) and the last segment message
            (``"message"``).

    Returns:
        jax.Array: States of shape ``(len(t), n)``; row 0 is *y0*. With
        *full_output*, a tuple ``(y, info)``.

    Raises:
        ValueError: If *t* has fewer than two points or *y0* is empty or
            not one-dimensional.

    Examples:
        ```python
        import jax.numpy as jnp
        from integrax.integrators import odeint
        def decay(y, t, k):
            return -k * y
        y = odeint(decay, jnp.array([1.0]), jnp.linspace(0.0, 1.0, 5), args=(2.0,))
        y[-1, 0]  # ~exp(-2)
        ```
    """
    if config is None:
        config = OdeintConfig()

    dtype = get_dtype()
    grid = jnp.asarray(t, dtype=dtype)
    if grid.ndim != 1 or grid.size < 2:
        raise ValueError(
            f"t must be a one-dimensional grid of at least 2 points, got shape {grid.shape}"
        )
    y = jnp.asarray(y0, dtype=dtype)
    if y.ndim != 1 or y.size == 0:
        raise ValueError(f"y0 must be a non-empty one-dimensional array, got shape {y.shape}")

    ivp_config = IVPConfig(method=Method.RK45, rtol=config.rtol, atol=config.atol)

    def fun(ti: float, yi: Array) -> ArrayLike:
        return func(yi, ti, *args)

    rows = [y]
    nfe = 0
    success = True
    message = SUCCESS_MESSAGE
    times = [float(ti) for ti in grid]
    for start, stop in zip(times[:-1], times[1:]):
        sol = solve_ivp(fun, (start, stop), y, ivp_config)
        nfe += sol.nfev
        message = sol.message
        if not sol.success:
            success = False
            logger.warning(
                "odeint segment [%g, %g] did not converge: %s", start, stop, sol.message
            )
        y = sol.y[-1]
        rows.append(y)

    y_out = jnp.stack(rows)
    if full_output:
        return y_out, {"nfe": nfe, "success": success, "message": message}
    return y_out
