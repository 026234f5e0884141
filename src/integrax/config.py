"""Module-wide floating-point precision configuration.

Provides ``set_dtype`` and ``get_dtype`` to control the float dtype used
for every array integrax creates (rule tables, sample vectors, ODE states
and trajectories).  The default is ``jnp.float64`` so that results are
IEEE-754 double precision; importing this module therefore enables JAX's
64-bit mode (``jax_enable_x64``).  ``jnp.float32`` may be selected for
speed at the cost of accuracy.

Call ``set_dtype`` before running any integration whose precision matters.
Jitted kernels retrace automatically when the dtype of their inputs changes.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

_VALID_DTYPES = (jnp.float32, jnp.float64)

jax.config.update("jax_enable_x64", True)

_dtype = jnp.float64


def set_dtype(dtype) -> None:
    """Set the module-wide float dtype for integrax.

    If *dtype* is ``jnp.float64``, JAX's 64-bit mode is (re-)enabled via
    ``jax.config.update("jax_enable_x64", True)``.

    Args:
        dtype: Either ``jnp.float32`` or ``jnp.float64``.

    Raises:
        ValueError: If *dtype* is not a supported float type.

    Examples:
        ```python
        import jax.numpy as jnp
        from integrax import set_dtype
        set_dtype(jnp.float32)
        ```
    """
    global _dtype
    if dtype not in _VALID_DTYPES:
        raise ValueError(
            f"Unsupported dtype {dtype}. Must be one of: "
            f"jnp.float32, jnp.float64"
        )
    if dtype == jnp.float64:
        jax.config.update("jax_enable_x64", True)
    _dtype = dtype


def get_dtype():
    """Return the current module-wide float dtype.

    Returns:
        The active float dtype (default ``jnp.float64``).
    """
    return _dtype


def get_machine_epsilon() -> float:
    """Return the machine epsilon of the active float dtype.

    Used as the width below which an adaptive quadrature interval is
    accepted without further bisection.

    Returns:
        float: ``2.220446049250313e-16`` for float64,
        ``1.1920929e-07`` for float32.
    """
    return float(jnp.finfo(_dtype).eps)
