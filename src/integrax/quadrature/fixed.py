"""Fixed-order Gauss-Legendre quadrature.

A single non-adaptive weighted sum with ``n`` nodes, exact for
polynomials of degree ``2n - 1``. There is no error estimate and no
subdivision; the cost is always ``n`` integrand calls.
"""

from __future__ import annotations

from collections.abc import Callable

import jax.numpy as jnp

from integrax._callbacks import call_scalar
from integrax.config import get_dtype
from integrax.constants import FIXED_QUAD_MAX_ORDER, FIXED_QUAD_ORDER
from integrax.quadrature._tables import GAUSS_LEGENDRE


def fixed_quad(
    f: Callable[[float], float],
    a: float,
    b: float,
    n: int = FIXED_QUAD_ORDER,
) -> float:
    """Integrate *f* over ``[a, b]`` with an ``n``-point Gauss-Legendre rule.

    Args:
        f: Integrand of one real argument. Failing calls contribute zero.
        a: Lower bound (finite).
        b: Upper bound (finite).
        n: Number of nodes, between 1 and 10.

    Returns:
        float: The weighted sum ``(b - a) / 2 * sum(w_i * f(x_i))``.

    Raises:
        ValueError: If ``n`` is outside ``[1, 10]``.

    Examples:
        ```python
        from integrax.quadrature import fixed_quad
        fixed_quad(lambda x: x**3, 0.0, 1.0, n=2)  # 0.25
        ```
    """
    if n not in GAUSS_LEGENDRE:
        raise ValueError(
            f"fixed_quad order must be between 1 and {FIXED_QUAD_MAX_ORDER}, got {n}"
        )

    dtype = get_dtype()
    nodes, weights = GAUSS_LEGENDRE[n]
    center = 0.5 * (a + b)
    half = 0.5 * (b - a)

    samples = jnp.asarray([call_scalar(f, center + half * x) for x in nodes], dtype=dtype)
    return half * float(jnp.dot(jnp.asarray(weights, dtype=dtype), samples))
