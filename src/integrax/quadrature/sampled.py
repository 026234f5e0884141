"""Integration rules for pre-sampled values.

These rules never call a function; they integrate an array of samples,
either on a uniform grid with spacing ``dx`` or on explicit coordinates
``x`` (which may be non-uniform).
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from integrax.config import get_dtype


def _prepare(
    values: ArrayLike, x: ArrayLike | None, dx: float, minimum: int, name: str
) -> tuple[Array, Array]:
    """Validate samples and return them with their interval widths."""
    dtype = get_dtype()
    y = jnp.asarray(values, dtype=dtype)
    if y.ndim != 1:
        raise ValueError(f"{name}: values must be one-dimensional, got shape {y.shape}")
    if y.size < minimum:
        raise ValueError(f"{name}: need at least {minimum} samples, got {y.size}")

    if x is None:
        return y, jnp.full(y.size - 1, dx, dtype=dtype)

    xs = jnp.asarray(x, dtype=dtype)
    if xs.shape != y.shape:
        raise ValueError(
            f"{name}: x must have the same length as values, got {xs.size} and {y.size}"
        )
    return y, jnp.diff(xs)


def trapezoid(values: ArrayLike, x: ArrayLike | None = None, dx: float = 1.0) -> float:
    """Integrate samples with the composite trapezoid rule.

    Args:
        values: Sample values, at least 2.
        x: Optional sample coordinates, same length as *values*. May be
            non-uniformly spaced.
        dx: Uniform spacing, used when *x* is ``None``.

    Returns:
        float: ``sum((y[i] + y[i+1]) / 2 * h[i])``.

    Raises:
        ValueError: If fewer than 2 samples are given or *x* has the wrong
            length.

    Examples:
        ```python
        from integrax.quadrature import trapezoid
        trapezoid([0.0, 1.0, 4.0, 9.0], dx=1.0)  # 9.5
        ```
    """
    y, h = _prepare(values, x, dx, 2, "trapezoid")
    return float(jnp.sum(0.5 * (y[:-1] + y[1:]) * h))


def simpson(values: ArrayLike, x: ArrayLike | None = None, dx: float = 1.0) -> float:
    """Integrate samples with the composite Simpson rule.

    Simpson's rule works on pairs of intervals. With an odd number of
    samples the rule covers the whole range; with an even number it covers
    all but the last interval, which is added with the trapezoid rule.
    Pairs of unequal width use the non-uniform Simpson weights, which
    reduce to ``h/3 * (y0 + 4*y1 + y2)`` on a uniform grid.

    Args:
        values: Sample values, at least 3.
        x: Optional sample coordinates, same length as *values*.
        dx: Uniform spacing, used when *x* is ``None``.

    Returns:
        float: The integral estimate.

    Raises:
        ValueError: If fewer than 3 samples are given or *x* has the wrong
            length.

    Examples:
        ```python
        from integrax.quadrature import simpson
        simpson([0.0, 0.25, 1.0], dx=0.5)  # 1/3
        ```
    """
    y, h = _prepare(values, x, dx, 3, "simpson")

    tail = 0.0
    if y.size % 2 == 0:
        tail = float(0.5 * (y[-2] + y[-1]) * h[-1])
        y = y[:-1]
        h = h[:-1]

    h0 = h[0::2]
    h1 = h[1::2]
    y0 = y[0:-1:2]
    y1 = y[1::2]
    y2 = y[2::2]
    span = h0 + h1
    body = span / 6.0 * (
        (2.0 - h1 / h0) * y0
        + span * span / (h0 * h1) * y1
        + (2.0 - h0 / h1) * y2
    )
    return float(jnp.sum(body)) + tail
