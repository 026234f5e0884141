"""Call sites for caller-supplied integrands and derivative functions.

Every evaluation of user code inside integrax goes through one of the
helpers below.  A call that raises, or that returns something that cannot
be read as a number of the expected shape, is replaced by a neutral zero so
that the surrounding numerical loop keeps running and still returns a
well-formed result.  Non-finite numbers (NaN, +/-inf) are valid values and
are passed through untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import jax.numpy as jnp
from jax import Array

from integrax.config import get_dtype

logger = logging.getLogger(__name__)


def call_scalar(func: Callable[..., Any], *args: float) -> float:
    """Evaluate a real-valued callback, substituting 0.0 on failure.

    Args:
        func: Caller-supplied function.
        *args: Positional arguments forwarded to *func*.

    Returns:
        float: ``float(func(*args))``, or ``0.0`` if the call raised or the
        result could not be converted to a real number.
    """
    try:
        return float(func(*args))
    except Exception as exc:
        logger.debug("Callback %r failed at %r, substituting 0.0: %s", func, args, exc)
        return 0.0


def call_complex(func: Callable[..., Any], *args: float) -> complex:
    """Evaluate a possibly complex-valued callback, substituting 0 on failure.

    Args:
        func: Caller-supplied function.
        *args: Positional arguments forwarded to *func*.

    Returns:
        complex: ``complex(func(*args))``, or ``0j`` on failure.
    """
    try:
        return complex(func(*args))
    except Exception as exc:
        logger.debug("Callback %r failed at %r, substituting 0j: %s", func, args, exc)
        return 0j


def probe(func: Callable[..., Any], *args: float) -> Any:
    """Evaluate a callback once and return its raw result, or ``None`` on failure.

    Used to inspect the kind of value an integrand produces (real or
    complex) before choosing an integration path.
    """
    try:
        return func(*args)
    except Exception as exc:
        logger.debug("Probe of %r at %r failed: %s", func, args, exc)
        return None


def is_complex_value(value: Any) -> bool:
    """Return ``True`` if *value* is a Python complex or a complex-typed array."""
    if isinstance(value, complex):
        return True
    dtype = getattr(value, "dtype", None)
    return dtype is not None and jnp.issubdtype(dtype, jnp.complexfloating)


def call_vector(func: Callable[..., Any], t: float, y: Array, *args: Any) -> Array:
    """Evaluate an ODE right-hand side, substituting a zero vector on failure.

    Args:
        func: Caller-supplied derivative ``func(t, y, *args)``.
        t: Current time.
        y: Current state vector, shape ``(n,)``.
        *args: Extra positional arguments forwarded to *func*.

    Returns:
        jax.Array: Derivative with the same shape as *y*. A zero vector if
        the call raised, returned a non-numeric value, or returned a
        vector of the wrong length.
    """
    try:
        dy = jnp.asarray(func(t, y, *args), dtype=get_dtype())
    except Exception as exc:
        logger.debug("Derivative %r failed at t=%r, substituting zeros: %s", func, t, exc)
        return jnp.zeros_like(y)

    if dy.size != y.size:
        logger.debug(
            "Derivative %r returned %d components at t=%r, expected %d; substituting zeros",
            func, dy.size, t, y.size,
        )
        return jnp.zeros_like(y)
    return dy.reshape(y.shape)
