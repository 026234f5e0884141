"""Romberg integration.

Row ``i`` of the Romberg table starts with the composite trapezoid rule on
``2**i`` panels; each further column applies Richardson extrapolation

.. math::

    R_{i,k} = \\frac{4^k R_{i,k-1} - R_{i-1,k-1}}{4^k - 1}

to cancel the next even power of the step size from the error. Each
refinement reuses all earlier samples, so level ``i`` only evaluates the
``2**(i-1)`` new midpoints.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable

import jax.numpy as jnp
from jax import Array

from integrax._callbacks import call_scalar
from integrax.config import get_dtype
from integrax.constants import ROMBERG_MAX_LEVELS, ROMBERG_TOL
from integrax.quadrature._types import QuadResult

logger = logging.getLogger(__name__)


def _validate(a: float, b: float, tol: float, max_levels: int) -> None:
    if not (math.isfinite(a) and math.isfinite(b)):
        raise ValueError(f"romberg requires finite bounds, got a={a}, b={b}")
    if tol < 0.0:
        raise ValueError(f"tol must be non-negative, got {tol}")
    if max_levels < 1:
        raise ValueError(f"max_levels must be at least 1, got {max_levels}")


def romberg_table(
    f: Callable[[float], float],
    a: float,
    b: float,
    tol: float = ROMBERG_TOL,
    max_levels: int = ROMBERG_MAX_LEVELS,
) -> tuple[list[Array], int]:
    """Build the triangular Romberg table for *f* on ``[a, b]``.

    Refinement stops after the first level whose diagonal entry agrees with
    the previous diagonal entry to within *tol*, or after *max_levels*
    refinements.

    Args:
        f: Integrand of one real argument. Failing calls contribute zero.
        a: Lower bound (finite).
        b: Upper bound (finite).
        tol: Absolute tolerance on consecutive diagonal entries.
        max_levels: Maximum number of trapezoid refinements.

    Returns:
        tuple: ``(rows, evaluations)``. ``rows[i]`` is a 1-D array of
        length ``i + 1``; ``rows[i][i]`` is the ``i``-th diagonal entry.

    Raises:
        ValueError: On infinite bounds, negative *tol*, or
            ``max_levels < 1``.
    """
    _validate(a, b, tol, max_levels)
    dtype = get_dtype()

    span = b - a
    trapezoid = 0.5 * span * (call_scalar(f, a) + call_scalar(f, b))
    evaluations = 2
    rows = [jnp.asarray([trapezoid], dtype=dtype)]

    for level in range(1, max_levels + 1):
        panels = 2 ** (level - 1)
        h = span / panels
        midpoints = sum(call_scalar(f, a + (k + 0.5) * h) for k in range(panels))
        evaluations += panels
        trapezoid = 0.5 * (trapezoid + h * midpoints)

        previous = rows[-1]
        row = [trapezoid]
        for k in range(1, level + 1):
            factor = 4.0 ** k
            row.append((factor * row[k - 1] - float(previous[k - 1])) / (factor - 1.0))
        rows.append(jnp.asarray(row, dtype=dtype))

        if abs(row[-1] - float(previous[-1])) <= tol:
            break

    return rows, evaluations


def romberg(
    f: Callable[[float], float],
    a: float,
    b: float,
    tol: float = ROMBERG_TOL,
    max_levels: int = ROMBERG_MAX_LEVELS,
) -> QuadResult:
    """Integrate *f* over ``[a, b]`` with Romberg extrapolation.

    Args:
        f: Integrand of one real argument.
        a: Lower bound (finite).
        b: Upper bound (finite).
        tol: Absolute tolerance on consecutive diagonal entries.
        max_levels: Maximum number of trapezoid refinements.

    Returns:
        QuadResult: The last diagonal entry as ``value`` and its distance
        from the previous diagonal entry as ``error``.

    Examples:
        ```python
        import math
        from integrax.quadrature import romberg
        value, error, _ = romberg(math.sin, 0.0, math.pi, tol=1e-10)
        value  # 2.0
        ```
    """
    _validate(a, b, tol, max_levels)
    if a == b:
        return QuadResult(value=0.0, error=0.0, evaluations=0)

    rows, evaluations = romberg_table(f, a, b, tol, max_levels)
    value = float(rows[-1][-1])
    error = abs(value - float(rows[-2][-1]))
    if error > tol:
        logger.debug(
            "Romberg did not converge in %d levels; last change %.3e", max_levels, error
        )
    return QuadResult(value=value, error=error, evaluations=evaluations)
