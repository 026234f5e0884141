"""Iterated double and triple integrals.

:func:`dblquad` and :func:`tplquad` nest :func:`~integrax.quadrature.quad`:
every sample the outer driver requests is itself a full adaptive
integration over the inner variable. Inner limits may be constants or
functions of the outer variable(s), which allows non-rectangular regions.

Only the outermost Kronrod/Gauss disagreement is reported as ``error``;
the error of the inner integrations is not propagated into it.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Union

from integrax._callbacks import call_scalar
from integrax.quadrature._types import QuadConfig, QuadResult, validate_quad_config
from integrax.quadrature.adaptive import quad

Bound1D = Union[float, Callable[[float], float]]
Bound2D = Union[float, Callable[[float, float], float]]


def _as_bound(bound: Bound1D | Bound2D) -> Callable[..., float]:
    """Turn a constant or callable limit into a callable that never raises."""
    if callable(bound):
        return lambda *outer: call_scalar(bound, *outer)
    value = float(bound)
    return lambda *outer: value


def dblquad(
    f: Callable[[float, float], float],
    xa: float,
    xb: float,
    ya: Bound1D,
    yb: Bound1D,
    config: QuadConfig | None = None,
) -> QuadResult:
    """Compute the double integral of ``f(y, x)``.

    Integrates ``y`` from ``ya(x)`` to ``yb(x)`` and then ``x`` from
    ``xa`` to ``xb``.

    Args:
        f: Integrand ``f(y, x)``; the inner variable comes first.
        xa: Lower bound of ``x``.
        xb: Upper bound of ``x``.
        ya: Lower bound of ``y``, a constant or a function of ``x``.
        yb: Upper bound of ``y``, a constant or a function of ``x``.
        config: Tolerances and subdivision budget applied at every level.
            Uses default :class:`QuadConfig` if ``None``.

    Returns:
        QuadResult: ``value`` and the outer-level ``error``;
        ``evaluations`` counts calls of *f*.

    Examples:
        ```python
        from integrax.quadrature import dblquad
        value, error, _ = dblquad(lambda y, x: x * y, 0.0, 1.0, 0.0, 1.0)
        value  # 0.25
        ```
    """
    if config is None:
        config = QuadConfig()
    validate_quad_config(config)

    lower = _as_bound(ya)
    upper = _as_bound(yb)
    evaluations = 0

    def inner(x: float) -> float:
        nonlocal evaluations
        result = quad(lambda y: f(y, x), lower(x), upper(x), config)
        evaluations += result.evaluations
        return result.value

    outer = quad(inner, xa, xb, config)
    return QuadResult(value=outer.value, error=outer.error, evaluations=evaluations)


def tplquad(
    f: Callable[[float, float, float], float],
    xa: float,
    xb: float,
    ya: Bound1D,
    yb: Bound1D,
    za: Bound2D,
    zb: Bound2D,
    config: QuadConfig | None = None,
) -> QuadResult:
    """Compute the triple integral of ``f(z, y, x)``.

    Integrates ``z`` from ``za(x, y)`` to ``zb(x, y)``, then ``y`` from
    ``ya(x)`` to ``yb(x)``, then ``x`` from ``xa`` to ``xb``.

    Args:
        f: Integrand ``f(z, y, x)``; innermost variable first.
        xa: Lower bound of ``x``.
        xb: Upper bound of ``x``.
        ya: Lower bound of ``y``, a constant or a function of ``x``.
        yb: Upper bound of ``y``, a constant or a function of ``x``.
        za: Lower bound of ``z``, a constant or a function of ``(x, y)``.
        zb: Upper bound of ``z``, a constant or a function of ``(x, y)``.
        config: Tolerances and subdivision budget applied at every level.

    Returns:
        QuadResult: ``value`` and the outer-level ``error``;
        ``evaluations`` counts calls of *f*.

    Examples:
        ```python
        from integrax.quadrature import tplquad
        value, _, _ = tplquad(lambda z, y, x: x * y * z, 0, 1, 0, 1, 0, 1)
        value  # 0.125
        ```
    """
    if config is None:
        config = QuadConfig()
    validate_quad_config(config)

    lower = _as_bound(za)
    upper = _as_bound(zb)
    evaluations = 0

    def plane(y: float, x: float) -> float:
        nonlocal evaluations
        result = quad(lambda z: f(z, y, x), lower(x, y), upper(x, y), config)
        evaluations += result.evaluations
        return result.value

    outer = dblquad(plane, xa, xb, ya, yb, config)
    return QuadResult(value=outer.value, error=outer.error, evaluations=evaluations)
