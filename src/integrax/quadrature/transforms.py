"""Maps from infinite integration domains onto finite reference intervals.

Each transform returns the reference interval ``(lo, hi)`` together with a
new integrand ``g(t) = f(x(t)) * dx/dt`` so that the adaptive driver can be
applied unchanged:

- ``(-inf, +inf)``: ``x = t / (1 - t^2)`` on ``t in (-1, 1)``,
  ``dx/dt = (1 + t^2) / (1 - t^2)^2``.
- ``[a, +inf)``: ``x = a + t / (1 - t)`` on ``t in [0, 1)``,
  ``dx/dt = 1 / (1 - t)^2``.
- ``(-inf, b]``: ``x = b - (1 - t) / t`` on ``t in (0, 1]``,
  ``dx/dt = 1 / t^2``.

The Gauss-Kronrod nodes never touch the endpoints of an interval, so the
singular ends of the maps are never sampled in practice. Should rounding
land a sample exactly on one, the transformed integrand evaluates to zero
there, which is the limit for any integrable ``f``.
"""

from __future__ import annotations

import math
from collections.abc import Callable


def _both_infinite(f: Callable[[float], float]) -> Callable[[float], float]:
    def g(t: float) -> float:
        d = 1.0 - t * t
        if d == 0.0:
            return 0.0
        return f(t / d) * (1.0 + t * t) / (d * d)

    return g


def _upper_infinite(f: Callable[[float], float], a: float) -> Callable[[float], float]:
    def g(t: float) -> float:
        d = 1.0 - t
        if d == 0.0:
            return 0.0
        return f(a + t / d) / (d * d)

    return g


def _lower_infinite(f: Callable[[float], float], b: float) -> Callable[[float], float]:
    def g(t: float) -> float:
        if t == 0.0:
            return 0.0
        return f(b - (1.0 - t) / t) / (t * t)

    return g


def finite_domain(
    f: Callable[[float], float], a: float, b: float
) -> tuple[Callable[[float], float], float, float]:
    """Rewrite an integral over ``[a, b]`` as one over a finite interval.

    Requires ``a < b``. Finite bounds are returned unchanged.

    Args:
        f: Integrand. Must already be safe to call (no exceptions).
        a: Lower bound, possibly ``-inf``.
        b: Upper bound, possibly ``+inf``.

    Returns:
        tuple: ``(g, lo, hi)`` such that the integral of ``g`` over
        ``[lo, hi]`` equals the integral of ``f`` over ``[a, b]``.

    Examples:
        ```python
        import math
        g, lo, hi = finite_domain(lambda x: math.exp(-x), 0.0, math.inf)
        (lo, hi)  # (0.0, 1.0)
        ```
    """
    lower_inf = math.isinf(a)
    upper_inf = math.isinf(b)
    if lower_inf and upper_inf:
        return _both_infinite(f), -1.0, 1.0
    if upper_inf:
        return _upper_infinite(f, a), 0.0, 1.0
    if lower_inf:
        return _lower_infinite(f, b), 0.0, 1.0
    return f, a, b
