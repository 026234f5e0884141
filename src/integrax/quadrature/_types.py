"""Type definitions for quadrature routines.

- :class:`QuadResult`: Outcome of one integration call (value, error
  estimate, integrand evaluation count).
- :class:`QuadConfig`: Tolerances and subdivision budget for the adaptive
  Gauss-Kronrod driver and the nested multi-dimensional integrators.

Both are :class:`~typing.NamedTuple` instances, so results unpack like
plain tuples: ``value, error, neval = quad(f, 0.0, 1.0)``.
"""

from __future__ import annotations

from typing import NamedTuple

from integrax.constants import QUAD_EPSABS, QUAD_EPSREL, QUAD_LIMIT


class QuadResult(NamedTuple):
    """Result of a quadrature call.

    Attributes:
        value: Integral estimate. A ``complex`` when :func:`quad` integrated
            a complex-valued integrand, otherwise a ``float``.
        error: Estimate of the absolute error. This is an estimate, not a
            bound; it may exceed the requested tolerance when the
            subdivision budget ran out.
        evaluations: Number of integrand calls made. Diagnostic only.
    """

    value: float | complex
    error: float
    evaluations: int


class QuadConfig(NamedTuple):
    """Configuration for adaptive quadrature.

    A subinterval is accepted when ``|K15 - G7| <= max(epsabs, epsrel * |K15|)``.

    Attributes:
        epsabs: Absolute error tolerance.
        epsrel: Relative error tolerance.
        limit: Maximum number of interval bisections. Once exhausted, the
            remaining intervals are accepted as they are.
    """

    epsabs: float = QUAD_EPSABS
    epsrel: float = QUAD_EPSREL
    limit: int = QUAD_LIMIT


def validate_quad_config(config: QuadConfig) -> None:
    """Check a :class:`QuadConfig` before any integrand is evaluated.

    Raises:
        ValueError: If a tolerance is negative or ``limit`` is negative.
    """
    if config.epsabs < 0.0 or config.epsrel < 0.0:
        raise ValueError(
            f"Tolerances must be non-negative, got epsabs={config.epsabs}, "
            f"epsrel={config.epsrel}"
        )
    if config.limit < 0:
        raise ValueError(f"limit must be a non-negative integer, got {config.limit}")
