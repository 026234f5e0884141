"""Numerical quadrature of functions and sampled data.

Available routines:

- :func:`quad` -- Adaptive 15-point Gauss-Kronrod quadrature, finite or
  infinite bounds, real or complex integrands
- :func:`dblquad`, :func:`tplquad` -- Iterated double and triple integrals
  with constant or variable inner limits
- :func:`fixed_quad` -- Fixed-order Gauss-Legendre rule (orders 1-10)
- :func:`romberg` -- Romberg extrapolation of the trapezoid rule
- :func:`simpson`, :func:`trapezoid` -- Rules for pre-sampled values

Function-driven routines share a common shape::

    value, error, evaluations = quad(f, a, b, config)

and never raise on integrand failures: a failing call contributes zero.
"""

from integrax.quadrature._types import QuadConfig, QuadResult
from integrax.quadrature.adaptive import gk15, quad
from integrax.quadrature.fixed import fixed_quad
from integrax.quadrature.multidim import dblquad, tplquad
from integrax.quadrature.romberg import romberg, romberg_table
from integrax.quadrature.sampled import simpson, trapezoid
from integrax.quadrature.transforms import finite_domain

__all__ = [
    "QuadConfig",
    "QuadResult",
    "dblquad",
    "finite_domain",
    "fixed_quad",
    "gk15",
    "quad",
    "romberg",
    "romberg_table",
    "simpson",
    "tplquad",
    "trapezoid",
]
