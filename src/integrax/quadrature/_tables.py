"""Node and weight tables for the quadrature rules.

Coefficients are stored as Python tuples and cast to the configured dtype
at call time.

- Gauss-Kronrod 15-point rule with its embedded 7-point Gauss rule, laid
  out over the full symmetric node set ``[-1, 1]`` so that both estimates
  are a single dot product with the same 15 samples. Values are those of
  QUADPACK's ``qk15``.
- Gauss-Legendre rules of orders 1 through 10, generated once at import
  with :func:`numpy.polynomial.legendre.leggauss`.
"""

from __future__ import annotations

import numpy as np

from integrax.constants import FIXED_QUAD_MAX_ORDER

# Non-negative Kronrod abscissae, outermost first. Odd positions (1, 3, 5)
# and the centre are shared with the 7-point Gauss rule.
_XGK_HALF = (
    0.991455371120812639206854697526329,
    0.949107912342758524526189684047851,
    0.864864423359769072789712788640926,
    0.741531185599394439863864773280788,
    0.586087235467691130294144845693013,
    0.405845151377397166906606412076961,
    0.207784955007898467600689403773245,
    0.000000000000000000000000000000000,
)

_WGK_HALF = (
    0.022935322010529224963732008058970,
    0.063092092629978553290700663189204,
    0.104790010322250183839876322541518,
    0.140653259715525918745189590510238,
    0.169004726639267902826583426598550,
    0.190350578064785409913256402421014,
    0.204432940075298892414161999234649,
    0.209482141084727828012999174891714,
)

# Gauss weights at the shared nodes, zero elsewhere.
_WG_HALF = (
    0.0,
    0.129484966168869693270611432679082,
    0.0,
    0.279705391489276667901467771423780,
    0.0,
    0.381830050505118944950369775488975,
    0.0,
    0.417959183673469387755102040816327,
)


def _mirror(half: tuple[float, ...], sign: float) -> tuple[float, ...]:
    """Expand an outermost-first half table (centre last) to all 15 nodes."""
    return tuple(sign * v for v in half[:-1]) + (half[-1],) + tuple(reversed(half[:-1]))


GK15_NODES = _mirror(_XGK_HALF, -1.0)
"""The 15 Kronrod abscissae on ``[-1, 1]``, ascending."""

GK15_KRONROD_WEIGHTS = _mirror(_WGK_HALF, 1.0)
"""Kronrod weights aligned with :data:`GK15_NODES`."""

GK15_GAUSS_WEIGHTS = _mirror(_WG_HALF, 1.0)
"""7-point Gauss weights aligned with :data:`GK15_NODES`; zero at Kronrod-only nodes."""


def _build_gauss_legendre(max_order: int) -> dict[int, tuple[tuple[float, ...], tuple[float, ...]]]:
    rules = {}
    for n in range(1, max_order + 1):
        nodes, weights = np.polynomial.legendre.leggauss(n)
        rules[n] = (tuple(float(x) for x in nodes), tuple(float(w) for w in weights))
    return rules


GAUSS_LEGENDRE = _build_gauss_legendre(FIXED_QUAD_MAX_ORDER)
"""Mapping ``n -> (nodes, weights)`` for Gauss-Legendre rules on ``[-1, 1]``."""
