# /// script
# requires-python = ">=3.11"
# dependencies = ["typer>=0.9.0", "integrax"]
#
# [tool.uv.sources]
# integrax = { path = ".." }
# ///
"""Run the integrax quadrature routines and ODE solvers on reference problems.

Evaluates a set of integrals with known closed forms using every quadrature
routine, then solves the Lotka-Volterra predator-prey system with
``solve_ivp`` and ``odeint`` and reports the drift of its conserved
quantity.

Requires integrax to be installed (``uv pip install -e .`` from the repo root).

Usage:
    uv run examples/integrate.py [OPTIONS]

Examples:
    # Defaults: RK45 at rtol=1e-6 over 20 time units
    uv run examples/integrate.py

    # Bogacki-Shampine with loose tolerance, sampled on a 50-point grid
    uv run examples/integrate.py --method RK23 --rtol 1e-3 --samples 50

    # Single precision
    uv run examples/integrate.py --float32
"""

import enum
import math
import time
from typing import Annotated

import jax.numpy as jnp
import typer

from integrax import (
    IVPConfig,
    OdeintConfig,
    dblquad,
    fixed_quad,
    odeint,
    quad,
    romberg,
    set_dtype,
    simpson,
    solve_ivp,
    trapezoid,
)


class MethodName(enum.StrEnum):
    """Runge-Kutta method used by solve_ivp."""

    RK4 = "RK4"
    RK23 = "RK23"
    RK45 = "RK45"


# Lotka-Volterra parameters
_ALPHA, _BETA, _DELTA, _GAMMA = 1.1, 0.4, 0.1, 0.4


def _lotka_volterra(t, y):
    prey, predator = y[0], y[1]
    return jnp.array(
        [_ALPHA * prey - _BETA * prey * predator, _DELTA * prey * predator - _GAMMA * predator]
    )


def _invariant(y):
    """Conserved quantity of the Lotka-Volterra system."""
    prey, predator = y[..., 0], y[..., 1]
    return _DELTA * prey - _GAMMA * jnp.log(prey) + _BETA * predator - _ALPHA * jnp.log(predator)


def main(
    method: Annotated[MethodName, typer.Option(help="ODE step method")] = MethodName.RK45,
    rtol: Annotated[float, typer.Option(help="Relative tolerance for solve_ivp")] = 1e-6,
    atol: Annotated[float, typer.Option(help="Absolute tolerance for solve_ivp")] = 1e-9,
    duration: Annotated[float, typer.Option(help="Integration time span")] = 20.0,
    samples: Annotated[int, typer.Option(help="Points in the output grid")] = 201,
    float32: Annotated[bool, typer.Option(help="Use single precision")] = False,
):
    set_dtype(jnp.float32 if float32 else jnp.float64)

    print("── Stage 1: Quadrature ──")
    cases = [
        ("quad x^2 on [0, 1]", quad(lambda x: x * x, 0.0, 1.0).value, 1.0 / 3.0),
        (
            "quad exp(-x^2) on (-inf, inf)",
            quad(lambda x: math.exp(-x * x), -math.inf, math.inf).value,
            math.sqrt(math.pi),
        ),
        ("dblquad xy on [0, 1]^2", dblquad(lambda y, x: x * y, 0.0, 1.0, 0.0, 1.0).value, 0.25),
        ("fixed_quad cos on [0, pi/2]", fixed_quad(math.cos, 0.0, math.pi / 2), 1.0),
        ("romberg sin on [0, pi]", romberg(math.sin, 0.0, math.pi, tol=1e-10).value, 2.0),
    ]
    grid = jnp.linspace(0.0, 1.0, 11)
    cases.append(("simpson x^2 (11 samples)", simpson(grid**2, x=grid), 1.0 / 3.0))
    cases.append(("trapezoid x^2 (11 samples)", trapezoid(grid**2, x=grid), 1.0 / 3.0))
    for name, value, exact in cases:
        print(f"  {name:<32} {value: .12f}  (error {abs(value - exact):.2e})")

    print(f"\n── Stage 2: solve_ivp ({method.value}, rtol={rtol:g}, atol={atol:g}) ──")
    y0 = jnp.array([10.0, 5.0])
    t0 = time.perf_counter()
    sol = solve_ivp(
        _lotka_volterra,
        (0.0, duration),
        y0,
        IVPConfig(method=method.value, rtol=rtol, atol=atol),
    )
    print(f"  {sol.message}")
    print(
        f"  {sol.t.shape[0] - 1} steps, {sol.nfev} derivative evaluations "
        f"in {time.perf_counter() - t0:.2f}s"
    )
    drift = jnp.max(jnp.abs(_invariant(sol.y) - _invariant(y0)))
    print(f"  Final state: prey={float(sol.y[-1, 0]):.6f}, predator={float(sol.y[-1, 1]):.6f}")
    print(f"  Max invariant drift: {float(drift):.3e}")

    print(f"\n── Stage 3: odeint on {samples} grid points ──")
    t = jnp.linspace(0.0, duration, samples)
    t0 = time.perf_counter()
    y, info = odeint(
        lambda y, t: _lotka_volterra(t, y),
        y0,
        t,
        OdeintConfig(rtol=rtol, atol=atol),
        full_output=True,
    )
    print(f"  {info['nfe']} derivative evaluations in {time.perf_counter() - t0:.2f}s")
    if not info["success"]:
        print(f"  Warning: {info['message']}")
    drift = jnp.max(jnp.abs(_invariant(y) - _invariant(y0)))
    print(f"  Max invariant drift: {float(drift):.3e}")

    print("\nDone.")


if __name__ == "__main__":
    typer.run(main)
