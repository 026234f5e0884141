"""
integrax is a small numerical integration library implemented in JAX: adaptive and fixed-order quadrature, and explicit Runge-Kutta ODE solvers.
"""

from .config import set_dtype, get_dtype

from .quadrature import (
    QuadConfig,
    QuadResult,
    quad,
    gk15,
    dblquad,
    tplquad,
    fixed_quad,
    romberg,
    romberg_table,
    simpson,
    trapezoid,
)

from .integrators import (
    StepResult,
    Tableau,
    Method,
    IVPConfig,
    OdeintConfig,
    ODEResult,
    RK4_TABLEAU,
    RK23_TABLEAU,
    DP54_TABLEAU,
    rk4_step,
    rk23_step,
    dp54_step,
    solve_ivp,
    odeint,
)
