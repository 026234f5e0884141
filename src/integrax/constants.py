"""
The `constants` module defines the default tolerances and iteration caps shared by the integrators.
"""

# Quadrature defaults

"""
Default absolute error tolerance for adaptive quadrature. Equal to sqrt(2.2e-16) rounded as in QUADPACK.
"""
QUAD_EPSABS = 1.49e-8

"""
Default relative error tolerance for adaptive quadrature.
"""
QUAD_EPSREL = 1.49e-8

"""
Default maximum number of interval bisections performed by adaptive quadrature.
"""
QUAD_LIMIT = 50

"""
Default Gauss-Legendre order for fixed-order quadrature.
"""
FIXED_QUAD_ORDER = 5

"""
Highest Gauss-Legendre order with a precomputed rule.
"""
FIXED_QUAD_MAX_ORDER = 10

"""
Default convergence tolerance on consecutive Romberg diagonal entries.
"""
ROMBERG_TOL = 1e-8

"""
Default number of trapezoid refinement levels in Romberg integration.
"""
ROMBERG_MAX_LEVELS = 10

# ODE defaults

"""
Default relative tolerance for solve_ivp.
"""
IVP_RTOL = 1e-3

"""
Default absolute tolerance for solve_ivp.
"""
IVP_ATOL = 1e-6

"""
Default relative and absolute tolerance for odeint.
"""
ODEINT_TOL = 1.49e-8

"""
Maximum number of step attempts (accepted plus rejected) in one solve_ivp call.
"""
IVP_MAX_ATTEMPTS = 10_000

"""
Relative tolerance used to decide that the integration has reached the final time.
"""
IVP_END_RTOL = 1e-12

"""
Safety factor applied to step-size predictions.
"""
STEP_SAFETY = 0.9

"""
Largest factor by which an accepted step may grow the next step.
"""
STEP_MAX_GROWTH = 5.0

"""
Smallest factor by which a rejected step may shrink the retried step.
"""
STEP_MIN_SHRINK = 0.1

"""
Exponent applied to the error norm when shrinking a rejected step.
"""
STEP_SHRINK_EXPONENT = 0.25
