"""Type definitions for the ODE integrators.

Provides the core data types used across the step functions and drivers:

- :class:`Tableau`: Butcher tableau of an explicit Runge-Kutta method.
- :class:`StepResult`: Output of every step function, containing the new
  state and, for embedded pairs, the local error estimate.
- :class:`Method`: The available step methods.
- :class:`IVPConfig`: Solver configuration for :func:`solve_ivp`.
- :class:`OdeintConfig`: Tolerances for :func:`odeint`.
- :class:`ODEResult`: Final record returned by :func:`solve_ivp`.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import NamedTuple

from jax import Array
from jax.typing import ArrayLike

from integrax.constants import IVP_ATOL, IVP_MAX_ATTEMPTS, IVP_RTOL, ODEINT_TOL


class Tableau(NamedTuple):
    """Butcher tableau of an explicit Runge-Kutta method.

    Row ``i`` of ``A`` holds exactly ``i`` coefficients, the couplings of
    stage ``i`` to stages ``0 .. i-1``.

    Attributes:
        A: Lower-triangular stage coupling coefficients, one tuple per stage.
        C: Stage time offsets as fractions of the step.
        B: Weights of the propagated solution.
        E: Error weights (propagated minus embedded solution weights), or
            ``None`` for methods without an embedded solution.
        order: Order of the propagated solution.
        error_order: Order of the embedded solution, or ``None``.
    """

    A: tuple[tuple[float, ...], ...]
    C: tuple[float, ...]
    B: tuple[float, ...]
    E: tuple[float, ...] | None
    order: int
    error_order: int | None

    @property
    def stages(self) -> int:
        """Number of stages of the method."""
        return len(self.C)


class StepResult(NamedTuple):
    """Result of a single Runge-Kutta step.

    Attributes:
        state: State vector at ``t + h``.
        error: Local error estimate vector (propagated minus embedded
            solution), or ``None`` for fixed-step methods.
    """

    state: Array
    error: Array | None


class Method(str, enum.Enum):
    """Explicit Runge-Kutta methods available to :func:`solve_ivp`.

    Members compare equal to their upper-case names; use :meth:`parse` for
    case-insensitive lookup.
    """

    RK4 = "RK4"
    RK23 = "RK23"
    RK45 = "RK45"

    @classmethod
    def parse(cls, method: str | Method) -> Method:
        """Resolve a method name, case-insensitively.

        Raises:
            ValueError: If *method* names no known method.
        """
        if isinstance(method, Method):
            return method
        try:
            return cls(str(method).upper())
        except ValueError:
            raise ValueError(
                f"method must be one of 'RK4', 'RK23', 'RK45', got {method!r}"
            ) from None

    @property
    def adaptive(self) -> bool:
        """Whether the method carries an error estimate for step control."""
        return self is not Method.RK4


@dataclass(frozen=True)
class IVPConfig:
    """Configuration for :func:`~integrax.integrators.solve_ivp`.

    Args:
        method: ``"RK45"`` (Dormand-Prince 5(4)), ``"RK23"``
            (Bogacki-Shampine 3(2)) or ``"RK4"`` (classic, fixed step).
            Case-insensitive.
        t_eval: Optional times at which to report the solution. Values are
            interpolated linearly between the natural solver steps. Must
            lie within ``t_span``.
        max_step: Largest allowed step magnitude.
        rtol: Relative tolerance of the error norm.
        atol: Absolute tolerance of the error norm.
        first_step: Initial step magnitude. Estimated from the initial
            derivative when ``None``. For ``"RK4"`` this is the fixed step.
        max_attempts: Cap on step attempts, accepted plus rejected.

    Examples:
        ```python
        from integrax.integrators import IVPConfig
        config = IVPConfig(method="RK23", rtol=1e-6, atol=1e-9)
        ```
    """

    method: str | Method = Method.RK45
    t_eval: ArrayLike | None = None
    max_step: float = math.inf
    rtol: float = IVP_RTOL
    atol: float = IVP_ATOL
    first_step: float | None = None
    max_attempts: int = IVP_MAX_ATTEMPTS

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", Method.parse(self.method))
        if not self.max_step > 0.0:
            raise ValueError(f"max_step must be positive, got {self.max_step}")
        if not (self.rtol > 0.0 and self.atol > 0.0):
            raise ValueError(
                f"rtol and atol must be positive, got rtol={self.rtol}, atol={self.atol}"
            )
        if self.first_step is not None and not (
            self.first_step > 0.0 and math.isfinite(self.first_step)
        ):
            raise ValueError(f"first_step must be positive and finite, got {self.first_step}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")


class OdeintConfig(NamedTuple):
    """Tolerances for :func:`~integrax.integrators.odeint`.

    Attributes:
        rtol: Relative tolerance passed to every ``solve_ivp`` segment.
        atol: Absolute tolerance passed to every ``solve_ivp`` segment.
    """

    rtol: float = ODEINT_TOL
    atol: float = ODEINT_TOL


class ODEResult(NamedTuple):
    """Outcome of :func:`~integrax.integrators.solve_ivp`.

    Attributes:
        t: Output times, shape ``(N,)``.
        y: States at the output times, shape ``(N, n)``; row ``i``
            belongs to ``t[i]``.
        success: ``True`` if the final time was reached. ``False`` means
            the attempt cap was hit; ``t`` and ``y`` then hold the partial
            trajectory.
        message: Human-readable termination reason.
        nfev: Number of derivative evaluations.
    """

    t: Array
    y: Array
    success: bool
    message: str
    nfev: int
