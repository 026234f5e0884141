"""Tests for the adaptive initial value problem driver (solve_ivp).

Tests cover:
- Accuracy of RK45, RK23 and RK4 on problems with known solutions
- Step-size control (max_step, first_step, rejections)
- Backward integration and degenerate spans
- t_eval resampling
- Step-attempt cap and partial trajectories
- Input validation and derivative failures
"""

import logging
import math

import jax.numpy as jnp
import pytest

from integrax.integrators import IVPConfig, Method, ODEResult, solve_ivp


# ──────────────────────────────────────────────
# Helper dynamics functions
# ──────────────────────────────────────────────

def _exponential_decay(t, y):
    """dy/dt = -y. Solution: y(t) = y0 * exp(-t)."""
    return -y


def _harmonic_oscillator(t, y):
    """State [q, dq/dt] with d^2q/dt^2 = -q."""
    return jnp.array([y[1], -y[0]])


# ──────────────────────────────────────────────
# Accuracy
# ──────────────────────────────────────────────

class TestSolveIVPAccuracy:
    def test_exponential_decay_rk45_defaults(self):
        sol = solve_ivp(_exponential_decay, (0.0, 1.0), jnp.array([1.0]))
        assert isinstance(sol, ODEResult)
        assert sol.success
        assert float(sol.y[-1, 0]) == pytest.approx(0.3678794412, rel=1e-3)

    def test_result_layout(self):
        sol = solve_ivp(_harmonic_oscillator, (0.0, 1.0), [1.0, 0.0])
        assert sol.t.ndim == 1
        assert sol.y.shape == (sol.t.shape[0], 2)
        assert float(sol.t[0]) == 0.0
        assert float(sol.t[-1]) == 1.0
        assert jnp.array_equal(sol.y[0], jnp.array([1.0, 0.0]))

    def test_times_strictly_increasing(self):
        sol = solve_ivp(_exponential_decay, (0.0, 2.0), [1.0])
        assert bool(jnp.all(jnp.diff(sol.t) > 0.0))

    def test_success_message(self):
        sol = solve_ivp(_exponential_decay, (0.0, 1.0), [1.0])
        assert sol.message == "The solver successfully reached the end of the integration interval."

    def test_harmonic_oscillator_tight_tolerance(self):
        config = IVPConfig(rtol=1e-9, atol=1e-12)
        sol = solve_ivp(_harmonic_oscillator, (0.0, 2.0 * math.pi), [1.0, 0.0], config)
        assert sol.success
        assert jnp.allclose(sol.y[-1], jnp.array([1.0, 0.0]), atol=1e-6)

    def test_rk23(self):
        config = IVPConfig(method="RK23", rtol=1e-6, atol=1e-9)
        sol = solve_ivp(_exponential_decay, (0.0, 1.0), [1.0], config)
        assert sol.success
        assert float(sol.y[-1, 0]) == pytest.approx(math.exp(-1.0), rel=1e-4)

    def test_rk4_fixed_step(self):
        config = IVPConfig(method=Method.RK4, first_step=0.1)
        sol = solve_ivp(_exponential_decay, (0.0, 1.0), [1.0], config)
        assert sol.success
        assert sol.t.shape == (11,)
        assert sol.nfev == 40
        assert float(sol.y[-1, 0]) == pytest.approx(math.exp(-1.0), rel=1e-5)

    def test_rk4_estimated_step(self):
        sol = solve_ivp(_exponential_decay, (0.0, 1.0), [1.0], IVPConfig(method="RK4"))
        assert sol.success
        assert float(sol.y[-1, 0]) == pytest.approx(math.exp(-1.0), rel=1e-8)

    def test_tighter_tolerance_more_accurate(self):
        loose = solve_ivp(_exponential_decay, (0.0, 1.0), [1.0], IVPConfig(rtol=1e-3))
        tight = solve_ivp(_exponential_decay, (0.0, 1.0), [1.0], IVPConfig(rtol=1e-8, atol=1e-10))
        exact = math.exp(-1.0)
        assert abs(float(tight.y[-1, 0]) - exact) < abs(float(loose.y[-1, 0]) - exact)
        assert tight.nfev > loose.nfev

    def test_time_dependent_rhs(self):
        sol = solve_ivp(lambda t, y: jnp.cos(t) * jnp.ones_like(y), (0.0, 1.0), [0.0],
                        IVPConfig(rtol=1e-8, atol=1e-10))
        assert float(sol.y[-1, 0]) == pytest.approx(math.sin(1.0), abs=1e-7)


# ──────────────────────────────────────────────
# Step-size control
# ──────────────────────────────────────────────

class TestSolveIVPStepControl:
    def test_max_step_respected(self):
        sol = solve_ivp(_exponential_decay, (0.0, 1.0), [1.0], IVPConfig(max_step=0.05))
        assert bool(jnp.all(jnp.diff(sol.t) <= 0.05 + 1e-12))
        assert sol.t.shape[0] >= 21

    def test_rejected_steps_retry(self):
        """An oversized first step is rejected and retried from the same point."""
        config = IVPConfig(first_step=1.0, rtol=1e-8, atol=1e-10)
        sol = solve_ivp(_exponential_decay, (0.0, 1.0), [1.0], config)
        accepted = sol.t.shape[0] - 1
        assert sol.success
        assert sol.nfev > 7 * accepted
        assert float(sol.y[-1, 0]) == pytest.approx(math.exp(-1.0), rel=1e-7)

    def test_nfev_counts_first_step_estimate(self):
        sol = solve_ivp(_exponential_decay, (0.0, 1.0), [1.0])
        assert sol.nfev % 7 == 1

    def test_nfev_with_first_step(self):
        sol = solve_ivp(_exponential_decay, (0.0, 1.0), [1.0], IVPConfig(first_step=0.1))
        assert sol.nfev % 7 == 0

    def test_run_summary_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="integrax.integrators.solve_ivp"):
            solve_ivp(_exponential_decay, (0.0, 1.0), [1.0])
        assert "accepted" in caplog.text


# ──────────────────────────────────────────────
# Direction and degenerate spans
# ──────────────────────────────────────────────

class TestSolveIVPDirection:
    def test_backward_integration(self):
        sol = solve_ivp(_exponential_decay, (1.0, 0.0), [math.exp(-1.0)])
        assert sol.success
        assert bool(jnp.all(jnp.diff(sol.t) < 0.0))
        assert float(sol.t[-1]) == 0.0
        assert float(sol.y[-1, 0]) == pytest.approx(1.0, rel=1e-3)

    def test_zero_span(self):
        sol = solve_ivp(_exponential_decay, (2.0, 2.0), [1.0, 2.0])
        assert sol.success
        assert sol.nfev == 0
        assert sol.t.shape == (1,)
        assert jnp.array_equal(sol.y, jnp.array([[1.0, 2.0]]))


# ──────────────────────────────────────────────
# t_eval resampling
# ──────────────────────────────────────────────

class TestSolveIVPTEval:
    def test_output_on_requested_times(self):
        t_eval = jnp.linspace(0.0, 1.0, 11)
        config = IVPConfig(t_eval=t_eval, rtol=1e-6, atol=1e-9, max_step=0.1)
        sol = solve_ivp(_exponential_decay, (0.0, 1.0), [1.0], config)
        assert jnp.array_equal(sol.t, t_eval)
        assert sol.y.shape == (11, 1)
        assert jnp.allclose(sol.y[:, 0], jnp.exp(-t_eval), atol=2e-3)

    def test_endpoints_match_natural_trajectory(self):
        natural = solve_ivp(_exponential_decay, (0.0, 1.0), [1.0])
        sampled = solve_ivp(
            _exponential_decay, (0.0, 1.0), [1.0], IVPConfig(t_eval=[0.0, 1.0])
        )
        assert float(sampled.y[0, 0]) == 1.0
        assert float(sampled.y[-1, 0]) == pytest.approx(float(natural.y[-1, 0]), rel=1e-12)

    def test_linear_interpolation_between_steps(self):
        """With a linear solution the interpolation is exact."""
        config = IVPConfig(t_eval=[0.25, 0.5, 0.75])
        sol = solve_ivp(lambda t, y: jnp.ones_like(y), (0.0, 1.0), [0.0], config)
        assert jnp.allclose(sol.y[:, 0], jnp.array([0.25, 0.5, 0.75]), atol=1e-12)

    def test_backward_t_eval(self):
        t_eval = [1.0, 0.5, 0.0]
        config = IVPConfig(t_eval=t_eval, rtol=1e-6, atol=1e-9, max_step=0.1)
        sol = solve_ivp(_exponential_decay, (1.0, 0.0), [math.exp(-1.0)], config)
        assert jnp.array_equal(sol.t, jnp.array(t_eval))
        assert jnp.allclose(sol.y[:, 0], jnp.exp(-jnp.array(t_eval)), atol=2e-3)

    def test_t_eval_outside_span_raises(self):
        with pytest.raises(ValueError, match="within t_span"):
            solve_ivp(_exponential_decay, (0.0, 1.0), [1.0], IVPConfig(t_eval=[0.5, 1.5]))

    def test_t_eval_two_dimensional_raises(self):
        with pytest.raises(ValueError, match="one-dimensional"):
            solve_ivp(_exponential_decay, (0.0, 1.0), [1.0], IVPConfig(t_eval=[[0.5]]))


# ──────────────────────────────────────────────
# Step-attempt cap
# ──────────────────────────────────────────────

class TestSolveIVPAttemptCap:
    def test_partial_trajectory(self):
        sol = solve_ivp(_exponential_decay, (0.0, 1.0), [1.0], IVPConfig(max_attempts=3))
        assert not sol.success
        assert "Maximum number of step attempts (3)" in sol.message
        assert sol.t.shape[0] <= 4
        assert float(sol.t[-1]) < 1.0
        assert sol.y.shape == (sol.t.shape[0], 1)

    def test_cap_logged_as_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="integrax.integrators.solve_ivp"):
            solve_ivp(_exponential_decay, (0.0, 1.0), [1.0], IVPConfig(max_attempts=3))
        assert any(record.levelno == logging.WARNING for record in caplog.records)
        assert "solve_ivp stopped" in caplog.text

    def test_partial_t_eval_truncated(self):
        t_eval = jnp.linspace(0.0, 1.0, 11)
        sol = solve_ivp(
            _exponential_decay, (0.0, 1.0), [1.0], IVPConfig(t_eval=t_eval, max_attempts=3)
        )
        assert not sol.success
        assert 1 <= sol.t.shape[0] < 11
        assert float(sol.t[0]) == 0.0
        assert sol.y.shape == (sol.t.shape[0], 1)


# ──────────────────────────────────────────────
# Derivative failures and non-finite values
# ──────────────────────────────────────────────

class TestSolveIVPFailures:
    def test_failing_derivative_keeps_state(self):
        def fun(t, y):
            raise RuntimeError("host error")

        sol = solve_ivp(fun, (0.0, 1.0), [1.0, -2.0])
        assert sol.success
        assert jnp.array_equal(sol.y[-1], jnp.array([1.0, -2.0]))

    def test_intermittent_failure_continues(self):
        def fun(t, y):
            if 0.4 < t < 0.6:
                raise RuntimeError("flaky")
            return -y

        sol = solve_ivp(fun, (0.0, 1.0), [1.0])
        assert sol.success
        assert math.isfinite(float(sol.y[-1, 0]))

    def test_nan_propagates(self):
        sol = solve_ivp(lambda t, y: y * jnp.nan, (0.0, 1.0), [1.0])
        assert sol.success
        assert math.isnan(float(sol.y[-1, 0]))


# ──────────────────────────────────────────────
# Configuration and input validation
# ──────────────────────────────────────────────

class TestIVPConfig:
    def test_defaults(self):
        config = IVPConfig()
        assert config.method is Method.RK45
        assert config.t_eval is None
        assert config.max_step == math.inf
        assert config.rtol == 1e-3
        assert config.atol == 1e-6
        assert config.first_step is None
        assert config.max_attempts == 10_000

    def test_method_case_insensitive(self):
        assert IVPConfig(method="rk23").method is Method.RK23
        assert Method.parse("Rk4") is Method.RK4

    def test_method_adaptive_flag(self):
        assert not Method.RK4.adaptive
        assert Method.RK23.adaptive
        assert Method.RK45.adaptive

    def test_unknown_method_raises(self):
        with pytest.raises(ValueError, match="method must be one of"):
            IVPConfig(method="euler")

    @pytest.mark.parametrize("kwargs", [{"rtol": 0.0}, {"atol": -1.0}])
    def test_non_positive_tolerance_raises(self, kwargs):
        with pytest.raises(ValueError, match="rtol and atol must be positive"):
            IVPConfig(**kwargs)

    def test_non_positive_max_step_raises(self):
        with pytest.raises(ValueError, match="max_step"):
            IVPConfig(max_step=0.0)

    @pytest.mark.parametrize("first_step", [0.0, -0.1, math.inf])
    def test_invalid_first_step_raises(self, first_step):
        with pytest.raises(ValueError, match="first_step"):
            IVPConfig(first_step=first_step)

    def test_invalid_max_attempts_raises(self):
        with pytest.raises(ValueError, match="max_attempts"):
            IVPConfig(max_attempts=0)

    def test_frozen(self):
        config = IVPConfig()
        with pytest.raises(AttributeError):
            config.rtol = 1.0


class TestSolveIVPValidation:
    def test_empty_state_raises(self):
        with pytest.raises(ValueError, match="must not be empty"):
            solve_ivp(_exponential_decay, (0.0, 1.0), [])

    def test_two_dimensional_state_raises(self):
        with pytest.raises(ValueError, match="one-dimensional"):
            solve_ivp(_exponential_decay, (0.0, 1.0), [[1.0]])

    def test_non_finite_span_raises(self):
        with pytest.raises(ValueError, match="finite"):
            solve_ivp(_exponential_decay, (0.0, math.inf), [1.0])

    def test_span_length_raises(self):
        with pytest.raises(ValueError, match="exactly two"):
            solve_ivp(_exponential_decay, (0.0, 1.0, 2.0), [1.0])

    def test_validation_before_callback(self):
        calls = []
        with pytest.raises(ValueError):
            solve_ivp(lambda t, y: calls.append(t), (0.0, math.nan), [1.0])
        assert calls == []
