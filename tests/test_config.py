"""Tests for the integrax.config module."""

import jax
import jax.numpy as jnp
import pytest

from integrax.config import get_dtype, get_machine_epsilon, set_dtype
from integrax.integrators import IVPConfig, rk4_step, solve_ivp
from integrax.quadrature import fixed_quad, quad


@pytest.fixture(autouse=True)
def reset_dtype():
    """Reset dtype to float64 after each test."""
    yield
    set_dtype(jnp.float64)


class TestGetSetDtype:
    def test_default_dtype(self):
        assert get_dtype() == jnp.float64

    def test_set_float32(self):
        set_dtype(jnp.float32)
        assert get_dtype() == jnp.float32

    def test_roundtrip(self):
        for dtype in (jnp.float32, jnp.float64):
            set_dtype(dtype)
            assert get_dtype() == dtype

    def test_invalid_dtype_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.int32)

    def test_invalid_dtype_string_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype("float32")

    def test_float16_not_supported(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.float16)

    def test_float64_enables_x64(self):
        set_dtype(jnp.float64)
        assert jax.config.jax_enable_x64 is True


class TestMachineEpsilon:
    def test_float64_epsilon(self):
        assert get_machine_epsilon() == pytest.approx(2.220446049250313e-16)

    def test_float32_epsilon(self):
        set_dtype(jnp.float32)
        assert get_machine_epsilon() == pytest.approx(1.1920929e-07)


class TestDtypeSwitchingOutputs:
    """Verify that output arrays follow the configured dtype."""

    def test_step_state_dtype_float32(self):
        set_dtype(jnp.float32)
        result = rk4_step(lambda t, x: -x, 0.0, jnp.array([1.0]), 0.1)
        assert result.state.dtype == jnp.float32

    def test_solve_ivp_dtype_float32(self):
        set_dtype(jnp.float32)
        sol = solve_ivp(lambda t, y: -y, (0.0, 1.0), [1.0])
        assert sol.t.dtype == jnp.float32
        assert sol.y.dtype == jnp.float32

    def test_solve_ivp_dtype_float64(self):
        sol = solve_ivp(lambda t, y: -y, (0.0, 1.0), [1.0], IVPConfig(method="RK23"))
        assert sol.y.dtype == jnp.float64

    def test_float32_quadrature_accuracy(self):
        set_dtype(jnp.float32)
        value, _, _ = quad(lambda x: x * x, 0.0, 1.0)
        assert value == pytest.approx(1.0 / 3.0, rel=1e-6)
        assert fixed_quad(lambda x: x**3, 0.0, 1.0, n=2) == pytest.approx(0.25, rel=1e-6)
