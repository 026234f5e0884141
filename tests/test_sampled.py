"""Tests for the sample-based trapezoid and Simpson rules."""

import jax.numpy as jnp
import pytest

from integrax.quadrature import simpson, trapezoid


class TestTrapezoid:
    def test_x_squared_bias_preserved(self):
        """Samples of x^2 at 0..3: the rule gives 9.5, not the exact 9."""
        assert trapezoid([0.0, 1.0, 4.0, 9.0], dx=1.0) == 9.5

    def test_default_spacing(self):
        assert trapezoid([1.0, 1.0, 1.0]) == 2.0

    def test_non_uniform_x(self):
        x = [0.0, 0.5, 2.0]
        assert trapezoid([1.0, 1.0, 1.0], x=x) == pytest.approx(2.0)
        assert trapezoid([0.0, 0.5, 2.0], x=x) == pytest.approx(2.0)

    def test_two_samples(self):
        assert trapezoid([1.0, 3.0], dx=0.5) == pytest.approx(1.0)

    def test_accepts_jax_array(self):
        assert trapezoid(jnp.linspace(0.0, 1.0, 11), dx=0.1) == pytest.approx(0.5)

    def test_too_few_samples_raise(self):
        with pytest.raises(ValueError, match="at least 2"):
            trapezoid([1.0])

    def test_length_mismatch_raises(self):
        with pytest.raises(ValueError, match="same length"):
            trapezoid([1.0, 2.0, 3.0], x=[0.0, 1.0])

    def test_two_dimensional_raises(self):
        with pytest.raises(ValueError, match="one-dimensional"):
            trapezoid([[1.0, 2.0], [3.0, 4.0]])


class TestSimpson:
    def test_three_points_quadratic(self):
        assert simpson([0.0, 0.25, 1.0], dx=0.5) == pytest.approx(1.0 / 3.0, abs=1e-15)

    def test_five_points_cubic_exact(self):
        x = jnp.linspace(0.0, 2.0, 5)
        assert simpson(x**3, dx=0.5) == pytest.approx(4.0, abs=1e-14)

    def test_even_count_trapezoid_tail(self):
        """Simpson over [0, 2] plus a trapezoid on the last interval [2, 3]."""
        value = simpson([0.0, 1.0, 4.0, 9.0], dx=1.0)
        assert value == pytest.approx(8.0 / 3.0 + 6.5, abs=1e-14)

    def test_non_uniform_quadratic_exact(self):
        x = [0.0, 0.25, 1.0]
        y = [xi * xi for xi in x]
        assert simpson(y, x=x) == pytest.approx(1.0 / 3.0, abs=1e-14)

    def test_x_matches_dx_on_uniform_grid(self):
        y = [1.0, 2.0, 0.5, 3.0, 4.0]
        x = [0.0, 0.5, 1.0, 1.5, 2.0]
        assert simpson(y, x=x) == pytest.approx(simpson(y, dx=0.5))

    def test_too_few_samples_raise(self):
        with pytest.raises(ValueError, match="at least 3"):
            simpson([1.0, 2.0])

    def test_length_mismatch_raises(self):
        with pytest.raises(ValueError, match="same length"):
            simpson([1.0, 2.0, 3.0], x=[0.0, 1.0, 2.0, 3.0])
