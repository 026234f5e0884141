import jax.numpy as jnp
import pytest

from integrax.config import set_dtype


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Set float64 precision before every test.

    Tests that switch precision (e.g. test_config.py) may leave float32
    behind; this fixture ensures every other test starts from float64.
    """
    set_dtype(jnp.float64)
