"""Test configuration for obelisk tests."""

import os

import jax.numpy as jnp
import pytest

from obelisk.core.primitives import FLOAT_DTYPE


def pytest_generate_tests(metafunc):
    """Run each test with JIT enabled and disabled."""
    if "jit_mode" in metafunc.fixturenames:
        metafunc.parametrize("jit_mode", ["no_jit", "jit"], indirect=True)


@pytest.fixture
def jit_mode(request):
    """Set JAX JIT compilation mode."""
    if request.param == "no_jit":
        os.environ["JAX_DISABLE_JIT"] = "1"
    else:
        os.environ["JAX_DISABLE_JIT"] = "0"
    return request.param


@pytest.fixture
def unit_pyramid():
    """Unit-square base at z=0 with the apex at (0.5, 0.5, 1)."""
    return jnp.array(
        [
            [0.0, 0.0, 0.0],
            [1.0, 0.0, 0.0],
            [1.0, 1.0, 0.0],
            [0.0, 1.0, 0.0],
            [0.5, 0.5, 1.0],
        ],
        dtype=FLOAT_DTYPE,
    )


@pytest.fixture
def irregular_pyramid():
    """Non-planar, non-square base with an off-centre apex."""
    return jnp.array(
        [
            [0.0, 0.0, 0.0],
            [2.0, 0.0, 0.0],
            [2.2, 1.5, 0.0],
            [0.0, 1.0, 0.1],
            [1.0, 0.7, 1.3],
        ],
        dtype=FLOAT_DTYPE,
    )
