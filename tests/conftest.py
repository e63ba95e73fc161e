"""
Pytest configuration and shared fixtures for statistical manifold tests.

This module provides JAX-aware fixtures and configuration for testing
the exponential-family machinery and the Gaussian models.
"""
import zlib

import pytest
import jax

from infogeo.config import NumericsConfig, configure
from infogeo.geometry import Diagonal, Scale, Symmetric

# Chart transitions are checked to 1e-8; float32 cannot reach that
configure(NumericsConfig(enable_x64=True))


@pytest.fixture(scope="session")
def base_key():
    """Root PRNG key for all tests."""
    return jax.random.PRNGKey(42)


@pytest.fixture
def key(base_key, request):
    """Per-test PRNG key derived from test name for reproducibility."""
    test_id = zlib.crc32(request.node.nodeid.encode()) % (2**31)
    return jax.random.fold_in(base_key, test_id)


@pytest.fixture(params=[1, 2, 3, 5])
def dim(request):
    """Parametrized dimension for testing across scales."""
    return request.param


@pytest.fixture(params=[Symmetric, Diagonal, Scale], ids=["full", "diagonal", "isotropic"])
def structure_type(request):
    """Parametrized covariance structure class."""
    return request.param


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "charts: coordinate chart and point tests")
    config.addinivalue_line("markers", "covariance: covariance structure tests")
    config.addinivalue_line("markers", "family: exponential family tests")
    config.addinivalue_line("markers", "invariant: mathematical invariant verification")
