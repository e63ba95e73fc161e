"""
Random generators for statistical manifold test fixtures.

Provides factories for points on the Gaussian manifolds with known,
well-conditioned parameters. These generators form the basis for
property-based testing of chart invariants.

Mathematical Context:
- Covariances are drawn as A Aᵀ/n + εI so that they stay positive definite
  after projection onto any covariance structure
- Points are created in Source coordinates and transitioned, so every chart
  receives a valid parameter
"""
import jax
import jax.numpy as jnp

from infogeo import Chart, LinearModel, MultivariateNormal, Normal, Point


# =============================================================================
# Generator Functions
# =============================================================================

def random_spd_matrix(key: jax.Array, dim: int, floor: float = 0.5) -> jnp.ndarray:
    """
    Generate random symmetric positive-definite matrix.

    Uses A = L @ L.T / dim + floor * I so eigenvalues stay above ``floor``.
    """
    L = jax.random.normal(key, shape=(dim, dim))
    return L @ L.T / dim + floor * jnp.eye(dim)


def random_normal_point(key: jax.Array, chart: Chart = Chart.SOURCE) -> Point:
    """Random N(μ, σ²) with μ ∈ [-3, 3], σ² ∈ [0.5, 4]."""
    k1, k2 = jax.random.split(key)
    mu = jax.random.uniform(k1, minval=-3.0, maxval=3.0)
    var = jax.random.uniform(k2, minval=0.5, maxval=4.0)
    normal = Normal()
    return normal.transition(normal.point(Chart.SOURCE, jnp.stack([mu, var])), chart)


def random_mvn_point(key: jax.Array,
                     model: MultivariateNormal,
                     chart: Chart = Chart.SOURCE) -> Point:
    """Random multivariate normal on ``model``, covariance projected onto its structure."""
    k1, k2 = jax.random.split(key)
    mu = jax.random.normal(k1, shape=(model.size,))
    sigma = random_spd_matrix(k2, model.size)
    return model.from_mean_covariance(chart, mu, sigma)


def random_linear_model_point(key: jax.Array,
                              model: LinearModel,
                              chart: Chart = Chart.SOURCE) -> Point:
    """Random linear-Gaussian model with bounded weights."""
    k1, k2 = jax.random.split(key)
    bias = random_mvn_point(k1, model.gaussian)
    weights = jax.random.normal(k2, shape=(model.outputs, model.inputs))
    return model.transition(model.from_components(Chart.SOURCE, bias, weights), chart)


# =============================================================================
# Batch Generators
# =============================================================================

def generate_sample_batch(key: jax.Array, batch_size: int, dim: int) -> jnp.ndarray:
    """Correlated Gaussian observations, shape (batch_size, dim)."""
    k1, k2 = jax.random.split(key)
    mixing = random_spd_matrix(k1, dim)
    return jax.random.normal(k2, shape=(batch_size, dim)) @ mixing + 1.0
