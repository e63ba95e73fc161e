"""
Tests for the Fisher metric on Gaussian manifolds.

Tests cover:
- Closed-form Normal metrics in the Natural, Mean and Source charts
- Duality of the Natural and Mean metrics
- Agreement with the Hessian of the potential and with empirical estimates
- Natural gradient, Cramér-Rao bound and local KL approximation
"""
import pytest
import jax
import jax.numpy as jnp
import numpy as np

from infogeo import Chart, FisherMetric, MVNMean, Normal, NormalMean
from tests.geometry.generators import random_normal_point
from tests.geometry.invariants import assert_dual_metrics, assert_positive_definite


@pytest.fixture
def normal():
    return Normal()


@pytest.mark.invariant
class TestNormalMetric:
    """Closed-form Fisher metrics of N(μ, σ²)."""

    def test_natural_metric_is_covariance_of_statistics(self, normal, key):
        """g(θ) = Cov[(X, X²)] = [[σ², 2μσ²], [2μσ², 2σ⁴ + 4μ²σ²]]."""
        p = random_normal_point(key)
        mu, var = p.coordinates
        expected = jnp.array([[var, 2 * mu * var],
                              [2 * mu * var, 2 * var ** 2 + 4 * mu ** 2 * var]])
        np.testing.assert_allclose(normal.metric(normal.to_natural(p)).matrix, expected,
                                   rtol=1e-8)

    def test_mean_metric_values(self, normal):
        eta = normal.to_mean(normal.point(Chart.SOURCE, [1.0, 2.0]))
        np.testing.assert_allclose(normal.metric(eta).matrix,
                                   [[1.0, -0.25], [-0.25, 0.125]], rtol=1e-10)

    def test_natural_and_mean_metrics_are_inverse(self, normal, key):
        p = random_normal_point(key)
        assert_dual_metrics(normal.metric(normal.to_natural(p)).matrix,
                            normal.metric(normal.to_mean(p)).matrix)

    def test_source_metric(self, normal):
        metric = normal.metric(normal.point(Chart.SOURCE, [1.0, 2.0]))
        np.testing.assert_allclose(metric.matrix, [[0.5, 0.0], [0.0, 0.125]])

    def test_source_metric_is_pullback_of_natural(self, normal):
        mu, var = 1.5, 2.0
        source = normal.point(Chart.SOURCE, [mu, var])
        jacobian = jnp.array([[1 / var, -mu / var ** 2],
                              [0.0, 1 / (2 * var ** 2)]])
        pulled = normal.metric(normal.to_natural(source)).pullback(jacobian)
        np.testing.assert_allclose(pulled.matrix, normal.metric(source).matrix, rtol=1e-10)

    @pytest.mark.parametrize("chart", list(Chart))
    def test_positive_definite(self, normal, key, chart):
        assert_positive_definite(normal.metric(random_normal_point(key, chart)).matrix)

    def test_metric_remembers_point(self, normal):
        p = normal.point(Chart.SOURCE, [0.0, 1.0])
        assert normal.metric(p).point is p

    def test_location_families_have_identity_metric(self):
        np.testing.assert_allclose(
            NormalMean().metric(NormalMean().point(Chart.MEAN, [3.0])).matrix, [[1.0]])
        np.testing.assert_allclose(
            MVNMean(3).metric(MVNMean(3).zeros(Chart.NATURAL)).matrix, jnp.eye(3))


class TestEmpiricalFisher:
    """Covariance of the sufficient statistics estimates the Natural metric."""

    def test_matches_closed_form(self, normal, key):
        p = normal.point(Chart.SOURCE, [0.5, 1.0])
        xs = normal.sample(key, p, 100000)
        empirical = FisherMetric.from_sufficient_statistics(normal, xs)
        np.testing.assert_allclose(empirical.matrix, normal.metric(normal.to_natural(p)).matrix,
                                   rtol=0.1, atol=0.05)

    def test_regularization_shifts_diagonal(self):
        metric = FisherMetric(jnp.eye(2), regularization=0.5)
        np.testing.assert_allclose(metric.matrix, 1.5 * jnp.eye(2))


class TestFisherOperations:
    """Index raising and its statistical readings."""

    def test_natural_gradient_solves_metric(self):
        F = jnp.array([[2.0, 0.5], [0.5, 1.0]])
        metric = FisherMetric(F)
        gradient = jnp.array([1.0, -1.0])
        np.testing.assert_allclose(F @ metric.natural_gradient(gradient), gradient, rtol=1e-10)

    def test_natural_gradient_accepts_points(self, normal, key):
        xs = normal.sample(key, normal.point(Chart.SOURCE, [1.0, 1.0]), 100)
        theta = normal.point(Chart.NATURAL, [0.0, -0.5])
        grad = normal.log_likelihood_differential(theta, xs)
        metric = normal.metric(theta)
        np.testing.assert_allclose(metric.natural_gradient(grad),
                                   metric.raise_index(grad.coordinates), rtol=1e-10)

    def test_natural_gradient_step_reaches_mle(self, normal, key):
        """For exponential families one natural-gradient step from θ̂ stays at θ̂."""
        xs = normal.sample(key, normal.point(Chart.SOURCE, [1.0, 1.0]), 200)
        theta = normal.mle(xs, chart=Chart.NATURAL)
        step = normal.metric(theta).natural_gradient(normal.log_likelihood_differential(theta, xs))
        np.testing.assert_allclose(step, 0.0, atol=1e-6)

    def test_cramer_rao_bound_is_inverse(self, normal):
        metric = normal.metric(normal.point(Chart.SOURCE, [0.0, 2.0]))
        np.testing.assert_allclose(metric.cramer_rao_bound, [[2.0, 0.0], [0.0, 8.0]], rtol=1e-10)

    def test_local_kl_approximation(self, normal):
        theta = normal.point(Chart.NATURAL, [0.5, -0.5])
        delta = jnp.array([1e-3, -5e-4])
        nearby = theta + normal.point(Chart.NATURAL, delta)
        exact = normal.relative_entropy(theta, nearby)
        approx = normal.metric(theta).kl_divergence_local(delta)
        np.testing.assert_allclose(approx, exact, rtol=1e-2)
