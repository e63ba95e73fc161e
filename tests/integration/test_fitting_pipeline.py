"""
Integration tests: sample → fit → evaluate across models and charts.

These exercise the full path from a known distribution through sampling,
moment-matching estimation in every chart, and evaluation by likelihood and
relative entropy, plus regression recovered from a joint Gaussian fit.
"""
import pytest
import jax
import jax.numpy as jnp
import numpy as np

from infogeo import (
    Chart,
    DiagonalNormal,
    FactorAnalysis,
    FullNormal,
    IsotropicNormal,
    Normal,
)


@pytest.mark.slow
class TestFitPipeline:
    """Fit a normal in every chart and compare against the truth."""

    def test_univariate_pipeline(self, key):
        normal = Normal()
        truth = normal.point(Chart.SOURCE, [5.0, 4.0])
        xs = normal.sample(key, truth, 10000)

        fits = {chart: normal.mle(xs, chart=chart) for chart in Chart}
        for chart, fit in fits.items():
            assert fit.chart is chart
            assert normal.to_source(fit).allclose(fits[Chart.SOURCE], rtol=1e-10)

        fit = fits[Chart.NATURAL]
        np.testing.assert_allclose(normal.to_source(fit).coordinates, [5.0, 4.0], atol=0.35)
        assert normal.log_likelihood(fit, xs) >= normal.log_likelihood(truth, xs)
        assert normal.relative_entropy(truth, fit) < 1e-2

    def test_multivariate_pipeline(self, key):
        truth_model = FullNormal(3)
        sigma = jnp.array([[2.0, 0.5, 0.0],
                           [0.5, 1.0, 0.3],
                           [0.0, 0.3, 1.5]])
        truth = truth_model.from_mean_covariance(Chart.SOURCE, [1.0, 0.0, -1.0], sigma)
        xs = truth_model.sample(key, truth, 20000)

        for model in (FullNormal(3), DiagonalNormal(3), IsotropicNormal(3)):
            natural = model.mle(xs, chart=Chart.NATURAL)
            mean = model.mle(xs)
            mu_n, sigma_n = model.mean_covariance(natural)
            mu_m, sigma_m = model.mean_covariance(mean)
            np.testing.assert_allclose(mu_n, mu_m, rtol=1e-8, atol=1e-10)
            np.testing.assert_allclose(sigma_n, sigma_m, rtol=1e-8, atol=1e-10)
            np.testing.assert_allclose(mu_n, [1.0, 0.0, -1.0], atol=0.05)

        fit = truth_model.mle(xs, chart=Chart.NATURAL)
        assert truth_model.relative_entropy(truth, fit) < 1e-2
        _, fitted_sigma = truth_model.mean_covariance(fit)
        np.testing.assert_allclose(fitted_sigma, sigma, atol=0.1)


@pytest.mark.slow
class TestRegressionPipeline:
    """Recover a linear-Gaussian model from a joint Gaussian fit."""

    def test_conditional_of_joint_fit(self, key):
        k_x, k_noise, k_w = jax.random.split(key, 3)
        n, k, count = 2, 3, 20000
        W = jax.random.normal(k_w, (n, k))
        bias = jnp.array([1.0, -2.0])
        noise = jnp.array([0.5, 0.2])

        inputs = jax.random.normal(k_x, (count, k))
        outputs = bias + inputs @ W.T + jnp.sqrt(noise) * jax.random.normal(k_noise, (count, n))

        joint = FullNormal(n + k)
        mu, sigma = joint.mean_covariance(joint.mle(jnp.hstack([outputs, inputs])))
        s_yy, s_yx, s_xx = sigma[:n, :n], sigma[:n, n:], sigma[n:, n:]
        weights = jnp.linalg.solve(s_xx, s_yx.T).T
        residual = s_yy - weights @ s_yx.T

        model = FactorAnalysis(n, k)
        gaussian = model.gaussian.from_mean_covariance(
            Chart.SOURCE, mu[:n] - weights @ mu[n:], residual)
        p = model.from_components(Chart.SOURCE, gaussian, weights)

        np.testing.assert_allclose(model.weights(p), W, atol=0.05)
        x0 = jnp.array([0.5, -1.0, 2.0])
        cmu, csigma = model.gaussian.mean_covariance(model.conditional(model.to_natural(p), x0))
        np.testing.assert_allclose(cmu, bias + W @ x0, atol=0.1)
        np.testing.assert_allclose(jnp.diag(csigma), noise, atol=0.05)
