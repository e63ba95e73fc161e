"""
Fisher information metric of an exponential family.

For an exponential family the Fisher metric is the Hessian of a potential
in either flat chart, and the two are inverse to each other:

    Natural:  g(θ) = ∇²ψ(θ) = Cov[s(X)]
    Mean:     g(η) = ∇²φ(η) = g(θ)^{-1}

Models build their closed-form metric with ``model.metric(p)``; this module
supplies the metric object and an empirical estimate from samples.

Readings of the metric:
- natural gradient:    F^{-1} ∇ℓ
- Cramér-Rao bound:    Var(θ̂) ≥ F^{-1}
- local divergence:    D(p_θ ‖ p_{θ+δ}) ≈ ½ δᵀ F δ
"""
from __future__ import annotations

import logging
from typing import Optional

import jax
import jax.numpy as jnp

from ..geometry.manifold import Point
from ..geometry.metric import MetricTensor, Vector

logger = logging.getLogger(__name__)


class FisherMetric(MetricTensor):
    """
    Fisher information at a point, in that point's chart.

    Attributes:
        point: Where the metric was evaluated, if known
    """

    def __init__(self,
                 fisher_matrix: jax.Array,
                 point: Optional[Point] = None,
                 regularization: float = 0.0):
        fisher_matrix = jnp.asarray(fisher_matrix)
        if regularization:
            fisher_matrix = fisher_matrix + regularization * jnp.eye(fisher_matrix.shape[0])
        super().__init__(fisher_matrix)
        self.point = point

    @classmethod
    def from_sufficient_statistics(cls,
                                   model,
                                   xs,
                                   point: Optional[Point] = None,
                                   regularization: float = 0.0) -> 'FisherMetric':
        """
        Empirical Natural-chart metric: the sample covariance of s(x).

        The score of an exponential family in θ is s(x) - η, so

            F ≈ (1/N) Σ_n (s(x_n) - s̄)(s(x_n) - s̄)ᵀ
        """
        stats = model.sufficient_statistics(xs)
        centered = stats - jnp.mean(stats, axis=0)
        logger.debug(
            f"Empirical Fisher metric of {type(model).__name__} from {stats.shape[0]} samples"
        )
        return cls(centered.T @ centered / stats.shape[0], point, regularization)

    def natural_gradient(self, gradient: Vector) -> jax.Array:
        """
        Steepest-ascent direction F^{-1} ∇ℓ under the Fisher-Rao geometry.

        Given the Mean-point differential of a log-likelihood at a Natural
        point, this is a displacement in Natural coordinates.
        """
        return self.raise_index(gradient)

    @property
    def cramer_rao_bound(self) -> jax.Array:
        """Lower bound F^{-1} on the covariance of unbiased estimators."""
        return self.inverse

    def kl_divergence_local(self, delta: Vector) -> jax.Array:
        """Second-order relative entropy ½ δᵀ F δ for a small displacement."""
        return 0.5 * self.inner_product(delta, delta)


__all__ = [
    'FisherMetric',
]
