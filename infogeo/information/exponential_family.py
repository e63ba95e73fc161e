"""
Exponential families and their dually flat geometry.

An exponential family has densities of the form

    p(x; θ) = exp(θ·s(x) - ψ(θ) + b(x))

with sufficient statistic s, log-partition (potential) ψ and log base
measure b. Its manifold carries three charts:

    Source  ──(closed form)──►  Natural θ  ──(∇ψ)──►  Mean η = E[s(X)]
            ◄──────────────────            ◄──(∇φ)──

ψ is strictly convex in θ; its convex conjugate φ (the dual potential,
negative entropy up to the base measure) is strictly convex in η, and

    ψ(θ) + φ(η) = θ·η      whenever η = ∇ψ(θ).

=============================================================================
THE CENTRAL FACT
=============================================================================

Maximum likelihood needs no optimiser. Setting the differential of the
log-likelihood to zero gives

    ∇ψ(θ̂) = (1/N) Σ_i s(x_i)

so the MLE in Mean coordinates is exactly the average sufficient statistic.
Any other chart is one closed-form transition away.

=============================================================================
PROTOCOL
=============================================================================

  Charted                      transition, to_natural, to_mean, to_source
    │
    ▼
  ExponentialFamily            sufficient_statistic, log_base_measure,
    │                          average_sufficient_statistic
    ▼
  LegendreExponentialFamily    potential, log_densities, log_likelihood,
    │                          log_likelihood_differential, mle
    ▼
  DuallyFlatExponentialFamily  dual_potential, relative_entropy

Models implement transitions as methods named ``_<from>_to_<to>`` (e.g.
``_source_to_natural``). A missing method means the transition is not
supported and ``transition`` raises UnsupportedTransitionError.

Reference: Amari "Information Geometry and Its Applications" (2016), Ch. 2
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Tuple

import jax
import jax.numpy as jnp

from ..core import (
    Chart,
    ChartMismatchError,
    DimensionMismatchError,
    UnsupportedTransitionError,
)
from ..geometry.manifold import Point

logger = logging.getLogger(__name__)


# =============================================================================
# CHART TRANSITIONS
# =============================================================================

class Charted(ABC):
    """
    Mixin for manifolds with closed-form transitions between charts.

    Transitions are resolved by name, so a model supports exactly the
    pairs it implements.
    """

    def check_point(self, p: Point, chart: Chart = None) -> None:
        """
        Raise if ``p`` is not on this manifold or not in ``chart``.

        Raises:
            ChartMismatchError: On manifold or chart disagreement
        """
        if p.manifold != self:
            raise ChartMismatchError(f"Expected a point on {self}, got {p.manifold}")
        if chart is not None and p.chart is not chart:
            raise ChartMismatchError(
                f"Expected {chart.value} coordinates, got {p.chart.value}"
            )

    def supports_transition(self, source: Chart, target: Chart) -> bool:
        if source is target:
            return True
        return hasattr(self, f"_{source.value}_to_{target.value}")

    def transition(self, p: Point, chart: Chart) -> Point:
        """
        Re-express ``p`` in ``chart``; the distribution is unchanged.

        Raises:
            UnsupportedTransitionError: If the model has no such transition
        """
        self.check_point(p)
        if p.chart is chart:
            return p
        if not self.supports_transition(p.chart, chart):
            raise UnsupportedTransitionError(
                f"{type(self).__name__} has no transition from "
                f"{p.chart.value} to {chart.value} coordinates"
            )
        return getattr(self, f"_{p.chart.value}_to_{chart.value}")(p)

    def to_natural(self, p: Point) -> Point:
        return self.transition(p, Chart.NATURAL)

    def to_mean(self, p: Point) -> Point:
        return self.transition(p, Chart.MEAN)

    def to_source(self, p: Point) -> Point:
        return self.transition(p, Chart.SOURCE)


# =============================================================================
# EXPONENTIAL FAMILY
# =============================================================================

class ExponentialFamily(Charted):
    """
    Mixin for manifolds of exponential-family distributions.

    Concrete models combine this with a Manifold subclass and provide the
    sufficient statistic, the base measure and their chart transitions.
    """

    @property
    @abstractmethod
    def sample_shape(self) -> Tuple[int, ...]:
        """Shape of a single observation (``()`` for scalars)."""
        ...

    @abstractmethod
    def sufficient_statistic(self, x) -> Point:
        """Embed one observation as a point in Mean coordinates."""
        ...

    @abstractmethod
    def log_base_measure(self, x) -> jax.Array:
        """The base-measure term b(x) of the log-density."""
        ...

    # ─────────────────────────────────────────────────────────────────────────
    # VALIDATION
    # ─────────────────────────────────────────────────────────────────────────

    def as_samples(self, xs) -> jax.Array:
        """
        Stack observations into an array of shape (N, *sample_shape).

        Raises:
            DimensionMismatchError: If any observation has the wrong shape
        """
        xs = jnp.asarray(xs, dtype=jnp.result_type(float))
        if xs.ndim != len(self.sample_shape) + 1 or xs.shape[1:] != self.sample_shape:
            raise DimensionMismatchError(
                f"{self} expects observations of shape {self.sample_shape}, "
                f"got a batch of shape {xs.shape}"
            )
        return xs

    def check_sample(self, x) -> jax.Array:
        x = jnp.asarray(x, dtype=jnp.result_type(float))
        if x.shape != self.sample_shape:
            raise DimensionMismatchError(
                f"{self} expects an observation of shape {self.sample_shape}, "
                f"got {x.shape}"
            )
        return x

    # ─────────────────────────────────────────────────────────────────────────
    # SUFFICIENT STATISTICS
    # ─────────────────────────────────────────────────────────────────────────

    def sufficient_statistics(self, xs) -> jax.Array:
        """Sufficient statistics of a batch, shape (N, dimension)."""
        xs = self.as_samples(xs)
        return jax.vmap(lambda x: self.sufficient_statistic(x).coordinates)(xs)

    def average_sufficient_statistic(self, xs) -> Point:
        """
        Average of the sufficient statistics over a sample.

        Models may override this with an exact accumulation that avoids
        materialising every per-sample statistic.
        """
        stats = self.sufficient_statistics(xs)
        return Point(Chart.MEAN, self, jnp.mean(stats, axis=0))

    def log_base_measures(self, xs) -> jax.Array:
        xs = self.as_samples(xs)
        return jax.vmap(self.log_base_measure)(xs)


# =============================================================================
# LEGENDRE EXPONENTIAL FAMILY
# =============================================================================

class LegendreExponentialFamily(ExponentialFamily):
    """
    Exponential family with a closed-form potential ψ(θ).

    The differential of ψ at a Natural point is that point's Mean
    coordinates; models supply it as the ``_natural_to_mean`` transition.
    """

    @abstractmethod
    def potential(self, p: Point) -> jax.Array:
        """Log-partition function ψ(θ) of a Natural point."""
        ...

    def potential_differential(self, p: Point) -> Point:
        """∇ψ(θ), which is the Mean-coordinate point."""
        self.check_point(p, Chart.NATURAL)
        return self.to_mean(p)

    def log_densities(self, p: Point, xs) -> jax.Array:
        """
        Log-densities of a batch of observations.

        Computed in Natural coordinates as θ·s(x) + b(x) - ψ(θ); models with a
        cheaper closed form in another chart override this.
        """
        theta = self.to_natural(p)
        xs = self.as_samples(xs)
        stats = self.sufficient_statistics(xs)
        return stats @ theta.coordinates + self.log_base_measures(xs) - self.potential(theta)

    def densities(self, p: Point, xs) -> jax.Array:
        return jnp.exp(self.log_densities(p, xs))

    def log_density(self, p: Point, x) -> jax.Array:
        x = self.check_sample(x)
        return self.log_densities(p, x[None])[0]

    def log_likelihood(self, p: Point, xs) -> jax.Array:
        """
        Log-likelihood Σ_i [θ·s(x_i) + b(x_i)] - N ψ(θ).
        """
        theta = self.to_natural(p)
        xs = self.as_samples(xs)
        n = xs.shape[0]
        avg = self.average_sufficient_statistic(xs)
        return (n * theta.dot(avg)
                + jnp.sum(self.log_base_measures(xs))
                - n * self.potential(theta))

    def log_likelihood_differential(self, p: Point, xs) -> Point:
        """
        Differential of the log-likelihood with respect to θ.

        Equals N (η̂ - η(θ)), a Mean-coordinate point that vanishes exactly at
        the maximum-likelihood estimate.
        """
        theta = self.to_natural(p)
        xs = self.as_samples(xs)
        avg = self.average_sufficient_statistic(xs)
        return xs.shape[0] * (avg - self.to_mean(theta))

    def mle(self, xs, chart: Chart = Chart.MEAN) -> Point:
        """
        Maximum-likelihood estimate by moment matching.

        The Mean-coordinate MLE is the average sufficient statistic; it is
        then transitioned to ``chart``.
        """
        xs = self.as_samples(xs)
        logger.debug(
            f"MLE for {type(self).__name__} from {xs.shape[0]} samples "
            f"in {chart.value} coordinates"
        )
        return self.transition(self.average_sufficient_statistic(xs), chart)


# =============================================================================
# DUALLY FLAT EXPONENTIAL FAMILY
# =============================================================================

class DuallyFlatExponentialFamily(LegendreExponentialFamily):
    """Legendre family whose dual potential φ(η) is also closed form."""

    @abstractmethod
    def dual_potential(self, p: Point) -> jax.Array:
        """Convex conjugate φ(η) of the potential, at a Mean point."""
        ...

    def relative_entropy(self, p: Point, q: Point) -> jax.Array:
        """
        Kullback-Leibler divergence D(p ‖ q) in Bregman form.

            D(p ‖ q) = φ(η_p) + ψ(θ_q) - η_p·θ_q

        Either argument may be given in any supported chart.
        """
        eta = self.to_mean(p)
        theta = self.to_natural(q)
        return self.dual_potential(eta) + self.potential(theta) - eta.dot(theta)


__all__ = [
    'Charted',
    'ExponentialFamily',
    'LegendreExponentialFamily',
    'DuallyFlatExponentialFamily',
]
