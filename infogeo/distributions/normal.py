"""
Univariate normal distributions.

    Normal = LocationShape(NormalMean, NormalVariance)

Coordinates of N(μ, σ²):

    Source   (μ, σ²)
    Natural  θ = (μ/σ², -1/(2σ²))
    Mean     η = (μ, σ² + μ²)

Sufficient statistic s(x) = (x, x²), log base measure -½ log 2π, and

    ψ(θ) = -θ₀²/(4θ₁) - ½ log(-2θ₁)        (requires θ₁ < 0)
    φ(η) = -½ log(η₁ - η₀²) - ½

Every transition is closed form; none goes through a numerical solver.

NormalMean is the unit-variance location family N(θ, 1). Its three charts
coincide, and it is the location block of Normal.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Tuple

import jax
import jax.numpy as jnp

from ..core import Chart, InvalidParameterError
from ..geometry.manifold import LocationShape, Manifold, Point
from ..information.exponential_family import DuallyFlatExponentialFamily
from ..information.fisher import FisherMetric

logger = logging.getLogger(__name__)

_LOG_SQRT_2PI = 0.5 * math.log(2 * math.pi)


def _require_negative(value: jax.Array, what: str) -> None:
    if not bool(value < 0):
        raise InvalidParameterError(f"{what} must be negative, got {float(value)}")


def _require_positive(value: jax.Array, what: str) -> None:
    if not bool(value > 0):
        raise InvalidParameterError(f"{what} must be positive, got {float(value)}")


# =============================================================================
# UNIT-VARIANCE LOCATION FAMILY
# =============================================================================

@dataclass(frozen=True)
class NormalMean(Manifold, DuallyFlatExponentialFamily):
    """
    Location of a normal distribution; as a family, N(θ, 1).

    For unit variance θ = η = μ, so every transition is the identity on
    coordinates.
    """

    @property
    def dimension(self) -> int:
        return 1

    @property
    def sample_shape(self) -> Tuple[int, ...]:
        return ()

    def sufficient_statistic(self, x) -> Point:
        x = self.check_sample(x)
        return Point(Chart.MEAN, self, x[None])

    def log_base_measure(self, x) -> jax.Array:
        return -jnp.square(x) / 2 - _LOG_SQRT_2PI

    def potential(self, p: Point) -> jax.Array:
        self.check_point(p, Chart.NATURAL)
        return jnp.square(p.coordinates[0]) / 2

    def dual_potential(self, p: Point) -> jax.Array:
        self.check_point(p, Chart.MEAN)
        return jnp.square(p.coordinates[0]) / 2

    def metric(self, p: Point) -> FisherMetric:
        """The Fisher metric of N(θ, 1) is the identity in every chart."""
        self.check_point(p)
        return FisherMetric(jnp.eye(1), point=p)

    def _relabel(self, p: Point, chart: Chart) -> Point:
        return Point(chart, self, p.coordinates)

    def _source_to_natural(self, p: Point) -> Point:
        return self._relabel(p, Chart.NATURAL)

    def _source_to_mean(self, p: Point) -> Point:
        return self._relabel(p, Chart.MEAN)

    def _natural_to_source(self, p: Point) -> Point:
        return self._relabel(p, Chart.SOURCE)

    def _natural_to_mean(self, p: Point) -> Point:
        return self._relabel(p, Chart.MEAN)

    def _mean_to_source(self, p: Point) -> Point:
        return self._relabel(p, Chart.SOURCE)

    def _mean_to_natural(self, p: Point) -> Point:
        return self._relabel(p, Chart.NATURAL)


@dataclass(frozen=True)
class NormalVariance(Manifold):
    """The variance (shape) block of a normal distribution."""

    @property
    def dimension(self) -> int:
        return 1


# =============================================================================
# NORMAL
# =============================================================================

@dataclass(frozen=True)
class Normal(LocationShape, DuallyFlatExponentialFamily):
    """
    The manifold of univariate normal distributions N(μ, σ²).

    Example:
        >>> normal = Normal()
        >>> p = normal.point(Chart.SOURCE, [0.0, 1.0])
        >>> normal.to_natural(p).coordinates   # [0.0, -0.5]
        >>> normal.to_mean(p).coordinates      # [0.0, 1.0]
    """
    location: Manifold = field(default=NormalMean(), init=False, repr=False)
    shape: Manifold = field(default=NormalVariance(), init=False, repr=False)

    @property
    def sample_shape(self) -> Tuple[int, ...]:
        return ()

    # ─────────────────────────────────────────────────────────────────────────
    # EXPONENTIAL FAMILY
    # ─────────────────────────────────────────────────────────────────────────

    def sufficient_statistic(self, x) -> Point:
        x = self.check_sample(x)
        return Point(Chart.MEAN, self, jnp.stack([x, jnp.square(x)]))

    def average_sufficient_statistic(self, xs) -> Point:
        xs = self.as_samples(xs)
        return Point(Chart.MEAN, self,
                     jnp.stack([jnp.mean(xs), jnp.mean(jnp.square(xs))]))

    def log_base_measure(self, x) -> jax.Array:
        return -_LOG_SQRT_2PI * jnp.ones_like(x)

    def potential(self, p: Point) -> jax.Array:
        """
        ψ(θ) = -θ₀²/(4θ₁) - ½ log(-2θ₁)

        Raises:
            InvalidParameterError: If θ₁ >= 0 (no normalisable density)
        """
        self.check_point(p, Chart.NATURAL)
        tht0, tht1 = p.coordinates
        _require_negative(tht1, "Natural precision coordinate θ₁")
        return -jnp.square(tht0) / (4 * tht1) - 0.5 * jnp.log(-2 * tht1)

    def dual_potential(self, p: Point) -> jax.Array:
        """φ(η) = -½ log(η₁ - η₀²) - ½"""
        self.check_point(p, Chart.MEAN)
        eta0, eta1 = p.coordinates
        variance = eta1 - jnp.square(eta0)
        _require_positive(variance, "Variance η₁ - η₀²")
        return -0.5 * jnp.log(variance) - 0.5

    # ─────────────────────────────────────────────────────────────────────────
    # TRANSITIONS
    # ─────────────────────────────────────────────────────────────────────────

    def _source_to_mean(self, p: Point) -> Point:
        mu, var = p.coordinates
        _require_positive(var, "Variance")
        return Point(Chart.MEAN, self, jnp.stack([mu, var + jnp.square(mu)]))

    def _mean_to_source(self, p: Point) -> Point:
        eta0, eta1 = p.coordinates
        var = eta1 - jnp.square(eta0)
        _require_positive(var, "Variance η₁ - η₀²")
        return Point(Chart.SOURCE, self, jnp.stack([eta0, var]))

    def _source_to_natural(self, p: Point) -> Point:
        mu, var = p.coordinates
        _require_positive(var, "Variance")
        return Point(Chart.NATURAL, self, jnp.stack([mu / var, -1 / (2 * var)]))

    def _natural_to_source(self, p: Point) -> Point:
        tht0, tht1 = p.coordinates
        _require_negative(tht1, "Natural precision coordinate θ₁")
        return Point(Chart.SOURCE, self,
                     jnp.stack([-0.5 * tht0 / tht1, -1 / (2 * tht1)]))

    def _natural_to_mean(self, p: Point) -> Point:
        tht0, tht1 = p.coordinates
        _require_negative(tht1, "Natural precision coordinate θ₁")
        dv = tht0 / tht1
        return Point(Chart.MEAN, self,
                     jnp.stack([-0.5 * dv, 0.25 * jnp.square(dv) - 0.5 / tht1]))

    def _mean_to_natural(self, p: Point) -> Point:
        eta0, eta1 = p.coordinates
        dff = eta1 - jnp.square(eta0)
        _require_positive(dff, "Variance η₁ - η₀²")
        return Point(Chart.NATURAL, self, jnp.stack([eta0 / dff, -0.5 / dff]))

    # ─────────────────────────────────────────────────────────────────────────
    # DENSITIES & SAMPLING
    # ─────────────────────────────────────────────────────────────────────────

    def log_densities(self, p: Point, xs) -> jax.Array:
        """
        Log-densities; Source and Mean points use the Gaussian pdf directly,
        Natural points the exponential-family form.
        """
        if p.chart is Chart.NATURAL:
            return super().log_densities(p, xs)
        mu, var = self.to_source(p).coordinates
        _require_positive(var, "Variance")
        xs = self.as_samples(xs)
        return -0.5 * jnp.log(2 * jnp.pi * var) - jnp.square(xs - mu) / (2 * var)

    def sample(self, key: jax.Array, p: Point, n: int) -> jax.Array:
        """
        Draw ``n`` observations; consumes ``key``.

        Returns:
            Array of shape (n,)
        """
        mu, var = self.to_source(p).coordinates
        _require_positive(var, "Variance")
        logger.debug(f"Sampling {n} points from N({float(mu)}, {float(var)})")
        return mu + jnp.sqrt(var) * jax.random.normal(key, (n,))

    # ─────────────────────────────────────────────────────────────────────────
    # FISHER GEOMETRY
    # ─────────────────────────────────────────────────────────────────────────

    def metric(self, p: Point) -> FisherMetric:
        """
        Closed-form Fisher metric in the point's chart.

            Natural: ∇²ψ(θ)
            Mean:    ∇²φ(η) = (∇²ψ(θ))^{-1}
            Source:  diag(1/σ², 1/(2σ⁴))
        """
        self.check_point(p)
        if p.chart is Chart.NATURAL:
            tht0, tht1 = p.coordinates
            _require_negative(tht1, "Natural precision coordinate θ₁")
            d00 = -1 / (2 * tht1)
            d01 = tht0 / (2 * jnp.square(tht1))
            d11 = 0.5 * (1 / jnp.square(tht1) - jnp.square(tht0) / tht1 ** 3)
        elif p.chart is Chart.MEAN:
            eta0, eta1 = p.coordinates
            dff = eta1 - jnp.square(eta0)
            _require_positive(dff, "Variance η₁ - η₀²")
            dff2 = jnp.square(dff)
            d00 = (dff + 2 * jnp.square(eta0)) / dff2
            d01 = -eta0 / dff2
            d11 = 0.5 / dff2
        else:
            _, var = p.coordinates
            _require_positive(var, "Variance")
            d00 = 1 / var
            d01 = jnp.zeros_like(var)
            d11 = 1 / (2 * jnp.square(var))
        return FisherMetric(jnp.array([[d00, d01], [d01, d11]]), point=p)


__all__ = [
    'NormalMean',
    'NormalVariance',
    'Normal',
]
