"""
Multivariate normal distributions with structured covariance.

    MultivariateNormal(structure) = LocationShape(MVNMean(n), structure)

The covariance block is any CovarianceStructure, which fixes the model:

    FullNormal(n)       Symmetric(n)   full covariance
    DiagonalNormal(n)   Diagonal(n)    independent coordinates
    IsotropicNormal(n)  Scale(n)       σ² I

Coordinates of N(μ, Σ), block by block:

    Source   (μ,     Σ)
    Natural  (Σ⁻¹μ,  P = -½ Σ⁻¹)
    Mean     (μ,     M = Σ + μμᵀ)

each covariance block encoded by the structure in the matching chart. The
sufficient statistic is (x, x xᵀ) projected onto the structure, so the
Mean-chart MLE is the sample mean together with the projected second moment.

    ψ(θ) = ½ θ_μ·Σθ_μ - ½ log det Σ⁻¹
    φ(η) = -½ (n + log det Σ)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Tuple

import jax
import jax.numpy as jnp

from ..core import Chart, DimensionMismatchError, InvalidParameterError
from ..geometry.linear import CovarianceStructure, Diagonal, Scale, Symmetric
from ..geometry.manifold import LocationShape, Manifold, Point
from ..information.exponential_family import DuallyFlatExponentialFamily
from ..information.fisher import FisherMetric

logger = logging.getLogger(__name__)


# =============================================================================
# UNIT-COVARIANCE LOCATION FAMILY
# =============================================================================

@dataclass(frozen=True)
class MVNMean(Manifold, DuallyFlatExponentialFamily):
    """
    Location of an n-dimensional normal; as a family, N(θ, I).

    Attributes:
        size: Dimension n of the observations
    """
    size: int

    @property
    def dimension(self) -> int:
        return self.size

    @property
    def sample_shape(self) -> Tuple[int, ...]:
        return (self.size,)

    def sufficient_statistic(self, x) -> Point:
        return Point(Chart.MEAN, self, self.check_sample(x))

    def log_base_measure(self, x) -> jax.Array:
        return -0.5 * self.size * jnp.log(2 * jnp.pi) - 0.5 * jnp.dot(x, x)

    def potential(self, p: Point) -> jax.Array:
        self.check_point(p, Chart.NATURAL)
        return 0.5 * jnp.dot(p.coordinates, p.coordinates)

    def dual_potential(self, p: Point) -> jax.Array:
        self.check_point(p, Chart.MEAN)
        return 0.5 * jnp.dot(p.coordinates, p.coordinates)

    def metric(self, p: Point) -> FisherMetric:
        self.check_point(p)
        return FisherMetric(jnp.eye(self.size), point=p)

    def _source_to_natural(self, p: Point) -> Point:
        return Point(Chart.NATURAL, self, p.coordinates)

    def _source_to_mean(self, p: Point) -> Point:
        return Point(Chart.MEAN, self, p.coordinates)

    def _natural_to_source(self, p: Point) -> Point:
        return Point(Chart.SOURCE, self, p.coordinates)

    def _natural_to_mean(self, p: Point) -> Point:
        return Point(Chart.MEAN, self, p.coordinates)

    def _mean_to_source(self, p: Point) -> Point:
        return Point(Chart.SOURCE, self, p.coordinates)

    def _mean_to_natural(self, p: Point) -> Point:
        return Point(Chart.NATURAL, self, p.coordinates)


# =============================================================================
# MULTIVARIATE NORMAL
# =============================================================================

@dataclass(frozen=True)
class MultivariateNormal(LocationShape, DuallyFlatExponentialFamily):
    """
    Normal distributions over R^n with covariance encoded by ``structure``.

    Example:
        >>> mvn = FullNormal(2)
        >>> p = mvn.from_mean_covariance(Chart.SOURCE, [0., 1.], [[2., .5], [.5, 1.]])
        >>> mvn.mean_covariance(mvn.to_natural(p))   # back to (μ, Σ)
    """
    location: Manifold = field(init=False, repr=False)
    shape: Manifold = field(init=False, repr=False)
    structure: CovarianceStructure

    def __post_init__(self):
        object.__setattr__(self, 'location', MVNMean(self.structure.size))
        object.__setattr__(self, 'shape', self.structure)

    @property
    def size(self) -> int:
        return self.structure.size

    @property
    def sample_shape(self) -> Tuple[int, ...]:
        return (self.size,)

    # ─────────────────────────────────────────────────────────────────────────
    # CONSTRUCTION
    # ─────────────────────────────────────────────────────────────────────────

    def from_mean_covariance(self, chart: Chart, mean, covariance) -> Point:
        """
        Build a point from a mean vector and a dense covariance matrix.

        The covariance is projected onto the structure; the point is then
        transitioned to ``chart``.
        """
        mu = self.location.point(Chart.SOURCE, mean)
        sigma = self.structure.from_tensor(Chart.SOURCE, covariance)
        return self.transition(self.join(mu, sigma), chart)

    def mean_covariance(self, p: Point) -> Tuple[jax.Array, jax.Array]:
        """Mean vector and dense covariance matrix of any point."""
        mu, sigma = self.split(self.to_source(p))
        return mu.coordinates, self.structure.to_tensor(sigma)

    def _positive_definite(self, sigma: Point) -> Point:
        if not self.structure.is_positive_definite(sigma):
            raise InvalidParameterError(
                f"Covariance of {self} is not positive definite"
            )
        return sigma

    # ─────────────────────────────────────────────────────────────────────────
    # EXPONENTIAL FAMILY
    # ─────────────────────────────────────────────────────────────────────────

    def sufficient_statistic(self, x) -> Point:
        x = self.check_sample(x)
        return self.join(Point(Chart.MEAN, self.location, x),
                         self.structure.outer(Chart.MEAN, x))

    def average_sufficient_statistic(self, xs) -> Point:
        """Sample mean and projected second moment XᵀX / N."""
        xs = self.as_samples(xs)
        mean = Point(Chart.MEAN, self.location, jnp.mean(xs, axis=0))
        second = self.structure.from_tensor(Chart.MEAN, xs.T @ xs / xs.shape[0])
        return self.join(mean, second)

    def log_base_measure(self, x) -> jax.Array:
        return -0.5 * self.size * jnp.log(2 * jnp.pi)

    def potential(self, p: Point) -> jax.Array:
        """
        ψ(θ) = ½ θ_μ·Σθ_μ - ½ log det Σ⁻¹, with Σ⁻¹ = -2P.

        Raises:
            InvalidParameterError: If -2P is not positive definite
        """
        self.check_point(p, Chart.NATURAL)
        nmu, nsigma = self.split(p)
        sigma, log_det_precision = self.structure.inverse_log_determinant(-2 * nsigma)
        quad = jnp.dot(nmu.coordinates, self.structure.matvec(sigma, nmu.coordinates))
        return 0.5 * quad - 0.5 * log_det_precision

    def dual_potential(self, p: Point) -> jax.Array:
        """φ(η) = -½ (n + log det Σ); the negative entropy less the base measure."""
        self.check_point(p, Chart.MEAN)
        _, sigma = self.split(self._mean_to_source(p))
        return -0.5 * (self.size + self.structure.log_determinant(sigma))

    # ─────────────────────────────────────────────────────────────────────────
    # TRANSITIONS
    # ─────────────────────────────────────────────────────────────────────────

    def _source_to_natural(self, p: Point) -> Point:
        mu, sigma = self.split(p)
        precision, _ = self.structure.inverse_log_determinant(sigma)
        nmu = self.structure.matvec(precision, mu.coordinates)
        nsigma = self.structure.from_tensor(
            Chart.NATURAL, -0.5 * self.structure.to_tensor(precision))
        return self.join(Point(Chart.NATURAL, self.location, nmu), nsigma)

    def _natural_to_source(self, p: Point) -> Point:
        nmu, nsigma = self.split(p)
        inverse, _ = self.structure.inverse_log_determinant(-2 * nsigma)
        covariance = self.structure.to_tensor(inverse)
        mu = covariance @ nmu.coordinates
        return self.join(Point(Chart.SOURCE, self.location, mu),
                         self.structure.from_tensor(Chart.SOURCE, covariance))

    def _source_to_mean(self, p: Point) -> Point:
        mu, sigma = self.split(p)
        self._positive_definite(sigma)
        second = self.structure.to_tensor(sigma) + jnp.outer(mu.coordinates, mu.coordinates)
        return self.join(Point(Chart.MEAN, self.location, mu.coordinates),
                         self.structure.from_tensor(Chart.MEAN, second))

    def _mean_to_source(self, p: Point) -> Point:
        mu, second = self.split(p)
        covariance = (self.structure.to_tensor(second)
                      - jnp.outer(mu.coordinates, mu.coordinates))
        sigma = self._positive_definite(
            self.structure.from_tensor(Chart.SOURCE, covariance))
        return self.join(Point(Chart.SOURCE, self.location, mu.coordinates), sigma)

    def _natural_to_mean(self, p: Point) -> Point:
        return self._source_to_mean(self._natural_to_source(p))

    def _mean_to_natural(self, p: Point) -> Point:
        return self._source_to_natural(self._mean_to_source(p))

    # ─────────────────────────────────────────────────────────────────────────
    # DENSITIES & SAMPLING
    # ─────────────────────────────────────────────────────────────────────────

    def log_densities(self, p: Point, xs) -> jax.Array:
        """
        Log-densities; non-Natural points use the Gaussian pdf with one
        Cholesky factorisation of Σ.
        """
        if p.chart is Chart.NATURAL:
            return super().log_densities(p, xs)
        xs = self.as_samples(xs)
        mu, sigma = self.split(self.to_source(p))
        precision, log_det = self.structure.inverse_log_determinant(sigma)
        diffs = xs - mu.coordinates
        quad = jnp.sum(diffs * self.structure.matmul(precision, diffs.T).T, axis=1)
        return -0.5 * (self.size * jnp.log(2 * jnp.pi) + log_det + quad)

    def sample(self, key: jax.Array, p: Point, n: int) -> jax.Array:
        """
        Draw ``n`` observations as μ + R z with R the symmetric root of Σ.

        Returns:
            Array of shape (n, size)
        """
        mu, sigma = self.split(self.to_source(p))
        root = self.structure.matrix_sqrt(sigma)
        logger.debug(f"Sampling {n} points from {self}")
        z = jax.random.normal(key, (n, self.size))
        return mu.coordinates + z @ root.T


# =============================================================================
# CONSTRUCTORS
# =============================================================================

def FullNormal(n: int) -> MultivariateNormal:
    """Multivariate normal with unrestricted covariance."""
    return MultivariateNormal(Symmetric(n))


def DiagonalNormal(n: int) -> MultivariateNormal:
    return MultivariateNormal(Diagonal(n))


def IsotropicNormal(n: int) -> MultivariateNormal:
    return MultivariateNormal(Scale(n))


# =============================================================================
# UTILITIES
# =============================================================================

def standard_normal(model: MultivariateNormal, chart: Chart = Chart.SOURCE) -> Point:
    """N(0, I) on ``model``, expressed in ``chart``."""
    return model.from_mean_covariance(chart, jnp.zeros(model.size), jnp.eye(model.size))


def multivariate_normal_correlations(model: MultivariateNormal, p: Point) -> jax.Array:
    """
    Correlation matrix Σ_ij / (σ_i σ_j) of a multivariate normal.
    """
    _, covariance = model.mean_covariance(p)
    sds = jnp.sqrt(jnp.diag(covariance))
    return covariance / jnp.outer(sds, sds)


def bivariate_normal_confidence_ellipse(model: MultivariateNormal,
                                        p: Point,
                                        steps: int = 100,
                                        scale: float = 1.0) -> jax.Array:
    """
    Points on the ellipse μ + scale · Σ^{1/2} u for unit vectors u.

    Args:
        model: A two-dimensional MultivariateNormal
        p: Point on ``model``, in any chart
        steps: Number of points, evenly spaced in angle over [0, 2π]
        scale: Radius in standard deviations

    Returns:
        Array of shape (steps, 2); the first and last points coincide
    """
    if model.size != 2:
        raise DimensionMismatchError(
            f"Confidence ellipses need a bivariate normal, got size {model.size}"
        )
    mu, sigma = model.split(model.to_source(p))
    root = scale * model.structure.matrix_sqrt(sigma)
    angles = jnp.linspace(0.0, 2 * jnp.pi, steps)
    circle = jnp.stack([jnp.cos(angles), jnp.sin(angles)], axis=1)
    return mu.coordinates + circle @ root.T


__all__ = [
    'MVNMean',
    'MultivariateNormal',
    'FullNormal',
    'DiagonalNormal',
    'IsotropicNormal',
    'standard_normal',
    'multivariate_normal_correlations',
    'bivariate_normal_confidence_ellipse',
]
