"""
Linear-Gaussian models: a multivariate normal whose location moves linearly
with an input.

    LinearModel(structure, inputs) = Affine(MultivariateNormal(structure),
                                            Tensor(n, k))

A point holds a bias block (a normal over R^n) and an interaction block W.
Given an input x ∈ R^k the model is the conditional distribution

    Source:   y | x ~ N(μ + W_s x, Σ)
    Natural:  θ(x) = (θ_μ + W_n x, P)

The two parameterisations of W are related by the covariance of the bias:

    W_s = Σ W_n          W_n = Σ⁻¹ W_s = -2 P W_s

There is no Mean chart for the joint model; only Source and Natural
transitions are defined.
"""
from __future__ import annotations

from dataclasses import dataclass, field

import jax
import jax.numpy as jnp

from ..core import Chart, DimensionMismatchError
from ..geometry.linear import CovarianceStructure, Diagonal, Scale, Symmetric, Tensor
from ..geometry.manifold import Manifold, Pair, Point
from ..information.exponential_family import Charted
from .multivariate import MultivariateNormal


@dataclass(frozen=True)
class LinearModel(Pair, Charted):
    """
    Affine family of normals over R^n indexed by inputs in R^k.

    Attributes:
        structure: Covariance structure of the output noise
        inputs: Input dimension k
    """
    structure: CovarianceStructure
    inputs: int
    gaussian: MultivariateNormal = field(init=False, repr=False)
    interaction: Tensor = field(init=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'gaussian', MultivariateNormal(self.structure))
        object.__setattr__(self, 'interaction', Tensor(self.structure.size, self.inputs))

    @property
    def first(self) -> Manifold:
        return self.gaussian

    @property
    def second(self) -> Manifold:
        return self.interaction

    @property
    def outputs(self) -> int:
        return self.structure.size

    def from_components(self, chart: Chart, bias: Point, weights) -> Point:
        """Join a bias point with a dense (n, k) weight matrix."""
        return self.join(bias, self.interaction.from_matrix(chart, weights))

    def weights(self, p: Point) -> jax.Array:
        """Dense (n, k) interaction matrix of ``p`` in its own chart."""
        _, w = self.split(p)
        return self.interaction.to_matrix(w)

    # ─────────────────────────────────────────────────────────────────────────
    # TRANSITIONS
    # ─────────────────────────────────────────────────────────────────────────

    def _natural_to_source(self, p: Point) -> Point:
        nbias, nweights = self.split(p)
        sbias = self.gaussian.to_source(nbias)
        _, sigma = self.gaussian.split(sbias)
        sweights = self.structure.matmul(sigma, self.interaction.to_matrix(nweights))
        return self.from_components(Chart.SOURCE, sbias, sweights)

    def _source_to_natural(self, p: Point) -> Point:
        sbias, sweights = self.split(p)
        nbias = self.gaussian.to_natural(sbias)
        _, nsigma = self.gaussian.split(nbias)
        nweights = -2 * self.structure.matmul(nsigma, self.interaction.to_matrix(sweights))
        return self.from_components(Chart.NATURAL, nbias, nweights)

    # ─────────────────────────────────────────────────────────────────────────
    # CONDITIONING
    # ─────────────────────────────────────────────────────────────────────────

    def conditional(self, p: Point, x) -> Point:
        """
        The normal over R^n obtained by fixing the input to ``x``.

        Returns:
            Natural point on ``self.gaussian`` with location θ_μ + W_n x
        """
        x = jnp.asarray(x, dtype=jnp.result_type(float))
        if x.shape != (self.inputs,):
            raise DimensionMismatchError(
                f"{self} expects an input of shape ({self.inputs},), got {x.shape}"
            )
        nbias, nweights = self.split(self.to_natural(p))
        nmu, nsigma = self.gaussian.split(nbias)
        shifted = nmu + Point(Chart.NATURAL, nmu.manifold,
                              self.interaction.to_matrix(nweights) @ x)
        return self.gaussian.join(shifted, nsigma)


# =============================================================================
# CONSTRUCTORS
# =============================================================================

def FullLinearModel(n: int, k: int) -> LinearModel:
    """Linear model with full output covariance."""
    return LinearModel(Symmetric(n), k)


def FactorAnalysis(n: int, k: int) -> LinearModel:
    """Linear model with diagonal output covariance."""
    return LinearModel(Diagonal(n), k)


def PrincipalComponentAnalysis(n: int, k: int) -> LinearModel:
    """Linear model with isotropic output covariance."""
    return LinearModel(Scale(n), k)


__all__ = [
    'LinearModel',
    'FullLinearModel',
    'FactorAnalysis',
    'PrincipalComponentAnalysis',
]
