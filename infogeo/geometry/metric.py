"""
Riemannian metrics on the coordinates of a chart.

A metric g at a point identifies tangent vectors with covectors:

    flat:   v^i → α_i = g_{ij} v^j
    sharp:  α_i → v^i = g^{ij} α_j

On a dually flat manifold the tangent vectors of one chart pair with the
covectors of its dual, so differentials of functions of θ (which are Mean
points) are raised into Natural displacements and vice versa. Arguments may
be plain arrays or Points; Points contribute their coordinates.

Reference: Amari "Information Geometry and Its Applications" (2016), Ch. 1
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

import jax
import jax.numpy as jnp
from jax.scipy.linalg import cho_factor, cho_solve

from ..core import DimensionMismatchError
from .manifold import Point

Vector = Union[jax.Array, Point]


def _components(v: Vector) -> jax.Array:
    return v.coordinates if isinstance(v, Point) else jnp.asarray(v)


@dataclass
class MetricTensor:
    """
    Symmetric positive-definite metric g_{ij} in some chart.

    Attributes:
        matrix: Shape (n, n)
    """
    matrix: jax.Array
    _factor: tuple = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        self.matrix = jnp.asarray(self.matrix)
        if self.matrix.ndim != 2 or self.matrix.shape[0] != self.matrix.shape[1]:
            raise DimensionMismatchError(
                f"A metric needs a square matrix, got shape {self.matrix.shape}"
            )

    @property
    def dim(self) -> int:
        return self.matrix.shape[0]

    def _cho(self):
        if self._factor is None:
            self._factor = cho_factor(self.matrix)
        return self._factor

    @property
    def inverse(self) -> jax.Array:
        """The inverse metric g^{ij}."""
        return cho_solve(self._cho(), jnp.eye(self.dim))

    # ─────────────────────────────────────────────────────────────────────────
    # MUSICAL ISOMORPHISMS
    # ─────────────────────────────────────────────────────────────────────────

    def lower_index(self, vector: Vector) -> jax.Array:
        """α_i = g_{ij} v^j (flat ♭)."""
        return self.matrix @ _components(vector)

    def raise_index(self, covector: Vector) -> jax.Array:
        """v^i = g^{ij} α_j (sharp ♯), by a Cholesky solve."""
        return cho_solve(self._cho(), _components(covector))

    def inner_product(self, v1: Vector, v2: Vector) -> jax.Array:
        return _components(v1) @ self.matrix @ _components(v2)

    def norm(self, v: Vector) -> jax.Array:
        return jnp.sqrt(self.inner_product(v, v))

    def pullback(self, jacobian: jax.Array) -> 'MetricTensor':
        """
        The same metric in new coordinates: g' = Jᵀ g J, where J is the
        Jacobian of the old coordinates with respect to the new ones.
        """
        return MetricTensor(jacobian.T @ self.matrix @ jacobian)


__all__ = [
    'MetricTensor',
]
