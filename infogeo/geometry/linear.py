"""
Covariance structures and linear maps as manifolds.

A covariance structure is a compressed encoding of a symmetric n×n matrix.
The structures are interchangeable variants with very different costs:

    ┌────────────┬──────────────┬─────────────────────────┬──────────────┐
    │ Structure  │ Stored size  │ from_tensor (projection)│ inverse cost │
    ├────────────┼──────────────┼─────────────────────────┼──────────────┤
    │ Symmetric  │ n(n+1)/2     │ lower triangle          │ O(n³)        │
    │ Diagonal   │ n            │ diagonal                │ O(n)         │
    │ Scale      │ 1            │ average of diagonal     │ O(1)         │
    └────────────┴──────────────┴─────────────────────────┴──────────────┘

Chart conventions
-----------------
Source and Mean coordinates encode the matrix entries directly, with two
exceptions that keep the dual pairing θ·η equal to Σ_ij P_ij M_ij for a
precision-form matrix P and a second-moment matrix M:

- Natural Symmetric coordinates store 2P - diag(P). The sufficient
  statistic of a symmetric matrix parameter counts each off-diagonal entry
  once, so the natural coordinate must carry both (i, j) and (j, i)
  contributions. See natural_symmetric_to_precision.
- Mean Scale coordinates store the trace of the second-moment matrix
  (E[x·x]) rather than its average diagonal.

In every chart to_tensor(from_tensor(m)) equals the structure's projection
of m, and round-trips of matrices already satisfying the structure are
exact.

Reference: Pennec, X. et al. (2006). "A Riemannian Framework for Tensor Computing"
"""
from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from typing import Tuple

import jax
import jax.numpy as jnp
from jax.scipy.linalg import solve_triangular

from ..core import (
    Chart,
    ChartMismatchError,
    DimensionMismatchError,
    InvalidParameterError,
)
from .manifold import Manifold, Point


# =============================================================================
# MATRIX HELPERS
# =============================================================================

def _cholesky(A: jax.Array) -> jax.Array:
    """Cholesky factor of an SPD matrix; raises if A is not positive definite."""
    L = jnp.linalg.cholesky(A)
    if not bool(jnp.all(jnp.isfinite(L))):
        raise InvalidParameterError("Matrix is not positive definite")
    return L


def _nonsingular(inverse: jax.Array) -> jax.Array:
    if not bool(jnp.all(jnp.isfinite(inverse))):
        raise InvalidParameterError("Matrix is singular")
    return inverse


def _matrix_sqrt(A: jax.Array) -> jax.Array:
    """Symmetric square root via eigendecomposition; A must be SPD."""
    eigvals, eigvecs = jnp.linalg.eigh(A)
    if not bool(jnp.all(eigvals > 0)):
        raise InvalidParameterError(
            f"Matrix square root needs a positive-definite matrix, "
            f"smallest eigenvalue is {float(jnp.min(eigvals))}"
        )
    return eigvecs @ jnp.diag(jnp.sqrt(eigvals)) @ eigvecs.T


def natural_symmetric_to_precision(S: jax.Array) -> jax.Array:
    """
    Expand natural symmetric coordinates into a precision-form matrix.

    Natural coordinates hold 2P - diag(P); halving recovers P off the
    diagonal and half of it on the diagonal, so the diagonal is added back.
    """
    half = S / 2
    return half + jnp.diag(jnp.diag(half))


def natural_precision_to_symmetric(P: jax.Array) -> jax.Array:
    """Inverse of natural_symmetric_to_precision: P -> 2P - diag(P)."""
    return 2 * P - jnp.diag(jnp.diag(P))


# =============================================================================
# COVARIANCE STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class CovarianceStructure(Manifold):
    """
    Base class for compressed symmetric n×n matrices.

    Subclasses implement the encoding (_to_tensor / _from_tensor) and may
    override the algebra with structure-specific fast paths.

    Attributes:
        size: Side length n of the encoded matrix
    """
    size: int

    # ─────────────────────────────────────────────────────────────────────────
    # ENCODING
    # ─────────────────────────────────────────────────────────────────────────

    @abstractmethod
    def _to_tensor(self, chart: Chart, coords: jax.Array) -> jax.Array:
        ...

    @abstractmethod
    def _from_tensor(self, chart: Chart, matrix: jax.Array) -> jax.Array:
        ...

    def _check(self, p: Point) -> None:
        if p.manifold != self:
            raise ChartMismatchError(f"Expected a point on {self}, got {p.manifold}")

    def to_tensor(self, p: Point) -> jax.Array:
        """Expand to the full symmetric n×n matrix the point encodes."""
        self._check(p)
        return self._to_tensor(p.chart, p.coordinates)

    def from_tensor(self, chart: Chart, matrix: jax.Array) -> Point:
        """Project a full matrix onto this structure in the given chart."""
        matrix = jnp.asarray(matrix)
        if matrix.shape != (self.size, self.size):
            raise DimensionMismatchError(
                f"{self} expects a {self.size}x{self.size} matrix, got {matrix.shape}"
            )
        return Point(chart, self, self._from_tensor(chart, matrix))

    def identity(self, chart: Chart) -> Point:
        return self.from_tensor(chart, jnp.eye(self.size))

    def outer(self, chart: Chart, v: jax.Array) -> Point:
        """Projection of the outer product v vᵀ."""
        v = jnp.asarray(v)
        return self.from_tensor(chart, jnp.outer(v, v))

    # ─────────────────────────────────────────────────────────────────────────
    # ALGEBRA (dense defaults)
    # ─────────────────────────────────────────────────────────────────────────

    def transpose(self, p: Point) -> Point:
        """Symmetric matrices are their own transpose."""
        self._check(p)
        return p

    def matvec(self, p: Point, v: jax.Array) -> jax.Array:
        return self.to_tensor(p) @ v

    def matmul(self, p: Point, matrix: jax.Array) -> jax.Array:
        """Left-multiply a dense matrix: M @ matrix."""
        return self.to_tensor(p) @ matrix

    def inverse(self, p: Point) -> Point:
        return self.from_tensor(p.chart, _nonsingular(jnp.linalg.inv(self.to_tensor(p))))

    def determinant(self, p: Point) -> jax.Array:
        return jnp.linalg.det(self.to_tensor(p))

    def log_determinant(self, p: Point) -> jax.Array:
        """log det of a positive-definite matrix."""
        L = _cholesky(self.to_tensor(p))
        return 2 * jnp.sum(jnp.log(jnp.diag(L)))

    def inverse_log_determinant(self, p: Point) -> Tuple[Point, jax.Array]:
        """
        Inverse and log-determinant from one Cholesky factorisation.

        Raises:
            InvalidParameterError: If the matrix is not positive definite
        """
        L = _cholesky(self.to_tensor(p))
        L_inv = solve_triangular(L, jnp.eye(self.size), lower=True)
        inverse = self.from_tensor(p.chart, L_inv.T @ L_inv)
        return inverse, 2 * jnp.sum(jnp.log(jnp.diag(L)))

    def matrix_sqrt(self, p: Point) -> jax.Array:
        """Symmetric square root R with R R = M (used for sampling)."""
        return _matrix_sqrt(self.to_tensor(p))

    def is_positive_definite(self, p: Point) -> bool:
        eigvals = jnp.linalg.eigvalsh(self.to_tensor(p))
        return bool(jnp.all(eigvals > 0))


@dataclass(frozen=True)
class Symmetric(CovarianceStructure):
    """Full symmetric matrix, stored as its row-major lower triangle."""

    @property
    def dimension(self) -> int:
        return self.size * (self.size + 1) // 2

    def _to_tensor(self, chart: Chart, coords: jax.Array) -> jax.Array:
        rows, cols = jnp.tril_indices(self.size)
        lower = jnp.zeros((self.size, self.size)).at[rows, cols].set(coords)
        matrix = lower + lower.T - jnp.diag(jnp.diag(lower))
        if chart is Chart.NATURAL:
            return natural_symmetric_to_precision(matrix)
        return matrix

    def _from_tensor(self, chart: Chart, matrix: jax.Array) -> jax.Array:
        if chart is Chart.NATURAL:
            matrix = natural_precision_to_symmetric(matrix)
        return matrix[jnp.tril_indices(self.size)]


@dataclass(frozen=True)
class Diagonal(CovarianceStructure):
    """Diagonal matrix; every operation is elementwise."""

    @property
    def dimension(self) -> int:
        return self.size

    def _to_tensor(self, chart: Chart, coords: jax.Array) -> jax.Array:
        return jnp.diag(coords)

    def _from_tensor(self, chart: Chart, matrix: jax.Array) -> jax.Array:
        return jnp.diag(matrix)

    def _positive(self, p: Point) -> jax.Array:
        self._check(p)
        if not bool(jnp.all(p.coordinates > 0)):
            raise InvalidParameterError(
                f"Diagonal matrix is not positive definite: {p.coordinates.tolist()}"
            )
        return p.coordinates

    def matvec(self, p: Point, v: jax.Array) -> jax.Array:
        self._check(p)
        return p.coordinates * v

    def matmul(self, p: Point, matrix: jax.Array) -> jax.Array:
        self._check(p)
        return p.coordinates[:, None] * matrix

    def inverse(self, p: Point) -> Point:
        self._check(p)
        return Point(p.chart, self, _nonsingular(1.0 / p.coordinates))

    def determinant(self, p: Point) -> jax.Array:
        self._check(p)
        return jnp.prod(p.coordinates)

    def log_determinant(self, p: Point) -> jax.Array:
        return jnp.sum(jnp.log(self._positive(p)))

    def inverse_log_determinant(self, p: Point) -> Tuple[Point, jax.Array]:
        diag = self._positive(p)
        return Point(p.chart, self, 1.0 / diag), jnp.sum(jnp.log(diag))

    def matrix_sqrt(self, p: Point) -> jax.Array:
        return jnp.diag(jnp.sqrt(self._positive(p)))

    def is_positive_definite(self, p: Point) -> bool:
        self._check(p)
        return bool(jnp.all(p.coordinates > 0))


@dataclass(frozen=True)
class Scale(CovarianceStructure):
    """
    Isotropic matrix s·I, stored as a single scalar.

    In the Mean chart the scalar is the trace n·s (the expected squared norm
    E[x·x]); in other charts it is s itself.
    """

    @property
    def dimension(self) -> int:
        return 1

    def _scalar(self, chart: Chart, coords: jax.Array) -> jax.Array:
        return coords[0] / self.size if chart is Chart.MEAN else coords[0]

    def _encode(self, chart: Chart, s: jax.Array) -> Point:
        value = s * self.size if chart is Chart.MEAN else s
        return Point(chart, self, jnp.atleast_1d(value))

    def _to_tensor(self, chart: Chart, coords: jax.Array) -> jax.Array:
        return self._scalar(chart, coords) * jnp.eye(self.size)

    def _from_tensor(self, chart: Chart, matrix: jax.Array) -> jax.Array:
        s = jnp.trace(matrix) / self.size
        return jnp.atleast_1d(s * self.size if chart is Chart.MEAN else s)

    def _positive(self, p: Point) -> jax.Array:
        self._check(p)
        s = self._scalar(p.chart, p.coordinates)
        if not bool(s > 0):
            raise InvalidParameterError(
                f"Isotropic matrix is not positive definite: scale {float(s)}"
            )
        return s

    def matvec(self, p: Point, v: jax.Array) -> jax.Array:
        self._check(p)
        return self._scalar(p.chart, p.coordinates) * v

    def matmul(self, p: Point, matrix: jax.Array) -> jax.Array:
        self._check(p)
        return self._scalar(p.chart, p.coordinates) * matrix

    def inverse(self, p: Point) -> Point:
        self._check(p)
        return self._encode(p.chart, _nonsingular(1.0 / self._scalar(p.chart, p.coordinates)))

    def determinant(self, p: Point) -> jax.Array:
        self._check(p)
        return self._scalar(p.chart, p.coordinates) ** self.size

    def log_determinant(self, p: Point) -> jax.Array:
        return self.size * jnp.log(self._positive(p))

    def inverse_log_determinant(self, p: Point) -> Tuple[Point, jax.Array]:
        s = self._positive(p)
        return self._encode(p.chart, 1.0 / s), self.size * jnp.log(s)

    def matrix_sqrt(self, p: Point) -> jax.Array:
        return jnp.sqrt(self._positive(p)) * jnp.eye(self.size)

    def is_positive_definite(self, p: Point) -> bool:
        self._check(p)
        return bool(self._scalar(p.chart, p.coordinates) > 0)


# =============================================================================
# LINEAR MAPS
# =============================================================================

@dataclass(frozen=True)
class Tensor(Manifold):
    """
    Dense rows×cols linear map, stored row major.

    Used for the interaction block of linear Gaussian models.
    """
    rows: int
    cols: int

    @property
    def dimension(self) -> int:
        return self.rows * self.cols

    def to_matrix(self, p: Point) -> jax.Array:
        if p.manifold != self:
            raise ChartMismatchError(f"Expected a point on {self}, got {p.manifold}")
        return p.coordinates.reshape(self.rows, self.cols)

    def from_matrix(self, chart: Chart, matrix: jax.Array) -> Point:
        matrix = jnp.asarray(matrix)
        if matrix.shape != (self.rows, self.cols):
            raise DimensionMismatchError(
                f"{self} expects a {self.rows}x{self.cols} matrix, got {matrix.shape}"
            )
        return Point(chart, self, matrix.reshape(-1))


__all__ = [
    'CovarianceStructure',
    'Symmetric',
    'Diagonal',
    'Scale',
    'Tensor',
    'natural_symmetric_to_precision',
    'natural_precision_to_symmetric',
]
