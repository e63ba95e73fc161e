"""
Manifolds, tagged points, and composite (location, shape) manifolds.

A Manifold is a space locally represented by R^n. A Point is one element of
a manifold expressed in a particular coordinate chart:

    Point(chart, manifold, coordinates)   with   len(coordinates) == dim(manifold)

Each chart imposes its own vector-space structure on the coordinates, so
point arithmetic is only defined between points sharing both chart and
manifold. The pairing θ·η is only defined between a point and a point in
the dual chart (Natural with Mean).

Composite manifolds split their coordinates into a leading block and a
trailing block:

  ┌──────────────────────────────────────────────────────────────┐
  │  LocationShape(location, shape)                              │
  │    coordinates = [ location block | shape block ]            │
  │    e.g. Normal = mean ⊕ variance                             │
  │  Affine(codomain, map)   (see distributions.linear)          │
  │    coordinates = [ bias block | linear-map block ]           │
  └──────────────────────────────────────────────────────────────┘

join and split are exact inverses.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple, Union

import jax
import jax.numpy as jnp

from ..core import Chart, ChartMismatchError, DimensionMismatchError


# =============================================================================
# MANIFOLDS
# =============================================================================

@dataclass(frozen=True)
class Manifold(ABC):
    """
    A space of fixed intrinsic dimension.

    Manifolds are immutable value objects: two manifolds are the same when
    their defining fields are equal. A manifold acts as a point factory,
    and points should be created through ``point`` rather than the Point
    constructor where convenient.
    """

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Intrinsic dimension (length of any coordinate vector)."""
        ...

    def point(self, chart: Chart, coordinates) -> 'Point':
        """Create a point on this manifold in the given chart."""
        return Point(chart, self, coordinates)

    def zeros(self, chart: Chart) -> 'Point':
        """The origin of the given chart."""
        return Point(chart, self, jnp.zeros(self.dimension))


@dataclass(frozen=True)
class Euclidean(Manifold):
    """Euclidean space R^n."""
    dim: int

    @property
    def dimension(self) -> int:
        return self.dim


# =============================================================================
# POINTS
# =============================================================================

@dataclass(frozen=True, eq=False)
class Point:
    """
    A point on a manifold, tagged with the chart of its coordinates.

    Attributes:
        chart: Coordinate system of ``coordinates``
        manifold: The manifold the point lies on
        coordinates: 1D array of length ``manifold.dimension``

    Raises:
        DimensionMismatchError: If the coordinate vector has the wrong shape
    """
    chart: Chart
    manifold: Manifold
    coordinates: jax.Array

    def __post_init__(self):
        coords = jnp.asarray(self.coordinates, dtype=jnp.result_type(float))
        expected = (self.manifold.dimension,)
        if coords.shape != expected:
            raise DimensionMismatchError(
                f"{type(self.manifold).__name__} expects coordinates of shape "
                f"{expected}, got {coords.shape}"
            )
        object.__setattr__(self, 'coordinates', coords)

    @property
    def dim(self) -> int:
        return self.manifold.dimension

    # ─────────────────────────────────────────────────────────────────────────
    # VECTOR-SPACE STRUCTURE OF THE CHART
    # ─────────────────────────────────────────────────────────────────────────

    def _check_compatible(self, other: 'Point') -> None:
        if not isinstance(other, Point):
            raise TypeError(f"Expected a Point, got {type(other).__name__}")
        if other.chart is not self.chart or other.manifold != self.manifold:
            raise ChartMismatchError(
                f"Cannot combine {self.chart.value} point on {self.manifold} "
                f"with {other.chart.value} point on {other.manifold}"
            )

    def _with(self, coordinates: jax.Array) -> 'Point':
        return Point(self.chart, self.manifold, coordinates)

    def __add__(self, other: 'Point') -> 'Point':
        self._check_compatible(other)
        return self._with(self.coordinates + other.coordinates)

    def __sub__(self, other: 'Point') -> 'Point':
        self._check_compatible(other)
        return self._with(self.coordinates - other.coordinates)

    def __neg__(self) -> 'Point':
        return self._with(-self.coordinates)

    def __mul__(self, scalar: Union[float, jax.Array]) -> 'Point':
        if isinstance(scalar, Point):
            raise TypeError("Points can only be scaled by scalars")
        return self._with(scalar * self.coordinates)

    def __rmul__(self, scalar: Union[float, jax.Array]) -> 'Point':
        return self.__mul__(scalar)

    def __truediv__(self, scalar: Union[float, jax.Array]) -> 'Point':
        return self._with(self.coordinates / scalar)

    def dot(self, other: 'Point') -> jax.Array:
        """
        Dual pairing ⟨p, q⟩ = Σ_i p_i q_i.

        Only defined between a point and a point in the dual chart on the
        same manifold, e.g. θ·η for Natural θ and Mean η.
        """
        if not isinstance(other, Point):
            raise TypeError(f"Expected a Point, got {type(other).__name__}")
        if other.manifold != self.manifold or other.chart is not self.chart.dual:
            raise ChartMismatchError(
                f"Dual pairing needs {self.chart.dual.value} coordinates on "
                f"{self.manifold}, got {other.chart.value} on {other.manifold}"
            )
        return jnp.dot(self.coordinates, other.coordinates)

    def allclose(self, other: 'Point', rtol: float = 1e-5, atol: float = 1e-8) -> bool:
        """Coordinate-wise comparison of two compatible points."""
        self._check_compatible(other)
        return bool(jnp.allclose(self.coordinates, other.coordinates,
                                 rtol=rtol, atol=atol))

    def __repr__(self) -> str:
        return (f"Point({self.chart.value}, {self.manifold}, "
                f"{self.coordinates.tolist()})")


# =============================================================================
# COMPOSITE MANIFOLDS
# =============================================================================

@dataclass(frozen=True)
class Pair(Manifold):
    """
    Manifold whose coordinates concatenate a first and second block.

    Subclasses name the blocks; join/split are shared.
    """

    @property
    @abstractmethod
    def first(self) -> Manifold:
        ...

    @property
    @abstractmethod
    def second(self) -> Manifold:
        ...

    @property
    def dimension(self) -> int:
        return self.first.dimension + self.second.dimension

    def join(self, first: Point, second: Point) -> Point:
        """
        Concatenate two blocks into a point on this manifold.

        Raises:
            ChartMismatchError: If the blocks disagree in chart or lie on
                the wrong manifolds
        """
        if first.chart is not second.chart:
            raise ChartMismatchError(
                f"Cannot join {first.chart.value} and {second.chart.value} blocks"
            )
        if first.manifold != self.first or second.manifold != self.second:
            raise ChartMismatchError(
                f"{type(self).__name__} joins points on {self.first} and "
                f"{self.second}, got {first.manifold} and {second.manifold}"
            )
        coords = jnp.concatenate([first.coordinates, second.coordinates])
        return Point(first.chart, self, coords)

    def split(self, p: Point) -> Tuple[Point, Point]:
        """Split a point into its two blocks (inverse of join)."""
        if p.manifold != self:
            raise ChartMismatchError(
                f"Cannot split a point on {p.manifold} with {self}"
            )
        k = self.first.dimension
        return (Point(p.chart, self.first, p.coordinates[:k]),
                Point(p.chart, self.second, p.coordinates[k:]))


@dataclass(frozen=True)
class LocationShape(Pair):
    """
    A manifold decomposed into a location block and a shape block.

    Example:
        Normal = LocationShape(NormalMean(), NormalVariance())
        join(mean_point, variance_point) -> Normal point
    """
    location: Manifold
    shape: Manifold

    @property
    def first(self) -> Manifold:
        return self.location

    @property
    def second(self) -> Manifold:
        return self.shape


__all__ = [
    'Manifold',
    'Euclidean',
    'Point',
    'Pair',
    'LocationShape',
]
