"""
Coordinate chart taxonomy for statistical manifolds.

A point on a statistical manifold can be written in several coordinate
systems, each mathematically distinct:

- Chart.SOURCE: Human-meaningful parameters (mean, variance, covariance)
- Chart.NATURAL: Exponential-family parameters θ, log p(x) = θ·s(x) - ψ(θ) + b(x)
- Chart.MEAN: Expectation parameters η = E[s(X)] = ∇ψ(θ)

Natural and Mean coordinates are Legendre duals of one another: the
differential of the potential ψ at θ is a point in Mean coordinates, and
the differential of the dual potential φ at η is a point in Natural
coordinates. Source coordinates have no dual.

Charts carry no data. They tag points so that arithmetic between different
parameterisations of the same distribution is rejected.

Reference: Amari "Information Geometry and Its Applications" (2016), Ch. 2
"""
from __future__ import annotations

from enum import Enum

from .errors import UnsupportedTransitionError


class Chart(Enum):
    """
    Coordinate system in which a point's coordinates are expressed.

    The value doubles as the chart's short name, used when resolving
    transition maps between charts (e.g. ``source_to_natural``).
    """
    SOURCE = "source"     # Human parameters, e.g. (μ, σ²)
    NATURAL = "natural"   # θ, flat under the exponential connection
    MEAN = "mean"         # η = E[s(X)], flat under the mixture connection

    @property
    def dual(self) -> 'Chart':
        """
        The Legendre-dual chart: NATURAL <-> MEAN.

        Raises:
            UnsupportedTransitionError: SOURCE has no dual chart
        """
        if self is Chart.NATURAL:
            return Chart.MEAN
        if self is Chart.MEAN:
            return Chart.NATURAL
        raise UnsupportedTransitionError("Source coordinates have no dual chart")

    @classmethod
    def from_name(cls, name: str) -> 'Chart':
        """Look up a chart by (case-insensitive) name."""
        try:
            return cls(name.lower())
        except ValueError:
            raise ValueError(
                f"Unknown chart '{name}'. "
                f"Available: {[c.value for c in cls]}"
            ) from None


__all__ = [
    'Chart',
]
