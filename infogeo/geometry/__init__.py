"""
Geometric building blocks: manifolds, points, covariance structures, metrics.

This module provides:
- Manifold / Point: coordinate vectors tagged with their chart
- Pair / LocationShape: composite manifolds with join/split
- Symmetric / Diagonal / Scale: compressed covariance matrices
- Tensor: dense rectangular linear maps
- MetricTensor: Riemannian metric for index operations

See Also:
    infogeo.information: Exponential families and Fisher geometry
"""
from .manifold import (
    Manifold,
    Euclidean,
    Point,
    Pair,
    LocationShape,
)

from .linear import (
    CovarianceStructure,
    Symmetric,
    Diagonal,
    Scale,
    Tensor,
    natural_symmetric_to_precision,
    natural_precision_to_symmetric,
)

from .metric import (
    MetricTensor,
)

__all__ = [
    # Manifolds
    'Manifold',
    'Euclidean',
    'Point',
    'Pair',
    'LocationShape',
    # Covariance structures
    'CovarianceStructure',
    'Symmetric',
    'Diagonal',
    'Scale',
    'Tensor',
    'natural_symmetric_to_precision',
    'natural_precision_to_symmetric',
    # Metric
    'MetricTensor',
]
