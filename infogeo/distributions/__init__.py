"""
Gaussian statistical manifolds.

This module provides:
- Normal, NormalMean: univariate normals and the unit-variance location family
- MultivariateNormal, MVNMean: multivariate normals with structured covariance
- FullNormal / DiagonalNormal / IsotropicNormal constructors
- LinearModel and its FullLinearModel / FactorAnalysis /
  PrincipalComponentAnalysis constructors
"""
from .normal import (
    NormalMean,
    NormalVariance,
    Normal,
)

from .multivariate import (
    MVNMean,
    MultivariateNormal,
    FullNormal,
    DiagonalNormal,
    IsotropicNormal,
    standard_normal,
    multivariate_normal_correlations,
    bivariate_normal_confidence_ellipse,
)

from .linear import (
    LinearModel,
    FullLinearModel,
    FactorAnalysis,
    PrincipalComponentAnalysis,
)

__all__ = [
    # Univariate
    'NormalMean',
    'NormalVariance',
    'Normal',
    # Multivariate
    'MVNMean',
    'MultivariateNormal',
    'FullNormal',
    'DiagonalNormal',
    'IsotropicNormal',
    'standard_normal',
    'multivariate_normal_correlations',
    'bivariate_normal_confidence_ellipse',
    # Linear-Gaussian
    'LinearModel',
    'FullLinearModel',
    'FactorAnalysis',
    'PrincipalComponentAnalysis',
]
