"""
Information geometry of exponential-family distributions

This package represents probability distributions as points on dually flat
statistical manifolds. It provides:

Core Types (infogeo.core):
    - Chart: Source, Natural and Mean coordinate systems
    - InvalidParameterError, DimensionMismatchError, ChartMismatchError,
      UnsupportedTransitionError

Geometry (infogeo.geometry):
    - Point: Coordinates tagged with their chart and manifold
    - LocationShape: Composite (location, shape) manifolds
    - Symmetric, Diagonal, Scale: Covariance structures
    - MetricTensor: Riemannian metric with index raising/lowering

Information Geometry (infogeo.information):
    - ExponentialFamily / LegendreExponentialFamily /
      DuallyFlatExponentialFamily: Sufficient statistics, potentials, MLE
    - FisherMetric: Fisher Information as Riemannian metric

Distributions (infogeo.distributions):
    - Normal, MultivariateNormal, LinearModel and their constructors

Usage:
    from infogeo import Normal, FullNormal, Chart
    normal = Normal()
    p = normal.mle(samples, chart=Chart.NATURAL)
"""
import logging

__version__ = "0.1.0"

# =============================================================================
# Core Types (infogeo.core)
# =============================================================================
from .core import (
    Chart,
    InvalidParameterError,
    DimensionMismatchError,
    ChartMismatchError,
    UnsupportedTransitionError,
)

# =============================================================================
# Geometry (infogeo.geometry)
# =============================================================================
from .geometry import (
    # Manifolds
    Manifold,
    Euclidean,
    Point,
    Pair,
    LocationShape,
    # Covariance structures
    CovarianceStructure,
    Symmetric,
    Diagonal,
    Scale,
    Tensor,
    # Metric
    MetricTensor,
)

# =============================================================================
# Information Geometry (infogeo.information)
# =============================================================================
from .information import (
    Charted,
    ExponentialFamily,
    LegendreExponentialFamily,
    DuallyFlatExponentialFamily,
    FisherMetric,
)

# =============================================================================
# Distributions (infogeo.distributions)
# =============================================================================
from .distributions import (
    # Univariate
    NormalMean,
    NormalVariance,
    Normal,
    # Multivariate
    MVNMean,
    MultivariateNormal,
    FullNormal,
    DiagonalNormal,
    IsotropicNormal,
    standard_normal,
    multivariate_normal_correlations,
    bivariate_normal_confidence_ellipse,
    # Linear-Gaussian
    LinearModel,
    FullLinearModel,
    FactorAnalysis,
    PrincipalComponentAnalysis,
)

# =============================================================================
# Configuration
# =============================================================================
from .config import (
    NumericsConfig,
    configure,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())


__all__ = [
    "__version__",
    # Core
    "Chart",
    "InvalidParameterError",
    "DimensionMismatchError",
    "ChartMismatchError",
    "UnsupportedTransitionError",
    # Geometry - Manifolds
    "Manifold",
    "Euclidean",
    "Point",
    "Pair",
    "LocationShape",
    # Geometry - Covariance structures
    "CovarianceStructure",
    "Symmetric",
    "Diagonal",
    "Scale",
    "Tensor",
    # Geometry - Metric
    "MetricTensor",
    # Information
    "Charted",
    "ExponentialFamily",
    "LegendreExponentialFamily",
    "DuallyFlatExponentialFamily",
    "FisherMetric",
    # Distributions - Univariate
    "NormalMean",
    "NormalVariance",
    "Normal",
    # Distributions - Multivariate
    "MVNMean",
    "MultivariateNormal",
    "FullNormal",
    "DiagonalNormal",
    "IsotropicNormal",
    "standard_normal",
    "multivariate_normal_correlations",
    "bivariate_normal_confidence_ellipse",
    # Distributions - Linear-Gaussian
    "LinearModel",
    "FullLinearModel",
    "FactorAnalysis",
    "PrincipalComponentAnalysis",
    # Configuration
    "NumericsConfig",
    "configure",
]
