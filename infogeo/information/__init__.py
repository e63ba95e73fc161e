"""
Information geometry: exponential families and the Fisher metric.

This module provides:
- Charted: closed-form transitions between Source, Natural and Mean charts
- ExponentialFamily: sufficient statistics and base measures
- LegendreExponentialFamily: potential, densities, likelihood, MLE
- DuallyFlatExponentialFamily: dual potential and relative entropy
- FisherMetric: Fisher Information as Riemannian metric

Key concepts:
- Potential ψ(θ) and dual potential φ(η) are Legendre conjugates
- MLE is moment matching: η̂ = (1/N) Σ s(x_i)
- Fisher metric: g(θ) = ∇²ψ(θ), g(η) = g(θ)^{-1}

See Also:
    infogeo.distributions: Gaussian models implementing these protocols
"""
from .exponential_family import (
    Charted,
    ExponentialFamily,
    LegendreExponentialFamily,
    DuallyFlatExponentialFamily,
)

from .fisher import (
    FisherMetric,
)

__all__ = [
    # Protocols
    'Charted',
    'ExponentialFamily',
    'LegendreExponentialFamily',
    'DuallyFlatExponentialFamily',
    # Fisher
    'FisherMetric',
]
