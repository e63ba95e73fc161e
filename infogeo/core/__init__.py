"""
Core type system for statistical manifolds.

This module provides:
- Chart: Source / Natural / Mean coordinate systems
- Error taxonomy raised across the package
"""
from .types import (
    Chart,
)

from .errors import (
    InvalidParameterError,
    DimensionMismatchError,
    ChartMismatchError,
    UnsupportedTransitionError,
)

__all__ = [
    'Chart',
    'InvalidParameterError',
    'DimensionMismatchError',
    'ChartMismatchError',
    'UnsupportedTransitionError',
]
