"""
Error taxonomy for statistical manifold computations.

- InvalidParameterError: a point lies outside the model's parameter domain
  (non positive-definite covariance, non-negative natural precision)
- DimensionMismatchError: coordinates or samples disagree with a manifold's
  declared dimension
- ChartMismatchError: an operation mixes points from different charts or
  manifolds
- UnsupportedTransitionError: a model does not define the requested
  coordinate transition

Numerical ill-conditioning (near-singular covariances) is not detected;
it is inherited from the underlying linear algebra.
"""


class InvalidParameterError(ValueError):
    """Raised when parameters fall outside the model's domain."""
    pass


class DimensionMismatchError(ValueError):
    """Raised when coordinate or sample dimensions disagree with a manifold."""
    pass


class ChartMismatchError(TypeError):
    """Raised when points from different charts or manifolds are combined."""
    pass


class UnsupportedTransitionError(TypeError):
    """Raised when a model has no transition between two charts."""
    pass


__all__ = [
    'InvalidParameterError',
    'DimensionMismatchError',
    'ChartMismatchError',
    'UnsupportedTransitionError',
]
