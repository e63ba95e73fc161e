"""
Mathematical invariant verification utilities.

Provides assertion functions that verify fundamental properties of
statistical manifolds:
- Chart round trips (Source → Natural → Mean → Source)
- Legendre duality ψ(θ) + φ(η) = θ·η
- Moment matching (MLE equals the average sufficient statistic)
- Metric properties (symmetry, positive-definiteness, dual inverses)

Each assertion includes clear error messages referencing the violated
mathematical property for easier debugging.
"""
import jax.numpy as jnp

from infogeo import Chart, Point


class InvariantViolation(AssertionError):
    """Raised when a mathematical invariant is violated."""
    pass


def _check_allclose(
    actual: jnp.ndarray,
    expected: jnp.ndarray,
    rtol: float,
    atol: float,
    message: str
) -> None:
    """Helper to check array equality with informative error."""
    actual = jnp.asarray(actual)
    expected = jnp.asarray(expected)
    if not jnp.allclose(actual, expected, rtol=rtol, atol=atol):
        max_diff = jnp.max(jnp.abs(actual - expected))
        raise InvariantViolation(
            f"{message}\n"
            f"  Max absolute difference: {max_diff}\n"
            f"  Expected shape: {expected.shape}, Actual shape: {actual.shape}"
        )


# =============================================================================
# Chart Invariants
# =============================================================================

def assert_round_trip(model, p: Point, via: Chart, rtol: float = 1e-6, atol: float = 1e-8) -> None:
    """
    Verify transition(transition(p, via), p.chart) == p.

    Transitions change coordinates, never the distribution.
    """
    back = model.transition(model.transition(p, via), p.chart)
    if back.chart is not p.chart or back.manifold != p.manifold:
        raise InvariantViolation(
            f"Round trip through {via.value} changed chart or manifold: {back}"
        )
    _check_allclose(
        back.coordinates, p.coordinates, rtol, atol,
        f"Round trip {p.chart.value} → {via.value} → {p.chart.value} violated"
    )


def assert_legendre_duality(model, p: Point, rtol: float = 1e-6, atol: float = 1e-8) -> None:
    """
    Verify Fenchel-Young equality at a point: ψ(θ) + φ(η) = θ·η.
    """
    theta = model.to_natural(p)
    eta = model.to_mean(p)
    _check_allclose(
        model.potential(theta) + model.dual_potential(eta), theta.dot(eta), rtol, atol,
        "Legendre duality violated: ψ(θ) + φ(η) ≠ θ·η"
    )


def assert_mle_is_average_statistic(model, xs, rtol: float = 1e-6, atol: float = 1e-8) -> None:
    """
    Verify the Mean-chart MLE is the average sufficient statistic.
    """
    fit = model.mle(xs)
    expected = jnp.mean(model.sufficient_statistics(xs), axis=0)
    if fit.chart is not Chart.MEAN:
        raise InvariantViolation(f"MLE default chart should be Mean, got {fit.chart}")
    _check_allclose(
        fit.coordinates, expected, rtol, atol,
        "Moment matching violated: η̂ ≠ (1/N) Σ s(x_i)"
    )


# =============================================================================
# Metric Invariants
# =============================================================================

def assert_positive_definite(matrix: jnp.ndarray, name: str = "matrix") -> None:
    """Verify symmetry and strictly positive eigenvalues."""
    _check_allclose(matrix, matrix.T, 1e-8, 1e-10, f"{name} is not symmetric")
    eigvals = jnp.linalg.eigvalsh(matrix)
    if not jnp.all(eigvals > 0):
        raise InvariantViolation(
            f"{name} is not positive definite; min eigenvalue {jnp.min(eigvals)}"
        )


def assert_dual_metrics(g_natural: jnp.ndarray,
                        g_mean: jnp.ndarray,
                        rtol: float = 1e-6,
                        atol: float = 1e-8) -> None:
    """
    Verify the Natural and Mean metrics are inverse: g(θ) g(η) = I.
    """
    _check_allclose(
        g_natural @ g_mean, jnp.eye(g_natural.shape[0]), rtol, atol,
        "Dual metrics are not inverse: g(θ) g(η) ≠ I"
    )
