"""
Tests for linear-Gaussian models.

Tests cover:
- Dimensions of the affine (bias, interaction) decomposition
- Source <-> Natural transitions of the interaction block
- Conditioning on an input
- Unsupported charts
"""
import pytest
import jax
import jax.numpy as jnp
import numpy as np

from infogeo import (
    Chart,
    DimensionMismatchError,
    FactorAnalysis,
    FullLinearModel,
    LinearModel,
    PrincipalComponentAnalysis,
    Tensor,
    UnsupportedTransitionError,
)
from tests.geometry.generators import random_linear_model_point
from tests.geometry.invariants import assert_round_trip


@pytest.mark.family
class TestStructure:
    """The model is a pair of a normal and a linear map."""

    def test_dimensions(self):
        model = FullLinearModel(3, 2)
        assert model.outputs == 3
        assert model.inputs == 2
        assert model.interaction == Tensor(3, 2)
        assert model.dimension == (3 + 6) + 6

    def test_factories_pick_structures(self):
        assert FactorAnalysis(3, 2).gaussian.dimension == 3 + 3
        assert PrincipalComponentAnalysis(3, 2).gaussian.dimension == 3 + 1
        assert FactorAnalysis(3, 2) == FactorAnalysis(3, 2)

    def test_weights_round_trip(self, key):
        model = FactorAnalysis(3, 2)
        p = random_linear_model_point(key, model)
        bias, _ = model.split(p)
        W = model.weights(p)
        assert W.shape == (3, 2)
        assert model.from_components(Chart.SOURCE, bias, W).allclose(p)


@pytest.mark.family
@pytest.mark.invariant
class TestTransitions:
    """Only Source and Natural charts exist for the joint model."""

    @pytest.mark.parametrize("start,via", [
        (Chart.SOURCE, Chart.NATURAL),
        (Chart.NATURAL, Chart.SOURCE),
    ])
    def test_round_trip(self, key, structure_type, start, via):
        model = LinearModel(structure_type(3), 2)
        assert_round_trip(model, random_linear_model_point(key, model, start), via)

    def test_natural_weights_are_precision_times_source(self, key, structure_type):
        model = LinearModel(structure_type(3), 2)
        p = random_linear_model_point(key, model)
        bias, _ = model.split(p)
        _, sigma = model.gaussian.mean_covariance(bias)
        np.testing.assert_allclose(model.weights(model.to_natural(p)),
                                   jnp.linalg.solve(sigma, model.weights(p)),
                                   rtol=1e-8, atol=1e-10)

    def test_bias_block_is_transitioned(self, key):
        model = FullLinearModel(2, 3)
        p = random_linear_model_point(key, model)
        bias, _ = model.split(p)
        nbias, _ = model.split(model.to_natural(p))
        assert nbias.allclose(model.gaussian.to_natural(bias), rtol=1e-10)

    def test_mean_chart_unsupported(self, key):
        model = FullLinearModel(2, 1)
        p = random_linear_model_point(key, model)
        assert not model.supports_transition(Chart.SOURCE, Chart.MEAN)
        with pytest.raises(UnsupportedTransitionError):
            model.to_mean(p)


@pytest.mark.family
class TestConditional:
    """Fixing the input gives a normal with shifted location."""

    @pytest.mark.parametrize("chart", [Chart.SOURCE, Chart.NATURAL])
    def test_conditional_mean_is_affine(self, key, structure_type, chart):
        model = LinearModel(structure_type(3), 2)
        k1, k2 = jax.random.split(key)
        p = random_linear_model_point(k1, model)
        x = jax.random.normal(k2, (2,))

        bias, _ = model.split(p)
        mu, sigma = model.gaussian.mean_covariance(bias)
        conditional = model.conditional(model.transition(p, chart), x)

        assert conditional.chart is Chart.NATURAL
        assert conditional.manifold == model.gaussian
        cmu, csigma = model.gaussian.mean_covariance(conditional)
        np.testing.assert_allclose(cmu, mu + model.weights(p) @ x, rtol=1e-8, atol=1e-10)
        np.testing.assert_allclose(csigma, sigma, rtol=1e-8, atol=1e-10)

    def test_zero_input_gives_bias(self, key):
        model = PrincipalComponentAnalysis(2, 4)
        p = random_linear_model_point(key, model, Chart.NATURAL)
        bias, _ = model.split(p)
        assert model.conditional(p, jnp.zeros(4)).allclose(bias)

    def test_wrong_input_dimension(self, key):
        model = FactorAnalysis(2, 3)
        p = random_linear_model_point(key, model)
        with pytest.raises(DimensionMismatchError):
            model.conditional(p, jnp.zeros(2))
