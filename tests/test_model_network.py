"""Tests for the perceptron building blocks."""

import math

import pytest
import torch

from model.errors import ShapeMismatchError
from model.network import NetworkParameters, cross_entropy, forward, sgd_step, softmax


class TestSoftmax:
    """Tests for softmax."""

    def test_sums_to_one(self):
        probabilities = softmax(torch.tensor([1.0, 2.0, 3.0], dtype=torch.float64))
        assert float(probabilities.sum()) == pytest.approx(1.0)

    def test_large_logits_do_not_overflow(self):
        probabilities = softmax(torch.tensor([1000.0, 999.0, -1000.0], dtype=torch.float64))
        assert torch.isfinite(probabilities).all()
        assert float(probabilities[0]) == pytest.approx(1 / (1 + math.exp(-1)))

    def test_all_negative(self):
        probabilities = softmax(torch.full((8,), -500.0, dtype=torch.float64))
        assert probabilities.tolist() == pytest.approx([0.125] * 8)


class TestCrossEntropy:
    """Tests for cross_entropy."""

    def test_value(self):
        probabilities = torch.tensor([0.25, 0.75], dtype=torch.float64)
        assert cross_entropy(probabilities, 1) == pytest.approx(-math.log(0.75))

    def test_zero_probability_is_clamped(self):
        probabilities = torch.tensor([1.0, 0.0], dtype=torch.float64)
        assert cross_entropy(probabilities, 1) == pytest.approx(-math.log(1e-15))


class TestNetworkParameters:
    """Tests for parameter initialisation and shape checks."""

    def test_initialize_shapes_and_range(self):
        generator = torch.Generator().manual_seed(0)
        params = NetworkParameters.initialize(20, 64, 8, generator=generator)

        assert params.shapes() == {"w1": [64, 20], "b1": [64], "w2": [8, 64], "b2": [8]}
        assert float(params.w1.abs().max()) <= 0.05
        assert float(params.w2.abs().max()) <= 0.05
        assert torch.count_nonzero(params.b1) == 0
        assert torch.count_nonzero(params.b2) == 0

    def test_seeded_initialisation_is_reproducible(self):
        a = NetworkParameters.initialize(20, 64, 8, generator=torch.Generator().manual_seed(7))
        b = NetworkParameters.initialize(20, 64, 8, generator=torch.Generator().manual_seed(7))
        assert torch.equal(a.w1, b.w1)
        assert torch.equal(a.w2, b.w2)

    def test_check_shapes(self):
        params = NetworkParameters.initialize(20, 64, 8)
        params.check_shapes(20, 64, 8)

        with pytest.raises(ShapeMismatchError) as exc_info:
            params.check_shapes(19, 64, 8)
        assert exc_info.value.code == "SHAPE_MISMATCH"

    def test_clone_is_independent(self):
        params = NetworkParameters.initialize(4, 3, 2)
        copy = params.clone()
        params.w1 += 1.0
        assert not torch.equal(params.w1, copy.w1)

    def test_is_finite(self):
        params = NetworkParameters.initialize(4, 3, 2)
        assert params.is_finite()
        params.b2[0] = float("nan")
        assert not params.is_finite()


class TestForwardAndStep:
    """Tests for forward and sgd_step."""

    def make_params(self) -> NetworkParameters:
        return NetworkParameters(
            w1=torch.tensor([[1.0, 0.0], [0.0, -1.0]], dtype=torch.float64),
            b1=torch.zeros(2, dtype=torch.float64),
            w2=torch.tensor([[1.0, 1.0], [0.5, 0.0]], dtype=torch.float64),
            b2=torch.tensor([0.0, 0.1], dtype=torch.float64),
        )

    def test_forward(self):
        params = self.make_params()
        hidden, logits = forward(params, torch.tensor([2.0, 3.0], dtype=torch.float64))
        # The second hidden unit is clipped by the ReLU.
        assert hidden.tolist() == [2.0, 0.0]
        assert logits.tolist() == pytest.approx([2.0, 1.1])

    def test_step_uses_logit_error_and_updated_output_weights(self):
        params = self.make_params()
        x = torch.tensor([2.0, 3.0], dtype=torch.float64)
        hidden, logits = forward(params, x)
        target = torch.tensor([1.0, 0.0], dtype=torch.float64)

        sgd_step(params, x, hidden, logits, target, learning_rate=0.1)

        # Output error is logits - target = [1.0, 1.1].
        assert params.b2.tolist() == pytest.approx([-0.1, -0.01])
        assert params.w2.tolist() == pytest.approx([[0.8, 1.0], [0.28, 0.0]])
        # Hidden error flows through the updated w2: 0.8 * 1.0 + 0.28 * 1.1 = 1.108.
        assert params.b1.tolist() == pytest.approx([-0.1108, 0.0])
        assert params.w1.tolist() == pytest.approx([[1.0 - 0.2216, -0.3324], [0.0, -1.0]])

    def test_step_reduces_error(self):
        params = NetworkParameters.initialize(4, 8, 3, generator=torch.Generator().manual_seed(1))
        x = torch.tensor([1.0, -1.0, 0.5, 0.25], dtype=torch.float64)
        target = torch.tensor([0.0, 1.0, 0.0], dtype=torch.float64)

        _, before = forward(params, x)
        for _ in range(50):
            hidden, logits = forward(params, x)
            sgd_step(params, x, hidden, logits, target, learning_rate=0.1)
        _, after = forward(params, x)

        assert float((after - target).abs().sum()) < float((before - target).abs().sum())
