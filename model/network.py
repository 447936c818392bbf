"""Two-layer perceptron: parameters, forward pass, and per-sample SGD update.

Layout (rows are output units):
    w1: [hidden_size, input_size]    b1: [hidden_size]
    w2: [output_size, hidden_size]   b2: [output_size]

The forward pass is ``logits = w2 @ relu(w1 @ x + b1) + b2``. Training
treats the logits themselves as the regression output: the output-layer
error is ``logits - target`` and the softmax is only used for the reported
loss and for prediction.
"""

from dataclasses import dataclass

import torch

from .errors import ShapeMismatchError


@dataclass
class NetworkParameters:
    """Weights and biases of the perceptron, stored as float64 tensors."""

    w1: torch.Tensor
    b1: torch.Tensor
    w2: torch.Tensor
    b2: torch.Tensor

    @classmethod
    def initialize(
        cls,
        input_size: int,
        hidden_size: int,
        output_size: int,
        generator: torch.Generator | None = None,
        scale: float = 0.1,
    ) -> "NetworkParameters":
        """Create parameters with weights uniform in ``[-scale/2, scale/2)`` and zero biases."""
        def uniform(*shape: int) -> torch.Tensor:
            return (torch.rand(shape, generator=generator, dtype=torch.float64) - 0.5) * scale

        return cls(
            w1=uniform(hidden_size, input_size),
            b1=torch.zeros(hidden_size, dtype=torch.float64),
            w2=uniform(output_size, hidden_size),
            b2=torch.zeros(output_size, dtype=torch.float64),
        )

    def shapes(self) -> dict[str, list[int]]:
        return {
            "w1": list(self.w1.shape),
            "b1": list(self.b1.shape),
            "w2": list(self.w2.shape),
            "b2": list(self.b2.shape),
        }

    def check_shapes(self, input_size: int, hidden_size: int, output_size: int) -> None:
        """Raise ShapeMismatchError unless every tensor matches the architecture."""
        expected = {
            "w1": [hidden_size, input_size],
            "b1": [hidden_size],
            "w2": [output_size, hidden_size],
            "b2": [output_size],
        }
        actual = self.shapes()
        if actual != expected:
            raise ShapeMismatchError(
                message="Network parameter shapes do not match the architecture",
                code="SHAPE_MISMATCH",
                details={"expected": expected, "actual": actual},
            )

    def is_finite(self) -> bool:
        return all(bool(torch.isfinite(t).all()) for t in (self.w1, self.b1, self.w2, self.b2))

    def clone(self) -> "NetworkParameters":
        return NetworkParameters(
            w1=self.w1.clone(),
            b1=self.b1.clone(),
            w2=self.w2.clone(),
            b2=self.b2.clone(),
        )


def softmax(logits: torch.Tensor) -> torch.Tensor:
    """Numerically stable softmax over the last dimension.

    The maximum is subtracted before exponentiating so large positive logits
    cannot overflow.

    Examples:
        >>> softmax(torch.tensor([1000.0, 1000.0])).tolist()
        [0.5, 0.5]
    """
    shifted = logits - logits.max(dim=-1, keepdim=True).values
    exps = torch.exp(shifted)
    return exps / exps.sum(dim=-1, keepdim=True)


def cross_entropy(probabilities: torch.Tensor, target_index: int) -> float:
    """Negative log probability of the target class, clamped at 1e-15."""
    return -float(torch.log(torch.clamp(probabilities[target_index], min=1e-15)))


def forward(params: NetworkParameters, x: torch.Tensor) -> tuple[torch.Tensor, torch.Tensor]:
    """Run the network on one input vector.

    Returns:
        Tuple of (hidden activations after ReLU, output logits).
    """
    hidden = torch.relu(params.w1 @ x + params.b1)
    logits = params.w2 @ hidden + params.b2
    return hidden, logits


def sgd_step(
    params: NetworkParameters,
    x: torch.Tensor,
    hidden: torch.Tensor,
    logits: torch.Tensor,
    target: torch.Tensor,
    learning_rate: float,
) -> None:
    """Apply one in-place gradient step for a single sample.

    The output layer is updated first; the hidden-layer error is then
    propagated through the already updated ``w2``.
    """
    output_grad = logits - target

    params.w2 -= learning_rate * torch.outer(output_grad, hidden)
    params.b2 -= learning_rate * output_grad

    hidden_grad = (params.w2.T @ output_grad) * (hidden > 0).to(hidden.dtype)

    params.w1 -= learning_rate * torch.outer(hidden_grad, x)
    params.b1 -= learning_rate * hidden_grad
