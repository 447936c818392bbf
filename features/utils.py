"""Signal conversion and framing helpers shared by the extractors."""

from typing import Sequence, Union

import numpy as np
import torch

from .errors import FeatureInputError


SignalLike = Union[torch.Tensor, np.ndarray, Sequence[float]]


def as_signal(signal: SignalLike, sample_rate: int) -> torch.Tensor:
    """Convert a mono PCM signal into a 1-D float64 tensor.

    Accepts a torch tensor shaped [T] or [1, T], a numpy array of the same
    shapes, or a plain sequence of floats.

    Args:
        signal: Mono PCM samples, nominally in [-1, 1].
        sample_rate: Sample rate in Hz.

    Returns:
        A 1-D float64 tensor of samples.

    Raises:
        FeatureInputError: If the sample rate is not positive, the signal
            has more than one channel, or it contains NaN/Inf.

    Examples:
        >>> as_signal([0.0, 0.5, -0.5], 16000).dtype
        torch.float64
    """
    if isinstance(sample_rate, bool) or not isinstance(sample_rate, (int, np.integer)) or sample_rate <= 0:
        raise FeatureInputError(
            message=f"Sample rate must be a positive integer, got {sample_rate!r}",
            code="INVALID_INPUT",
            details={"sample_rate": repr(sample_rate)},
        )

    if isinstance(signal, torch.Tensor):
        tensor = signal.detach().to(dtype=torch.float64, device="cpu")
    else:
        tensor = torch.as_tensor(np.asarray(signal, dtype=np.float64))

    if tensor.ndim == 2 and tensor.shape[0] == 1:
        tensor = tensor[0]

    if tensor.ndim != 1:
        raise FeatureInputError(
            message=f"Signal must be mono with shape [T] or [1, T], got {list(tensor.shape)}",
            code="INVALID_INPUT",
            details={"shape": list(tensor.shape)},
        )

    if tensor.numel() and not torch.isfinite(tensor).all():
        raise FeatureInputError(
            message="Signal contains non-finite values (NaN or Inf)",
            code="INVALID_INPUT",
            details={"nan_count": int(torch.isnan(tensor).sum())},
        )

    return tensor


def seconds_to_samples(sec: float, sample_rate: int) -> int:
    """Convert a duration to a whole number of samples, rounding down.

    Examples:
        >>> seconds_to_samples(0.025, 16000)
        400
        >>> seconds_to_samples(0.025, 44100)
        1102
    """
    return int(sec * sample_rate)


def frame_signal(signal: torch.Tensor, frame_length: int, hop_length: int) -> torch.Tensor:
    """Slice a 1-D signal into overlapping frames.

    Frames start every ``hop_length`` samples; a trailing frame that would
    run past the end of the signal is dropped.

    Args:
        signal: 1-D tensor of samples.
        frame_length: Samples per frame.
        hop_length: Samples between consecutive frame starts.

    Returns:
        Tensor of shape [num_frames, frame_length] where
        ``num_frames = (T - frame_length) // hop_length + 1`` (0 when the
        signal is shorter than one frame).

    Examples:
        >>> frame_signal(torch.zeros(16000), 400, 160).shape
        torch.Size([98, 400])
    """
    frame_length = max(1, frame_length)
    hop_length = max(1, hop_length)

    if signal.numel() < frame_length:
        return signal.new_zeros((0, frame_length))

    return signal.unfold(0, frame_length, hop_length)
