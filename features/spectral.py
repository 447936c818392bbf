"""Whole-clip spectral descriptors: centroid, rolloff, zero-crossing rate, RMS."""

import torch

from .config import DEFAULT_CONFIG, FeatureConfig
from .utils import SignalLike, as_signal


def magnitude_spectrum(signal: torch.Tensor) -> torch.Tensor:
    """Return the magnitude of every DFT bin of a 1-D signal.

    All N bins are returned, mirrored half included, matching a direct
    O(n^2) DFT within floating tolerance.
    """
    return torch.fft.fft(signal).abs()


def spectral_centroid(magnitude: torch.Tensor) -> float:
    """Magnitude-weighted mean bin index (0 when the spectrum is empty)."""
    total = float(magnitude.sum())
    if total <= 0:
        return 0.0
    bins = torch.arange(magnitude.numel(), dtype=magnitude.dtype)
    return float((bins * magnitude).sum()) / total


def spectral_rolloff(magnitude: torch.Tensor, percent: float = 0.85) -> int:
    """Smallest bin at which cumulative magnitude reaches ``percent`` of the total.

    Falls back to the last bin when the threshold is never reached.
    """
    if magnitude.numel() == 0:
        return 0
    threshold = percent * float(magnitude.sum())
    cumulative = torch.cumsum(magnitude, dim=0)
    reached = torch.nonzero(cumulative >= threshold)
    if reached.numel() == 0:
        return magnitude.numel() - 1
    return int(reached[0, 0])


def zero_crossing_rate(signal: torch.Tensor) -> float:
    """Fraction of adjacent sample pairs whose sign differs.

    The sign test is ``x >= 0`` versus ``x < 0``, so stepping onto or off
    an exact zero from a negative sample counts as a crossing.
    """
    if signal.numel() == 0:
        return 0.0
    non_negative = signal >= 0
    crossings = int((non_negative[1:] != non_negative[:-1]).sum())
    return crossings / signal.numel()


def rms_energy(signal: torch.Tensor) -> float:
    """Root mean square of the samples (0 for an empty signal)."""
    if signal.numel() == 0:
        return 0.0
    return float(torch.sqrt(torch.mean(signal ** 2)))


def compute_spectral_features(
    signal: SignalLike,
    sample_rate: int,
    config: FeatureConfig | None = None,
) -> list[float]:
    """Compute ``[centroid, rolloff, zero_crossing_rate, rms_energy]``.

    The whole signal is analysed at once (no framing). Centroid and rolloff
    are expressed as DFT bin indices, not Hz.

    Args:
        signal: Mono PCM samples.
        sample_rate: Sample rate in Hz.
        config: Feature configuration. If None, uses the defaults.

    Returns:
        Four floats in the order above. An empty signal yields zeros.

    Examples:
        >>> compute_spectral_features([0.0] * 1600, 16000)
        [0.0, 0.0, 0.0, 0.0]
    """
    if config is None:
        config = DEFAULT_CONFIG

    samples = as_signal(signal, sample_rate)
    if samples.numel() == 0:
        return [0.0, 0.0, 0.0, 0.0]

    magnitude = magnitude_spectrum(samples)

    return [
        spectral_centroid(magnitude),
        float(spectral_rolloff(magnitude, config.rolloff_percent)),
        zero_crossing_rate(samples),
        rms_energy(samples),
    ]
