"""Prosodic descriptors: fundamental frequency, pitch variation, speaking rate.

Pitch is estimated by time-domain autocorrelation. For every candidate lag
between ``sample_rate / f0_max_hz`` and ``sample_rate / f0_min_hz`` the mean
product ``x[i] * x[i + lag]`` over the overlapping samples is computed. The
correlation is not normalised by signal energy: loudness scales every
candidate equally and silence never beats the initial correlation of zero.

Because the mean product of a periodic signal is (almost) equally large at
every multiple of its period, the estimator takes the shortest lag whose
correlation is within ``pitch_tie_tolerance`` of the best one.

Example:
    >>> import math
    >>> sine = [math.sin(2 * math.pi * 150 * i / 16000) for i in range(16000)]
    >>> f0, variation, rate = compute_prosodic_features(sine, 16000)
    >>> round(f0)
    151
"""

import torch

from .config import DEFAULT_CONFIG, FeatureConfig
from .utils import SignalLike, as_signal, frame_signal, seconds_to_samples


def pitch_lag_range(sample_rate: int, config: FeatureConfig | None = None) -> tuple[int, int]:
    """Return the inclusive ``(min_lag, max_lag)`` searched for the pitch period.

    Examples:
        >>> pitch_lag_range(16000)
        (32, 320)
    """
    if config is None:
        config = DEFAULT_CONFIG
    min_lag = max(1, int(sample_rate / config.f0_max_hz))
    max_lag = max(min_lag, int(sample_rate / config.f0_min_hz))
    return min_lag, max_lag


def _mean_product_correlation(frames: torch.Tensor, min_lag: int, max_lag: int) -> torch.Tensor:
    """Mean lagged product for each frame and lag.

    Lags that leave no overlapping samples are reported as ``-inf`` so they
    can never be selected.
    """
    num_frames, length = frames.shape
    correlation = frames.new_full((num_frames, max_lag - min_lag + 1), float("-inf"))
    for column, lag in enumerate(range(min_lag, max_lag + 1)):
        overlap = length - lag
        if overlap <= 0:
            break
        correlation[:, column] = (frames[:, :overlap] * frames[:, lag:]).mean(dim=1)
    return correlation


def estimate_f0_frames(
    frames: torch.Tensor,
    sample_rate: int,
    config: FeatureConfig | None = None,
) -> torch.Tensor:
    """Estimate the fundamental frequency of each row of ``frames``.

    Args:
        frames: Tensor of shape [num_frames, frame_length].
        sample_rate: Sample rate in Hz.
        config: Feature configuration. If None, uses the defaults.

    Returns:
        Tensor of shape [num_frames] with estimates in Hz. Rows where no lag
        correlates above zero fall back to ``sample_rate / min_lag``.
    """
    if config is None:
        config = DEFAULT_CONFIG

    min_lag, max_lag = pitch_lag_range(sample_rate, config)
    lags = torch.arange(min_lag, max_lag + 1, dtype=torch.float64)

    if frames.shape[0] == 0:
        return frames.new_zeros(0)

    correlation = _mean_product_correlation(frames, min_lag, max_lag)
    best = correlation.max(dim=1).values

    # Shortest lag within tolerance of the best correlation.
    threshold = (best * (1.0 - config.pitch_tie_tolerance)).unsqueeze(1)
    candidate = correlation >= threshold
    positions = torch.arange(lags.numel()).expand_as(candidate)
    first = torch.where(candidate, positions, torch.full_like(positions, lags.numel() - 1)).min(dim=1).values

    chosen = torch.where(best > 0, lags[first], torch.full_like(best, float(min_lag)))
    return sample_rate / chosen


def estimate_f0(
    signal: SignalLike,
    sample_rate: int,
    config: FeatureConfig | None = None,
) -> float:
    """Estimate the fundamental frequency of a whole signal in Hz."""
    samples = as_signal(signal, sample_rate)
    return float(estimate_f0_frames(samples.unsqueeze(0), sample_rate, config)[0])


def pitch_variation(
    signal: SignalLike,
    sample_rate: int,
    config: FeatureConfig | None = None,
) -> float:
    """Standard deviation of per-frame pitch estimates.

    Frames whose estimate is not strictly inside ``(f0_min_hz, f0_max_hz)``
    are discarded. Returns 0 when fewer than two frames survive.
    """
    if config is None:
        config = DEFAULT_CONFIG

    samples = as_signal(signal, sample_rate)
    frames = frame_signal(
        samples,
        seconds_to_samples(config.frame_sec, sample_rate),
        seconds_to_samples(config.hop_sec, sample_rate),
    )
    pitches = estimate_f0_frames(frames, sample_rate, config)
    pitches = pitches[(pitches > config.f0_min_hz) & (pitches < config.f0_max_hz)]

    if pitches.numel() < 2:
        return 0.0

    mean = pitches.mean()
    return float(torch.sqrt(torch.mean((pitches - mean) ** 2)))


def speaking_rate(
    signal: SignalLike,
    sample_rate: int,
    config: FeatureConfig | None = None,
) -> float:
    """Energy peaks per second, a rough proxy for syllable rate.

    The signal is cut into non-overlapping blocks of ``rate_block_sec``.
    A block counts as a peak when its RMS is strictly greater than both
    neighbours and than ``rate_peak_ratio`` times the mean block RMS.
    """
    if config is None:
        config = DEFAULT_CONFIG

    samples = as_signal(signal, sample_rate)
    block = seconds_to_samples(config.rate_block_sec, sample_rate)
    blocks = frame_signal(samples, block, block)

    if blocks.shape[0] < 3:
        return 0.0

    energies = torch.sqrt(torch.mean(blocks ** 2, dim=1))
    threshold = float(energies.mean()) * config.rate_peak_ratio

    middle = energies[1:-1]
    peaks = (middle > threshold) & (middle > energies[:-2]) & (middle > energies[2:])

    duration_sec = samples.numel() / sample_rate
    return int(peaks.sum()) / duration_sec


def compute_prosodic_features(
    signal: SignalLike,
    sample_rate: int,
    config: FeatureConfig | None = None,
) -> list[float]:
    """Compute ``[f0, pitch_variation, speaking_rate]`` for a whole clip.

    Args:
        signal: Mono PCM samples.
        sample_rate: Sample rate in Hz.
        config: Feature configuration. If None, uses the defaults.

    Returns:
        Three floats. For silence: f0 equals ``sample_rate / min_lag``,
        pitch variation and speaking rate are 0.
    """
    samples = as_signal(signal, sample_rate)
    return [
        estimate_f0(samples, sample_rate, config),
        pitch_variation(samples, sample_rate, config),
        speaking_rate(samples, sample_rate, config),
    ]
