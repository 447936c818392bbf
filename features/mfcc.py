"""Mel-frequency cepstral coefficients.

Each 25 ms frame (10 ms hop) goes through:

1. a Hamming window,
2. the magnitude of its DFT,
3. a bank of triangular filters spaced linearly on the mel scale from 0 Hz
   to Nyquist, followed by ``log(energy + log_floor)``,
4. a type-II style DCT over the log energies, keeping the first
   ``num_cepstral`` outputs.

Example:
    >>> import torch
    >>> cepstra = compute_mfcc(torch.randn(16000) * 0.1, 16000)
    >>> len(cepstra), len(cepstra[0])
    (98, 13)
"""

import math
from typing import Sequence, Union

import torch

from .config import DEFAULT_CONFIG, FeatureConfig
from .utils import SignalLike, as_signal, frame_signal, seconds_to_samples


Frequency = Union[float, torch.Tensor]


def hz_to_mel(hz: Frequency) -> Frequency:
    """Convert Hz to mel: ``2595 * log10(1 + hz / 700)``.

    Examples:
        >>> round(hz_to_mel(1000.0))
        1000
    """
    if isinstance(hz, torch.Tensor):
        return 2595.0 * torch.log10(1.0 + hz / 700.0)
    return 2595.0 * math.log10(1.0 + hz / 700.0)


def mel_to_hz(mel: Frequency) -> Frequency:
    """Convert mel to Hz: ``700 * (10 ** (mel / 2595) - 1)``."""
    if isinstance(mel, torch.Tensor):
        return 700.0 * (torch.pow(10.0, mel / 2595.0) - 1.0)
    return 700.0 * (10.0 ** (mel / 2595.0) - 1.0)


def hamming_window(length: int) -> torch.Tensor:
    """Hamming window ``0.54 - 0.46 * cos(2 * pi * i / (length - 1))``."""
    if length <= 1:
        return torch.ones(max(length, 0), dtype=torch.float64)
    i = torch.arange(length, dtype=torch.float64)
    return 0.54 - 0.46 * torch.cos(2.0 * math.pi * i / (length - 1))


def mel_filter_edges(sample_rate: int, num_filters: int) -> list[float]:
    """Return the ``num_filters + 2`` filter edge frequencies in Hz.

    Filter ``i`` rises from edge ``i`` to edge ``i + 1`` and falls back to
    zero at edge ``i + 2``.
    """
    low = hz_to_mel(0.0)
    high = hz_to_mel(sample_rate / 2)
    step = (high - low) / (num_filters + 1)
    return [mel_to_hz(low + k * step) for k in range(num_filters + 2)]


def mel_filterbank(n_fft: int, sample_rate: int, num_filters: int = 26) -> torch.Tensor:
    """Triangular mel filter weights over the lower half of an ``n_fft`` DFT.

    Args:
        n_fft: DFT length (the frame length).
        sample_rate: Sample rate in Hz.
        num_filters: Number of triangular filters.

    Returns:
        Tensor of shape [num_filters, ceil(n_fft / 2)]. Bin ``j`` sits at
        ``j * sample_rate / n_fft`` Hz.
    """
    num_bins = (n_fft + 1) // 2
    freqs = torch.arange(num_bins, dtype=torch.float64) * sample_rate / n_fft
    edges = mel_filter_edges(sample_rate, num_filters)

    weights = torch.zeros((num_filters, num_bins), dtype=torch.float64)
    for i in range(num_filters):
        start, center, end = edges[i], edges[i + 1], edges[i + 2]
        rising = (freqs >= start) & (freqs <= center)
        falling = (freqs > center) & (freqs <= end)
        weights[i] = torch.where(rising, (freqs - start) / (center - start), weights[i])
        weights[i] = torch.where(falling, (end - freqs) / (end - center), weights[i])
    return weights


def dct_matrix(num_filters: int, num_coefficients: int) -> torch.Tensor:
    """Unscaled DCT-II basis: ``cos(pi * k * (n + 0.5) / num_filters)``.

    Returns:
        Tensor of shape [num_coefficients, num_filters].
    """
    k = torch.arange(num_coefficients, dtype=torch.float64).unsqueeze(1)
    n = torch.arange(num_filters, dtype=torch.float64).unsqueeze(0)
    return torch.cos(math.pi * k * (n + 0.5) / num_filters)


def mfcc_frames(
    signal: SignalLike,
    sample_rate: int,
    config: FeatureConfig | None = None,
) -> torch.Tensor:
    """Compute cepstral coefficients as a tensor of shape [frames, num_cepstral]."""
    if config is None:
        config = DEFAULT_CONFIG

    samples = as_signal(signal, sample_rate)
    frame_length = seconds_to_samples(config.frame_sec, sample_rate)
    frames = frame_signal(
        samples,
        frame_length,
        seconds_to_samples(config.hop_sec, sample_rate),
    )

    if frames.shape[0] == 0:
        return torch.zeros((0, config.num_cepstral), dtype=torch.float64)

    frame_length = frames.shape[1]
    windowed = frames * hamming_window(frame_length)
    filterbank = mel_filterbank(frame_length, sample_rate, config.num_mel_filters)
    magnitude = torch.fft.fft(windowed, dim=1).abs()[:, : filterbank.shape[1]]

    log_energies = torch.log(magnitude @ filterbank.T + config.log_floor)
    return log_energies @ dct_matrix(config.num_mel_filters, config.num_cepstral).T


def compute_mfcc(
    signal: SignalLike,
    sample_rate: int,
    config: FeatureConfig | None = None,
) -> list[list[float]]:
    """Compute one cepstral vector per 25 ms frame.

    Args:
        signal: Mono PCM samples.
        sample_rate: Sample rate in Hz.
        config: Feature configuration. If None, uses the defaults.

    Returns:
        List of ``num_cepstral``-long lists. Empty when the signal is shorter
        than one frame.
    """
    return mfcc_frames(signal, sample_rate, config).tolist()


def average_cepstra(
    cepstra: Union[torch.Tensor, Sequence[Sequence[float]]],
    num_cepstral: int = 13,
) -> list[float]:
    """Time-average a sequence of cepstral vectors.

    An empty sequence averages to a zero vector so prediction stays
    available for clips shorter than one frame.
    """
    frames = torch.as_tensor(cepstra, dtype=torch.float64)
    if frames.numel() == 0:
        return [0.0] * num_cepstral
    return frames.reshape(-1, frames.shape[-1]).mean(dim=0).tolist()
