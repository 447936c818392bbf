"""Configuration and small tensor helpers for audio I/O."""

from dataclasses import dataclass

import torch

from .errors import AudioConfigError


@dataclass
class AudioConfig:
    """Configuration for audio loading, validation, and preprocessing.

    Attributes:
        min_duration_sec: Minimum allowed audio duration in seconds.
        max_duration_sec: Maximum allowed audio duration in seconds.
        target_sample_rate: Sample rate after preprocessing, or None to keep
            the decoded rate.
        allow_stereo: Whether to allow stereo (2-channel) audio.
        allow_multi_channel: Whether to allow >2 channels.
        reject_silence: Whether to reject near-silent audio. Off by default
            so silent clips still get a (rule-based) prediction.
        silence_rms_threshold: RMS threshold below which audio is considered silent.
        to_mono: Whether to convert to mono during preprocessing.
        normalize: Whether to peak-normalize during preprocessing.
        peak_target: Target peak amplitude for normalization.
    """

    min_duration_sec: float = 0.0
    max_duration_sec: float = 600.0
    target_sample_rate: int | None = 16000
    allow_stereo: bool = True
    allow_multi_channel: bool = False
    reject_silence: bool = False
    silence_rms_threshold: float = 1e-4
    to_mono: bool = True
    normalize: bool = False
    peak_target: float = 0.95

    def __post_init__(self) -> None:
        if self.min_duration_sec < 0 or self.max_duration_sec <= 0:
            raise AudioConfigError(
                message="Duration bounds must be non-negative and max_duration_sec positive",
                code="INVALID_CONFIG",
                details={"min_duration_sec": self.min_duration_sec, "max_duration_sec": self.max_duration_sec},
            )
        if self.min_duration_sec > self.max_duration_sec:
            raise AudioConfigError(
                message=f"min_duration_sec ({self.min_duration_sec}) exceeds max_duration_sec ({self.max_duration_sec})",
                code="INVALID_CONFIG",
                details={"min_duration_sec": self.min_duration_sec, "max_duration_sec": self.max_duration_sec},
            )
        if self.target_sample_rate is not None and self.target_sample_rate <= 0:
            raise AudioConfigError(
                message=f"target_sample_rate must be positive, got {self.target_sample_rate}",
                code="INVALID_CONFIG",
                details={"target_sample_rate": self.target_sample_rate},
            )
        if not 0.0 < self.peak_target <= 1.0:
            raise AudioConfigError(
                message=f"peak_target must be in (0, 1], got {self.peak_target}",
                code="INVALID_CONFIG",
                details={"peak_target": self.peak_target},
            )


def compute_duration_sec(num_samples: int, sample_rate: int) -> float:
    """Duration in seconds, or 0.0 for a non-positive rate.

    Examples:
        >>> compute_duration_sec(8000, 16000)
        0.5
    """
    if sample_rate <= 0:
        return 0.0
    return num_samples / sample_rate


def rms(waveform: torch.Tensor) -> float:
    """Root mean square over all channels and samples; 0.0 when empty."""
    if waveform.numel() == 0:
        return 0.0
    return float(torch.sqrt(torch.mean(waveform.double() ** 2)))


def ensure_float32_torch(waveform: torch.Tensor) -> torch.Tensor:
    """Return ``waveform`` as a float32 tensor, converting arrays and lists."""
    if not isinstance(waveform, torch.Tensor):
        waveform = torch.as_tensor(waveform)
    return waveform.to(dtype=torch.float32)


def safe_peak_normalize(
    waveform: torch.Tensor,
    peak_target: float = 0.95,
    eps: float = 1e-8,
) -> torch.Tensor:
    """Scale so the largest absolute sample equals ``peak_target``.

    Near-silent input (peak below ``eps``) is returned unchanged.

    Examples:
        >>> import torch
        >>> w = torch.tensor([[0.5, -0.25, 0.1]])
        >>> float(safe_peak_normalize(w, peak_target=1.0).abs().max())
        1.0
    """
    waveform = ensure_float32_torch(waveform)
    peak = waveform.abs().max() if waveform.numel() else torch.tensor(0.0)

    if peak < eps:
        return waveform

    return waveform * (peak_target / peak)


def clamp_finite(waveform: torch.Tensor, min_val: float = -1.0, max_val: float = 1.0) -> torch.Tensor:
    """Replace NaN/Inf with zero and clamp to ``[min_val, max_val]``."""
    waveform = torch.where(torch.isfinite(waveform), waveform, torch.zeros_like(waveform))
    return torch.clamp(waveform, min_val, max_val)
