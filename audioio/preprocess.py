"""Audio preprocessing functions."""

import torch
import torchaudio.transforms as T

from .errors import AudioPreprocessError
from .utils import clamp_finite, ensure_float32_torch, safe_peak_normalize


def preprocess_audio(
    waveform: torch.Tensor,
    sample_rate: int,
    target_sample_rate: int | None = 16000,
    to_mono: bool = True,
    normalize: bool = False,
    peak_target: float = 0.95,
    eps: float = 1e-8,
) -> tuple[torch.Tensor, int]:
    """Bring decoded audio into the form the feature extractor expects.

    Steps, in order: float32 cast, stereo to mono average, optional
    resampling, optional peak normalization, non-finite removal and
    clamping to [-1, 1].

    Peak normalization is off by default. RMS energy feeds the rule-based
    fallback directly, so rescaling every clip to the same peak would hide
    loudness.

    Args:
        waveform: Input audio tensor with shape [channels, samples].
        sample_rate: Input sample rate in Hz.
        target_sample_rate: Output sample rate in Hz, or None to keep the
            input rate.
        to_mono: Whether to average stereo down to one channel.
        normalize: Whether to apply peak normalization.
        peak_target: Target peak amplitude for normalization (0.0 to 1.0).
        eps: Peaks below this are left untouched by normalization.

    Returns:
        Tuple of (processed_waveform, sample_rate) where processed_waveform
        has shape [1, T] (when to_mono) and dtype float32.

    Raises:
        AudioPreprocessError: If the shape or channel count is unsupported,
            or resampling fails.

    Examples:
        >>> import torch
        >>> waveform = torch.randn(2, 32000) * 0.1  # Stereo, 32kHz
        >>> processed, sr = preprocess_audio(waveform, 32000)
        >>> processed.shape
        torch.Size([1, 16000])
        >>> sr
        16000
    """
    waveform = ensure_float32_torch(waveform)

    if waveform.ndim != 2:
        raise AudioPreprocessError(
            message=f"Expected 2D tensor [channels, samples], got shape {list(waveform.shape)}",
            code="INVALID_SHAPE",
            details={"shape": list(waveform.shape)},
        )

    num_channels = waveform.shape[0]

    if to_mono and num_channels > 1:
        if num_channels > 2:
            raise AudioPreprocessError(
                message=f"Cannot convert {num_channels}-channel audio to mono. Only mono and stereo supported.",
                code="UNSUPPORTED_CHANNELS",
                details={"channels": num_channels},
            )
        waveform = waveform.mean(dim=0, keepdim=True)

    if target_sample_rate is None:
        target_sample_rate = sample_rate

    if sample_rate != target_sample_rate:
        try:
            resampler = T.Resample(
                orig_freq=sample_rate,
                new_freq=target_sample_rate,
                dtype=waveform.dtype,
            )
            waveform = resampler(waveform)
        except Exception as e:
            raise AudioPreprocessError(
                message=f"Resampling failed: {e}",
                code="RESAMPLE_FAILED",
                details={
                    "original_sr": sample_rate,
                    "target_sr": target_sample_rate,
                    "error": str(e),
                },
            ) from e

    if normalize:
        waveform = safe_peak_normalize(waveform, peak_target=peak_target, eps=eps)

    waveform = clamp_finite(waveform, min_val=-1.0, max_val=1.0)

    return waveform.to(dtype=torch.float32), target_sample_rate
