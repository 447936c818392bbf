"""Audio I/O: decode WAV audio into the mono PCM the feature extractor reads.

It handles:
- Loading WAV audio from files or bytes (soundfile)
- Validating audio properties (duration, channels, sample rate)
- Preprocessing to mono float32 at the target rate (torchaudio resampling)

Example:
    >>> from audioio import load_validate_preprocess, AudioConfig
    >>> waveform, sr = load_validate_preprocess("speech.wav", AudioConfig())
    >>> waveform.shape  # [1, num_samples]
    torch.Size([1, 16000])
    >>> sr
    16000
"""

from pathlib import Path
from typing import Union

import torch

from .errors import (
    AudioConfigError,
    AudioDecodeError,
    AudioIOError,
    AudioPreprocessError,
    AudioValidationError,
)
from .loader import load_wav, load_wav_bytes
from .preprocess import preprocess_audio
from .utils import (
    AudioConfig,
    clamp_finite,
    compute_duration_sec,
    ensure_float32_torch,
    rms,
    safe_peak_normalize,
)
from .validate import validate_wav


__all__ = [
    "load_validate_preprocess",
    "AudioConfig",
    # Errors
    "AudioIOError",
    "AudioConfigError",
    "AudioDecodeError",
    "AudioValidationError",
    "AudioPreprocessError",
    # Steps
    "load_wav",
    "load_wav_bytes",
    "validate_wav",
    "preprocess_audio",
    # Utils
    "compute_duration_sec",
    "rms",
    "ensure_float32_torch",
    "safe_peak_normalize",
    "clamp_finite",
]


def load_validate_preprocess(
    path_or_bytes: Union[str, Path, bytes],
    config: AudioConfig | None = None,
) -> tuple[torch.Tensor, int]:
    """Load, validate, and preprocess audio in one step.

    Args:
        path_or_bytes: Either a file path (str/Path) or raw WAV bytes.
        config: Audio configuration. If None, uses default AudioConfig().

    Returns:
        Tuple of (waveform, sample_rate): a float32 tensor with shape [1, T]
        and the rate it is sampled at.

    Raises:
        AudioDecodeError: If audio cannot be loaded/decoded.
        AudioValidationError: If audio fails validation.
        AudioPreprocessError: If preprocessing fails.

    Examples:
        >>> with open("speech.wav", "rb") as f:
        ...     waveform, sr = load_validate_preprocess(f.read())

        >>> config = AudioConfig(target_sample_rate=None, max_duration_sec=10.0)
        >>> waveform, sr = load_validate_preprocess("speech.wav", config)
    """
    if config is None:
        config = AudioConfig()

    if isinstance(path_or_bytes, (bytes, bytearray)):
        waveform, sample_rate = load_wav_bytes(bytes(path_or_bytes))
    else:
        waveform, sample_rate = load_wav(path_or_bytes)

    validate_wav(
        waveform=waveform,
        sample_rate=sample_rate,
        min_duration_sec=config.min_duration_sec,
        max_duration_sec=config.max_duration_sec,
        allow_stereo=config.allow_stereo,
        allow_multi_channel=config.allow_multi_channel,
        reject_silence=config.reject_silence,
        silence_rms_threshold=config.silence_rms_threshold,
    )

    return preprocess_audio(
        waveform=waveform,
        sample_rate=sample_rate,
        target_sample_rate=config.target_sample_rate,
        to_mono=config.to_mono,
        normalize=config.normalize,
        peak_target=config.peak_target,
    )
