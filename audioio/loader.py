"""Audio loading functions for WAV files."""

import io
import logging
from pathlib import Path
from typing import BinaryIO, Union

import numpy as np
import soundfile as sf
import torch

from .errors import AudioDecodeError


logger = logging.getLogger(__name__)


def load_wav(path: str | Path) -> tuple[torch.Tensor, int]:
    """Load a WAV audio file from disk.

    Args:
        path: Path to the WAV file.

    Returns:
        Tuple of (waveform, sample_rate) where waveform is a float32 tensor
        with shape [channels, num_samples] and values in [-1, 1].

    Raises:
        AudioDecodeError: If file cannot be read or is not a valid WAV.

    Examples:
        >>> waveform, sr = load_wav("03-01-04-01-01-01-01.wav")
        >>> waveform.shape  # [channels, samples]
        torch.Size([1, 56057])
    """
    path = Path(path)

    if not path.exists():
        raise AudioDecodeError(
            message=f"Audio file not found: {path}",
            code="FILE_NOT_FOUND",
            details={"path": str(path)},
        )

    if path.stat().st_size == 0:
        raise AudioDecodeError(
            message=f"Audio file is empty: {path}",
            code="EMPTY_FILE",
            details={"path": str(path)},
        )

    return _decode(str(path), source=str(path))


def load_wav_bytes(data: bytes) -> tuple[torch.Tensor, int]:
    """Load WAV audio from raw bytes, e.g. an HTTP upload.

    Args:
        data: Raw bytes of a WAV file.

    Returns:
        Tuple of (waveform, sample_rate) where waveform is a float32 tensor
        with shape [channels, num_samples].

    Raises:
        AudioDecodeError: If bytes cannot be decoded as WAV.
    """
    if not data:
        raise AudioDecodeError(
            message="Audio data is empty",
            code="EMPTY_FILE",
            details={"bytes_length": 0},
        )

    return _decode(io.BytesIO(data), source=f"bytes[{len(data)}]")


def _decode(
    file: Union[str, BinaryIO],
    source: str,
) -> tuple[torch.Tensor, int]:
    try:
        # soundfile returns (samples, channels); always_2d keeps mono as (samples, 1)
        data, sample_rate = sf.read(file, dtype="float32", always_2d=True)
    except Exception as e:
        raise AudioDecodeError(
            message=f"Failed to decode WAV from {source}: {e}",
            code="INVALID_WAV",
            details={"source": source, "error": str(e)},
        ) from e

    if data.size == 0:
        raise AudioDecodeError(
            message="Audio contains no samples",
            code="EMPTY_AUDIO",
            details={"source": source},
        )

    # (samples, channels) -> (channels, samples)
    waveform = torch.from_numpy(np.ascontiguousarray(data.T))
    logger.debug(
        "Decoded %s: channels=%d samples=%d sample_rate=%d",
        source,
        waveform.shape[0],
        waveform.shape[1],
        sample_rate,
    )
    return waveform, int(sample_rate)
