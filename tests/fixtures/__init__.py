"""Test fixtures for audio and corpus tests.

WAV files are generated in memory; no binary files are committed.
"""

import io
from pathlib import Path

import numpy as np
import soundfile as sf


def sine_samples(
    frequency: float = 150.0,
    duration_sec: float = 1.0,
    sample_rate: int = 16000,
    amplitude: float = 0.5,
) -> np.ndarray:
    """Samples of ``amplitude * sin(2 pi f n / sr)`` for n = 0 .. N-1, float64."""
    n = np.arange(int(sample_rate * duration_sec))
    return amplitude * np.sin(2 * np.pi * frequency * n / sample_rate)


def _to_wav_bytes(signal: np.ndarray, sample_rate: int, channels: int, subtype: str) -> bytes:
    if channels > 1:
        signal = np.column_stack([signal] * channels)

    buffer = io.BytesIO()
    sf.write(buffer, signal, sample_rate, format="WAV", subtype=subtype)
    return buffer.getvalue()


def generate_sine_wav_bytes(
    frequency: float = 440.0,
    duration_sec: float = 1.0,
    sample_rate: int = 16000,
    amplitude: float = 0.5,
    channels: int = 1,
    subtype: str = "FLOAT",
) -> bytes:
    """Generate a sine wave WAV file as bytes.

    Args:
        frequency: Sine wave frequency in Hz.
        duration_sec: Duration in seconds.
        sample_rate: Sample rate in Hz.
        amplitude: Amplitude (0.0 to 1.0).
        channels: Number of channels (1=mono, 2=stereo).
        subtype: soundfile subtype, e.g. "FLOAT" or "PCM_16".
    """
    signal = sine_samples(frequency, duration_sec, sample_rate, amplitude).astype(np.float32)
    return _to_wav_bytes(signal, sample_rate, channels, subtype)


def generate_silence_wav_bytes(
    duration_sec: float = 1.0,
    sample_rate: int = 16000,
    channels: int = 1,
) -> bytes:
    """Generate a silent (all zeros) WAV file as bytes."""
    signal = np.zeros(int(sample_rate * duration_sec), dtype=np.float32)
    return _to_wav_bytes(signal, sample_rate, channels, "FLOAT")


def generate_noise_wav_bytes(
    duration_sec: float = 1.0,
    sample_rate: int = 16000,
    amplitude: float = 0.3,
    channels: int = 1,
    seed: int = 42,
) -> bytes:
    """Generate uniform white noise WAV file as bytes (seeded)."""
    rng = np.random.default_rng(seed)
    signal = (amplitude * rng.uniform(-1, 1, int(sample_rate * duration_sec))).astype(np.float32)
    return _to_wav_bytes(signal, sample_rate, channels, "FLOAT")


def ravdess_name(emotion: str = "05", actor: int = 1, intensity: str = "01", repetition: str = "01") -> str:
    """Build a RAVDESS file name, e.g. ``03-01-05-01-01-01-01.wav``."""
    return f"03-01-{emotion}-{intensity}-01-{repetition}-{actor:02d}.wav"


def write_ravdess_tree(root: Path, files: dict[str, bytes]) -> list[Path]:
    """Write ``{file_name: wav_bytes}`` under ``root/Actor_NN/`` folders.

    The actor folder is taken from the last field of each name; names that
    do not parse go directly under ``root``.
    """
    paths = []
    for name, data in files.items():
        fields = name[:-4].split("-")
        folder = root / f"Actor_{fields[-1].zfill(2)}" if len(fields) == 7 else root
        folder.mkdir(parents=True, exist_ok=True)
        path = folder / name
        path.write_bytes(data)
        paths.append(path)
    return paths
