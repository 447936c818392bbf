"""Pytest configuration and fixtures for the test suite."""

import sys
from pathlib import Path

import pytest
import torch

# Ensure project root is in path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tests.fixtures import sine_samples


@pytest.fixture
def sine_150hz() -> tuple[torch.Tensor, int]:
    """One second of a 150 Hz sine at 16 kHz, amplitude 0.5, quantized to 16 bits.

    Returns:
        Tuple of (signal, sample_rate) where signal is a 1-D float64 tensor.
    """
    sample_rate = 16000
    samples = sine_samples(150.0, 1.0, sample_rate, 0.5)
    quantized = torch.round(torch.from_numpy(samples) * 32767) / 32767
    return quantized.to(torch.float64), sample_rate


@pytest.fixture
def silence() -> tuple[torch.Tensor, int]:
    """One second of digital silence at 16 kHz."""
    return torch.zeros(16000, dtype=torch.float64), 16000


@pytest.fixture
def noise_signal() -> tuple[torch.Tensor, int]:
    """One second of seeded Gaussian noise at 16 kHz, std 0.1."""
    generator = torch.Generator().manual_seed(0)
    return torch.randn(16000, generator=generator, dtype=torch.float64) * 0.1, 16000


@pytest.fixture
def sample_waveform() -> tuple[torch.Tensor, int]:
    """Two seconds of a four-tone mix shaped [1, T], float32, at 16 kHz."""
    sample_rate = 16000
    t = torch.arange(2 * sample_rate, dtype=torch.float32) / sample_rate
    waveform = torch.zeros_like(t)
    for freq in [100, 200, 300, 400]:
        waveform += torch.sin(2 * torch.pi * freq * t) / 4
    return waveform.unsqueeze(0), sample_rate

