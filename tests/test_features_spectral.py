"""Tests for features.spectral module."""

import math

import pytest
import torch

from features import compute_spectral_features
from features.spectral import (
    magnitude_spectrum,
    rms_energy,
    spectral_centroid,
    spectral_rolloff,
    zero_crossing_rate,
)

from tests.fixtures import sine_samples


class TestComputeSpectralFeatures:
    """Tests for compute_spectral_features."""

    def test_silence_gives_zeros(self, silence):
        """Digital silence has no energy, no crossings and an empty spectrum."""
        signal, sr = silence
        assert compute_spectral_features(signal, sr) == [0.0, 0.0, 0.0, 0.0]

    def test_empty_signal_gives_zeros(self):
        """An empty signal is not an error."""
        assert compute_spectral_features([], 16000) == [0.0, 0.0, 0.0, 0.0]

    def test_sine_rms_and_zcr(self, sine_150hz):
        """A 0.5-amplitude 150 Hz sine has RMS 0.5/sqrt(2) and ~300 crossings per second."""
        signal, sr = sine_150hz
        centroid, rolloff, zcr, rms = compute_spectral_features(signal, sr)

        assert rms == pytest.approx(0.5 / math.sqrt(2), abs=1e-3)
        assert zcr == pytest.approx(300 / 16000, abs=1e-3)

    def test_sine_centroid_and_rolloff_are_bin_indices(self):
        """The full mirrored spectrum puts the centroid mid-way and rolloff on the mirror bin."""
        signal = torch.from_numpy(sine_samples(150.0, 1.0, 16000, 0.5))
        centroid, rolloff, _, _ = compute_spectral_features(signal, 16000)

        # Energy sits in bins 150 and 16000 - 150, in equal parts.
        assert centroid == pytest.approx(8000.0, rel=1e-6)
        assert rolloff == 15850.0

    def test_returns_four_floats(self, noise_signal):
        """Output is four Python floats in a fixed order."""
        signal, sr = noise_signal
        features = compute_spectral_features(signal, sr)

        assert len(features) == 4
        assert all(isinstance(v, float) for v in features)

    def test_centroid_and_rolloff_invariant_to_scaling(self, noise_signal):
        """Scaling the signal by 2 leaves centroid (within tolerance) and rolloff (exactly) unchanged."""
        signal, sr = noise_signal
        centroid, rolloff, zcr, rms = compute_spectral_features(signal, sr)
        centroid2, rolloff2, zcr2, rms2 = compute_spectral_features(signal * 2.0, sr)

        assert centroid2 == pytest.approx(centroid, rel=1e-9)
        assert rolloff2 == rolloff
        assert zcr2 == zcr
        assert rms2 == pytest.approx(2 * rms, rel=1e-12)

    def test_accepts_batch_of_one(self, noise_signal):
        """A [1, T] tensor is treated as mono."""
        signal, sr = noise_signal
        assert compute_spectral_features(signal.unsqueeze(0), sr) == compute_spectral_features(signal, sr)


class TestSpectralHelpers:
    """Tests for the individual spectral descriptors."""

    def test_magnitude_spectrum_matches_direct_dft(self):
        """FFT magnitudes match a direct DFT on a short signal."""
        signal = torch.tensor([0.1, -0.4, 0.25, 0.0, 0.7, -0.2, 0.05], dtype=torch.float64)
        n = signal.numel()
        expected = []
        for k in range(n):
            re = sum(float(signal[t]) * math.cos(2 * math.pi * k * t / n) for t in range(n))
            im = -sum(float(signal[t]) * math.sin(2 * math.pi * k * t / n) for t in range(n))
            expected.append(math.hypot(re, im))

        assert magnitude_spectrum(signal).tolist() == pytest.approx(expected, abs=1e-12)

    def test_centroid_of_single_bin(self):
        """All magnitude in one bin puts the centroid on that bin."""
        magnitude = torch.zeros(10, dtype=torch.float64)
        magnitude[3] = 2.0
        assert spectral_centroid(magnitude) == 3.0

    def test_rolloff_threshold(self):
        """Rolloff is the first bin where the cumulative sum reaches the share."""
        magnitude = torch.tensor([1.0, 1.0, 1.0, 1.0], dtype=torch.float64)
        assert spectral_rolloff(magnitude, 0.5) == 1
        assert spectral_rolloff(magnitude, 0.85) == 3

    def test_zcr_counts_zero_as_non_negative(self):
        """Moving from a negative sample onto 0.0 counts as a crossing."""
        signal = torch.tensor([-1.0, 0.0, 1.0, -1.0], dtype=torch.float64)
        assert zero_crossing_rate(signal) == pytest.approx(2 / 4)

    def test_rms_of_constant(self):
        """RMS of a constant signal is its absolute value."""
        assert rms_energy(torch.full((100,), -0.25, dtype=torch.float64)) == pytest.approx(0.25)
