"""Tests for the assembled feature vector and input conversion."""

import math

import numpy as np
import pytest
import torch

from features import (
    FEATURE_NAMES,
    FEATURE_SIZE,
    FeatureConfig,
    FeatureConfigError,
    FeatureInputError,
    FeatureVector,
    as_signal,
    extract_feature_vector,
    frame_signal,
)


class TestFeatureNames:
    """Tests for the fixed feature order."""

    def test_size(self):
        assert FEATURE_SIZE == 20
        assert len(FEATURE_NAMES) == 20

    def test_order(self):
        assert FEATURE_NAMES[:7] == (
            "spectral_centroid",
            "spectral_rolloff",
            "zero_crossing_rate",
            "rms_energy",
            "f0",
            "pitch_variation",
            "speaking_rate",
        )
        assert FEATURE_NAMES[7:] == tuple(f"mfcc_{i}" for i in range(13))


class TestExtractFeatureVector:
    """Tests for extract_feature_vector."""

    def test_silence(self, silence):
        """Silence: zero energy, pitch fallback, cepstra at the log floor."""
        signal, sr = silence
        vector = extract_feature_vector(signal, sr)
        values = vector.to_list()

        assert len(values) == 20
        assert vector.rms_energy == 0.0
        assert vector.f0 == pytest.approx(500.0)
        assert vector.num_frames == 98
        assert vector.mfcc[0] == pytest.approx(26 * math.log(1e-10), rel=1e-9)
        assert vector.mfcc[1:] == pytest.approx([0.0] * 12, abs=1e-6)

    def test_named_matches_order(self, sine_150hz):
        signal, sr = sine_150hz
        vector = extract_feature_vector(signal, sr)
        named = vector.named()

        assert list(named) == list(FEATURE_NAMES)
        assert list(named.values()) == vector.to_list()

    def test_as_tensor(self, noise_signal):
        signal, sr = noise_signal
        tensor = extract_feature_vector(signal, sr).as_tensor()
        assert tensor.shape == (20,)
        assert tensor.dtype == torch.float64
        assert torch.isfinite(tensor).all()

    def test_sine_values(self, sine_150hz):
        """Pitch and energy of a sine land where expected."""
        signal, sr = sine_150hz
        vector = extract_feature_vector(signal, sr)
        assert vector.f0 == pytest.approx(150.0, abs=5.0)
        assert vector.rms_energy == pytest.approx(0.3536, abs=1e-3)

    def test_short_clip_keeps_full_width(self):
        """A clip shorter than one frame still yields 20 values with zero cepstra."""
        vector = extract_feature_vector(torch.zeros(100, dtype=torch.float64), 16000)
        assert vector.num_frames == 0
        assert vector.mfcc == [0.0] * 13
        assert len(vector.to_list()) == 20

    def test_numpy_and_list_inputs(self, noise_signal):
        signal, sr = noise_signal
        from_tensor = extract_feature_vector(signal, sr).to_list()
        from_numpy = extract_feature_vector(signal.numpy(), sr).to_list()
        assert from_numpy == pytest.approx(from_tensor)

    def test_default_vector_construction(self):
        vector = FeatureVector(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
        assert vector.mfcc == [0.0] * 13


class TestAsSignal:
    """Tests for as_signal."""

    def test_batch_of_one_flattened(self):
        assert as_signal(torch.zeros(1, 10), 16000).shape == (10,)

    def test_rejects_stereo(self):
        with pytest.raises(FeatureInputError) as exc_info:
            as_signal(torch.zeros(2, 10), 16000)
        assert exc_info.value.code == "INVALID_INPUT"

    def test_rejects_nan(self):
        with pytest.raises(FeatureInputError):
            as_signal(np.array([0.0, np.nan, 0.1]), 16000)

    @pytest.mark.parametrize("sample_rate", [0, -16000, 16000.0, True])
    def test_rejects_bad_sample_rate(self, sample_rate):
        with pytest.raises(FeatureInputError):
            as_signal([0.0, 0.1], sample_rate)


class TestFrameSignal:
    """Tests for frame_signal."""

    def test_frame_count(self):
        assert frame_signal(torch.zeros(16000), 400, 160).shape == (98, 400)

    def test_exactly_one_frame(self):
        assert frame_signal(torch.zeros(400), 400, 160).shape == (1, 400)

    def test_shorter_than_frame(self):
        assert frame_signal(torch.zeros(399), 400, 160).shape == (0, 400)


class TestFeatureConfig:
    """Tests for FeatureConfig validation."""

    def test_defaults(self):
        config = FeatureConfig()
        assert config.num_mel_filters == 26
        assert config.num_cepstral == 13
        assert config.rolloff_percent == 0.85

    def test_hop_longer_than_frame(self):
        with pytest.raises(FeatureConfigError) as exc_info:
            FeatureConfig(hop_sec=0.05)
        assert exc_info.value.code == "INVALID_CONFIG"

    def test_pitch_range_inverted(self):
        with pytest.raises(FeatureConfigError):
            FeatureConfig(f0_min_hz=500.0, f0_max_hz=50.0)

    def test_too_many_cepstra(self):
        with pytest.raises(FeatureConfigError):
            FeatureConfig(num_cepstral=30)
