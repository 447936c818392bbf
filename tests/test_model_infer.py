"""Tests for clip and waveform prediction."""

import pytest
import torch

from audioio import AudioConfig
from audioio.errors import AudioDecodeError, AudioValidationError
from model import EMOTION_LABELS, EmotionClassifier, InferenceError, predict_clip, predict_waveform

from tests.fixtures import generate_silence_wav_bytes, generate_sine_wav_bytes


@pytest.fixture
def classifier() -> EmotionClassifier:
    return EmotionClassifier(seed=0)


class TestPredictClip:
    """Tests for predict_clip."""

    def test_from_bytes(self, classifier):
        result = predict_clip(generate_sine_wav_bytes(frequency=150.0, duration_sec=1.0), classifier)

        assert result.label in EMOTION_LABELS
        assert 0.0 < result.confidence <= 1.0
        assert sum(result.probabilities) == pytest.approx(1.0)
        assert result.duration_sec == pytest.approx(1.0)
        assert result.model_name == "EmotiNet-RAVDESS v2.1.0"
        assert not result.is_trained

    def test_from_path(self, tmp_path, classifier):
        path = tmp_path / "clip.wav"
        path.write_bytes(generate_sine_wav_bytes(duration_sec=0.5, sample_rate=44100))

        result = predict_clip(path, classifier)

        assert result.duration_sec == pytest.approx(0.5, abs=0.01)

    def test_silence_is_calm_with_rules(self, classifier):
        """Silence is quiet, dark and slow, and its pitch falls back to 500 Hz: calm."""
        result = predict_clip(generate_silence_wav_bytes(), classifier)
        assert result.label == "calm"
        assert result.confidence == pytest.approx(0.5 / 1.7)

    def test_deterministic(self, classifier):
        wav_bytes = generate_sine_wav_bytes(duration_sec=0.5)
        first = predict_clip(wav_bytes, classifier)
        second = predict_clip(wav_bytes, classifier)
        assert first.probabilities == second.probabilities

    def test_invalid_audio(self, classifier):
        with pytest.raises(AudioDecodeError):
            predict_clip(b"not audio", classifier)

    def test_audio_config_applies(self, classifier):
        config = AudioConfig(max_duration_sec=0.5)
        with pytest.raises(AudioValidationError):
            predict_clip(generate_sine_wav_bytes(duration_sec=1.0), classifier, audio_config=config)


class TestPredictWaveform:
    """Tests for predict_waveform."""

    def test_batch_of_one(self, classifier, sample_waveform):
        waveform, sr = sample_waveform
        result = predict_waveform(waveform, sr, classifier)
        assert result.duration_sec == pytest.approx(2.0)

    def test_matches_flat_input(self, classifier, sample_waveform):
        waveform, sr = sample_waveform
        assert (
            predict_waveform(waveform, sr, classifier).probabilities
            == predict_waveform(waveform[0], sr, classifier).probabilities
        )

    def test_rejects_non_tensor(self, classifier):
        with pytest.raises(InferenceError) as exc_info:
            predict_waveform([0.0] * 100, 16000, classifier)
        assert exc_info.value.code == "INVALID_INPUT"

    def test_rejects_stereo(self, classifier):
        with pytest.raises(InferenceError):
            predict_waveform(torch.zeros(2, 16000), 16000, classifier)

    def test_rejects_integer_samples(self, classifier):
        with pytest.raises(InferenceError):
            predict_waveform(torch.zeros(1, 16000, dtype=torch.int16), 16000, classifier)

    def test_to_dict(self, classifier, sample_waveform):
        waveform, sr = sample_waveform
        data = predict_waveform(waveform, sr, classifier).to_dict()
        assert set(data) == {
            "label",
            "confidence",
            "probabilities",
            "scores",
            "model_name",
            "is_trained",
            "duration_sec",
        }
        assert list(data["scores"]) == list(EMOTION_LABELS)
