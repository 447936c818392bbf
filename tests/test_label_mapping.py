"""Tests for label definitions and encodings."""

import pytest
import torch

from model.labels import (
    EMOTION_LABELS,
    NUM_EMOTIONS,
    RAVDESS_EMOTION_CODES,
    index_to_label,
    is_known_label,
    label_to_index,
    one_hot,
)


class TestEmotionLabels:
    """Tests for the canonical label order."""

    def test_order(self):
        """Index order is part of every saved model."""
        assert EMOTION_LABELS == (
            "neutral",
            "calm",
            "happy",
            "sad",
            "angry",
            "fearful",
            "disgust",
            "surprised",
        )
        assert NUM_EMOTIONS == 8

    def test_labels_are_lowercase_and_unique(self):
        for label in EMOTION_LABELS:
            assert label == label.lower()
        assert len(set(EMOTION_LABELS)) == len(EMOTION_LABELS)


class TestRavdessCodes:
    """Tests for RAVDESS filename codes."""

    def test_codes_follow_label_order(self):
        """Code NN maps to label NN - 1."""
        for code, label in RAVDESS_EMOTION_CODES.items():
            assert EMOTION_LABELS[int(code) - 1] == label

    def test_all_labels_covered(self):
        assert set(RAVDESS_EMOTION_CODES.values()) == set(EMOTION_LABELS)


class TestEncodings:
    """Tests for index lookup and one-hot targets."""

    @pytest.mark.parametrize("label", EMOTION_LABELS)
    def test_index_round_trip(self, label):
        assert index_to_label(label_to_index(label)) == label

    def test_unknown_label(self):
        assert label_to_index("bored") is None
        assert not is_known_label("bored")
        assert not is_known_label("Happy")

    def test_one_hot(self):
        target = one_hot(3)
        assert target.shape == (8,)
        assert target.dtype == torch.float64
        assert target.tolist() == [0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0]
