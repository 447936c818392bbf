"""Tests for the rule-based fallback scorer."""

import pytest

from model.labels import EMOTION_LABELS
from model.rules import (
    BASE_SCORES,
    DEFAULT_RULES,
    ProsodicView,
    matching_rules,
    rule_probabilities,
    rule_scores,
)


def make_vector(
    centroid: float = 0.45,
    rolloff: float = 0.0,
    zcr: float = 0.05,
    rms: float = 0.07,
    f0: float = 180.0,
    variation: float = 20.0,
    rate: float = 3.0,
) -> list[float]:
    """A 20-wide vector whose defaults trigger no rule."""
    return [centroid, rolloff, zcr, rms, f0, variation, rate] + [0.0] * 13


class TestRuleScores:
    """Tests for rule_scores and rule_probabilities."""

    def test_no_rule_gives_base_distribution(self):
        """With no matching rule, probabilities are the normalised base scores."""
        vector = make_vector()
        assert matching_rules(vector) == []

        total = sum(BASE_SCORES.values())
        expected = [BASE_SCORES[label] / total for label in EMOTION_LABELS]
        assert rule_probabilities(vector) == pytest.approx(expected)
        # Neutral carries the highest base score.
        assert max(range(8), key=rule_probabilities(vector).__getitem__) == 0

    def test_probabilities_sum_to_one(self):
        for vector in (make_vector(), make_vector(rms=0.2, variation=80.0, f0=260.0), [0.0] * 20):
            assert sum(rule_probabilities(vector)) == pytest.approx(1.0)

    def test_quiet_low_pitch_is_sad(self):
        """A quiet, low, dark, slow vector scores sad at 0.7 out of 1.7."""
        probabilities = rule_probabilities([0.0] * 20)
        sad = EMOTION_LABELS.index("sad")

        assert probabilities[sad] == pytest.approx(0.7 / 1.7)
        assert max(range(8), key=probabilities.__getitem__) == sad

    def test_energetic_high_pitch(self):
        """Loud, animated and high: surprised and happy tie, both above the rest."""
        scores = rule_scores(make_vector(centroid=0.7, rms=0.2, f0=250.0, variation=80.0, rate=6.0))
        assert scores["happy"] == pytest.approx(0.1 + 0.2 + 0.2 + 0.1)
        assert scores["surprised"] == pytest.approx(0.1 + 0.3 + 0.1 + 0.1)
        assert scores["angry"] == pytest.approx(0.1)

    def test_energetic_low_pitch_is_angry(self):
        scores = rule_scores(make_vector(rms=0.2, f0=150.0, variation=80.0))
        assert scores["angry"] == pytest.approx(0.4)
        assert max(scores, key=scores.get) == "angry"

    def test_quiet_high_pitch_is_calm(self):
        scores = rule_scores(make_vector(rms=0.01, f0=220.0))
        assert scores["calm"] == pytest.approx(0.4)

    def test_noisy_spectrum(self):
        scores = rule_scores(make_vector(zcr=0.2))
        assert scores["fearful"] == pytest.approx(0.3)
        assert scores["disgust"] == pytest.approx(0.2)

    def test_cepstra_are_ignored(self):
        base = make_vector()
        shifted = base[:7] + [100.0] * 13
        assert rule_probabilities(shifted) == rule_probabilities(base)

    def test_does_not_mutate_base_scores(self):
        rule_scores([0.0] * 20)
        assert BASE_SCORES["sad"] == 0.1


class TestRuleTable:
    """Tests for the rule definitions."""

    def test_rule_labels_are_known(self):
        for rule in DEFAULT_RULES:
            assert rule.label in EMOTION_LABELS
            assert rule.increment > 0

    def test_prosodic_view_reads_first_seven(self):
        view = ProsodicView.from_vector(make_vector(f0=123.0, rate=4.5))
        assert view.f0 == 123.0
        assert view.speaking_rate == 4.5


class TestQuietLowPitch:
    """A quiet, low-pitched vector against an otherwise neutral baseline."""

    def test_sad_gains_its_increment(self):
        baseline = make_vector()
        quiet_low = make_vector(rms=0.02, f0=120.0)

        scores = rule_scores(quiet_low)
        sad = EMOTION_LABELS.index("sad")

        assert scores["sad"] >= 0.4
        assert rule_probabilities(quiet_low)[sad] > rule_probabilities(baseline)[sad]
        assert max(scores, key=scores.get) == "sad"
