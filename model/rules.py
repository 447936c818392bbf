"""Rule-based emotion scoring used while the network is untrained.

Every label starts at a small base score. Each rule is a
``(predicate, label, increment)`` triple evaluated against the seven
spectral and prosodic features; when the predicate holds, the increment is
added to the label's score. Scores are normalised to sum to 1. Cepstral
coefficients are not consulted.

Example:
    >>> quiet_low = [0.0, 0.0, 0.0, 0.02, 120.0, 0.0, 3.0] + [0.0] * 13
    >>> probabilities = rule_probabilities(quiet_low)
    >>> max(range(8), key=probabilities.__getitem__)  # "sad"
    3
"""

from dataclasses import dataclass
from typing import Callable, Final, NamedTuple, Sequence

from .labels import EMOTION_LABELS


class ProsodicView(NamedTuple):
    """The first seven entries of a feature vector, by name."""

    spectral_centroid: float
    spectral_rolloff: float
    zero_crossing_rate: float
    rms_energy: float
    f0: float
    pitch_variation: float
    speaking_rate: float

    @classmethod
    def from_vector(cls, features: Sequence[float]) -> "ProsodicView":
        return cls(*(float(v) for v in features[:7]))


@dataclass(frozen=True)
class Rule:
    """Add ``increment`` to ``label`` when ``predicate`` holds."""

    name: str
    predicate: Callable[[ProsodicView], bool]
    label: str
    increment: float

    def applies(self, view: ProsodicView) -> bool:
        return bool(self.predicate(view))


BASE_SCORES: Final[dict[str, float]] = {
    "neutral": 0.2,
    "calm": 0.1,
    "happy": 0.1,
    "sad": 0.1,
    "angry": 0.1,
    "fearful": 0.1,
    "disgust": 0.1,
    "surprised": 0.1,
}


def _energetic(v: ProsodicView) -> bool:
    return v.rms_energy > 0.1 and v.pitch_variation > 50


def _quiet(v: ProsodicView) -> bool:
    return v.rms_energy < 0.05


DEFAULT_RULES: Final[tuple[Rule, ...]] = (
    # Loud and animated: high pitch reads as excitement, low pitch as anger.
    Rule("energetic_high_pitch", lambda v: _energetic(v) and v.f0 > 200, "surprised", 0.3),
    Rule("energetic_high_pitch", lambda v: _energetic(v) and v.f0 > 200, "happy", 0.2),
    Rule("energetic_low_pitch", lambda v: _energetic(v) and v.f0 <= 200, "angry", 0.3),
    # Quiet: low pitch reads as sad, otherwise calm.
    Rule("quiet_low_pitch", lambda v: _quiet(v) and v.f0 < 150, "sad", 0.3),
    Rule("quiet_high_pitch", lambda v: _quiet(v) and v.f0 >= 150, "calm", 0.3),
    Rule("bright_spectrum", lambda v: v.spectral_centroid > 0.6, "happy", 0.2),
    Rule("bright_spectrum", lambda v: v.spectral_centroid > 0.6, "surprised", 0.1),
    Rule("dark_spectrum", lambda v: v.spectral_centroid < 0.3, "sad", 0.2),
    Rule("dark_spectrum", lambda v: v.spectral_centroid < 0.3, "angry", 0.1),
    # Fricative-heavy speech.
    Rule("noisy", lambda v: v.zero_crossing_rate > 0.1, "fearful", 0.2),
    Rule("noisy", lambda v: v.zero_crossing_rate > 0.1, "disgust", 0.1),
    Rule("fast_speech", lambda v: v.speaking_rate > 5, "happy", 0.1),
    Rule("fast_speech", lambda v: v.speaking_rate > 5, "surprised", 0.1),
    Rule("slow_speech", lambda v: v.speaking_rate < 2, "sad", 0.1),
    Rule("slow_speech", lambda v: v.speaking_rate < 2, "calm", 0.1),
)


def rule_scores(
    features: Sequence[float],
    rules: Sequence[Rule] = DEFAULT_RULES,
) -> dict[str, float]:
    """Return unnormalised scores after applying every matching rule in order."""
    view = ProsodicView.from_vector(features)
    scores = dict(BASE_SCORES)
    for rule in rules:
        if rule.applies(view):
            scores[rule.label] += rule.increment
    return scores


def rule_probabilities(
    features: Sequence[float],
    rules: Sequence[Rule] = DEFAULT_RULES,
) -> list[float]:
    """Return rule scores normalised to a distribution in ``EMOTION_LABELS`` order."""
    scores = rule_scores(features, rules)
    total = sum(scores.values())
    return [scores[label] / total for label in EMOTION_LABELS]


def matching_rules(
    features: Sequence[float],
    rules: Sequence[Rule] = DEFAULT_RULES,
) -> list[Rule]:
    """Return the rules whose predicate holds for ``features``."""
    view = ProsodicView.from_vector(features)
    return [rule for rule in rules if rule.applies(view)]
