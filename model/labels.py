"""Emotion labels and their encodings.

The label order is part of the model contract: position in
``EMOTION_LABELS`` is the index in every probability vector and the one-hot
index used in training.

Labels:
    - neutral: No strong emotional expression
    - calm: Low-arousal, relaxed delivery
    - happy: Positive emotion, joy
    - sad: Negative emotion, sorrow
    - angry: Negative emotion, anger/frustration
    - fearful: Negative emotion, fear/anxiety
    - disgust: Negative emotion, revulsion
    - surprised: Unexpected, can be positive or negative

RAVDESS encodes the emotion as the third field of its filenames using the
codes in ``RAVDESS_EMOTION_CODES``.
"""

from typing import Final

import torch


EMOTION_LABELS: Final[tuple[str, ...]] = (
    "neutral",
    "calm",
    "happy",
    "sad",
    "angry",
    "fearful",
    "disgust",
    "surprised",
)

NUM_EMOTIONS: Final[int] = len(EMOTION_LABELS)

RAVDESS_EMOTION_CODES: Final[dict[str, str]] = {
    "01": "neutral",
    "02": "calm",
    "03": "happy",
    "04": "sad",
    "05": "angry",
    "06": "fearful",
    "07": "disgust",
    "08": "surprised",
}

_LABEL_INDEX: Final[dict[str, int]] = {label: i for i, label in enumerate(EMOTION_LABELS)}


def label_to_index(label: str) -> int | None:
    """Return the index of a label, or None if it is not a known emotion.

    Examples:
        >>> label_to_index("sad")
        3
        >>> label_to_index("bored") is None
        True
    """
    return _LABEL_INDEX.get(label)


def index_to_label(index: int) -> str:
    """Return the label at ``index`` in canonical order."""
    return EMOTION_LABELS[index]


def one_hot(index: int, dtype: torch.dtype = torch.float64) -> torch.Tensor:
    """Return a one-hot target vector of length ``NUM_EMOTIONS``."""
    target = torch.zeros(NUM_EMOTIONS, dtype=dtype)
    target[index] = 1.0
    return target


def is_known_label(label: str) -> bool:
    """Check if a label is one of the eight emotions."""
    return label in _LABEL_INDEX
