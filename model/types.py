"""Type definitions for classification and training."""

from dataclasses import dataclass, field
from typing import Sequence

from .labels import EMOTION_LABELS


@dataclass
class PredictionResult:
    """Result of emotion prediction on a single feature vector.

    Attributes:
        label: Predicted emotion label (e.g., "happy", "sad").
        confidence: Probability of the predicted label (0.0 to 1.0).
        probabilities: Probabilities for all labels in ``EMOTION_LABELS``
            order (sum to 1.0).
        model_name: Name of the classifier that produced the prediction.
        is_trained: False when the rule-based fallback produced the result.
        duration_sec: Duration of the input audio in seconds, when known.
    """

    label: str
    confidence: float
    probabilities: list[float]
    model_name: str = ""
    is_trained: bool = False
    duration_sec: float = 0.0

    @property
    def scores(self) -> dict[str, float]:
        """Probabilities keyed by label."""
        return dict(zip(EMOTION_LABELS, self.probabilities))

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization.

        All numeric values are converted to Python native types to ensure
        JSON serialization works correctly.
        """
        def to_native(val):
            if hasattr(val, "item"):  # numpy/tensor scalar
                return val.item()
            return val

        return {
            "label": self.label,
            "confidence": float(to_native(self.confidence)),
            "probabilities": [float(to_native(p)) for p in self.probabilities],
            "scores": {k: float(to_native(v)) for k, v in self.scores.items()},
            "model_name": self.model_name,
            "is_trained": bool(self.is_trained),
            "duration_sec": float(to_native(self.duration_sec)),
        }


@dataclass
class TrainingSample:
    """One labeled feature vector.

    Attributes:
        features: Feature vector in ``features.FEATURE_NAMES`` order.
        label: Emotion label. Samples with unknown labels are skipped.
        source: Optional origin of the sample (e.g., a file name).
    """

    features: Sequence[float]
    label: str
    source: str | None = None


@dataclass
class TrainingReport:
    """Summary of one ``EmotionClassifier.train`` call.

    Attributes:
        num_samples: Samples with a known label used for updates.
        num_skipped: Samples skipped because their label is unknown.
        epochs_completed: Epochs that ran to the end.
        epoch_losses: Mean cross-entropy per completed epoch.
        cancelled: True when the run stopped early on request.
    """

    num_samples: int = 0
    num_skipped: int = 0
    epochs_completed: int = 0
    epoch_losses: list[float] = field(default_factory=list)
    cancelled: bool = False

    @property
    def final_loss(self) -> float | None:
        """Mean loss of the last completed epoch, if any."""
        return self.epoch_losses[-1] if self.epoch_losses else None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "num_samples": self.num_samples,
            "num_skipped": self.num_skipped,
            "epochs_completed": self.epochs_completed,
            "final_loss": self.final_loss,
            "cancelled": self.cancelled,
        }

