"""Emotion classifier: rule-based fallback until trained, perceptron afterwards.

The classifier owns its parameters. Persistence is explicit: callers move the
parameter blob in and out with ``export_parameters``/``import_parameters``
(see ``model.store`` for the JSON file helpers).

Example:
    >>> from model import EmotionClassifier, TrainingSample
    >>> classifier = EmotionClassifier(seed=0)
    >>> classifier.predict([0.0] * 20).label  # untrained: rule-based
    'sad'
    >>> report = classifier.train([TrainingSample([0.5] * 20, "happy")])
    >>> classifier.is_trained
    True
"""

import logging
import threading
from typing import Any, Final, Iterable, Mapping, Sequence

import torch

from features.vector import FEATURE_NAMES, FEATURE_SIZE

from .errors import InferenceError, ParameterBlobError, ShapeMismatchError, TrainingError
from .labels import EMOTION_LABELS, NUM_EMOTIONS, label_to_index, one_hot
from .network import NetworkParameters, cross_entropy, forward, sgd_step, softmax
from .rules import matching_rules, rule_probabilities
from .types import PredictionResult, TrainingReport, TrainingSample


logger = logging.getLogger(__name__)


MODEL_NAME: Final[str] = "EmotiNet-RAVDESS"
MODEL_VERSION: Final[str] = "v2.1.0"
BLOB_FORMAT_VERSION: Final[int] = 1

DEFAULT_INPUT_SIZE: Final[int] = FEATURE_SIZE
DEFAULT_HIDDEN_SIZE: Final[int] = 64
DEFAULT_LEARNING_RATE: Final[float] = 0.01
DEFAULT_EPOCHS: Final[int] = 100

LOSS_LOG_INTERVAL: Final[int] = 10


class EmotionClassifier:
    """Eight-way emotion classifier over fixed-width feature vectors.

    State is either untrained (initial) or trained. Untrained instances
    answer with the rule-based fallback; a completed ``train`` call or an
    imported trained blob switches to the network.

    All public methods take an internal re-entrant lock, so a prediction
    never observes a half-applied training update.

    Attributes:
        input_size: Width of accepted feature vectors.
        hidden_size: Number of ReLU hidden units.
        output_size: Number of emotion classes.
        learning_rate: SGD step size.
        epochs: Epochs per ``train`` call.
    """

    def __init__(
        self,
        input_size: int = DEFAULT_INPUT_SIZE,
        hidden_size: int = DEFAULT_HIDDEN_SIZE,
        learning_rate: float = DEFAULT_LEARNING_RATE,
        epochs: int = DEFAULT_EPOCHS,
        seed: int | None = None,
    ) -> None:
        """Create an untrained classifier with randomly initialised weights.

        Args:
            input_size: Feature vector width.
            hidden_size: Hidden layer width.
            learning_rate: SGD step size.
            epochs: Number of passes over the data per ``train`` call.
            seed: Seed for weight initialisation and shuffling. If None,
                a non-deterministic seed is used.
        """
        self.input_size = input_size
        self.hidden_size = hidden_size
        self.output_size = NUM_EMOTIONS
        self.learning_rate = learning_rate
        self.epochs = epochs

        self._generator = torch.Generator()
        if seed is None:
            self._generator.seed()
        else:
            self._generator.manual_seed(seed)

        self._params = NetworkParameters.initialize(
            input_size, hidden_size, self.output_size, generator=self._generator
        )
        self._trained = False
        self._lock = threading.RLock()

    @property
    def is_trained(self) -> bool:
        """Whether predictions come from the network rather than the rules."""
        return self._trained

    @property
    def name(self) -> str:
        """Model name and version, e.g. ``"EmotiNet-RAVDESS v2.1.0"``."""
        return f"{MODEL_NAME} {MODEL_VERSION}"

    # =========================================================================
    # Inference
    # =========================================================================

    def _as_vector(self, features: Sequence[float] | torch.Tensor) -> torch.Tensor:
        try:
            vector = torch.as_tensor(features, dtype=torch.float64)
        except (TypeError, ValueError, RuntimeError) as e:
            raise InferenceError(
                message=f"Feature vector is not numeric: {e}",
                code="INVALID_INPUT",
                details={"type": type(features).__name__},
            ) from e

        if vector.ndim != 1 or vector.numel() != self.input_size:
            raise ShapeMismatchError(
                message=f"Feature vector must have shape [{self.input_size}], got {list(vector.shape)}",
                code="SHAPE_MISMATCH",
                details={"expected": [self.input_size], "actual": list(vector.shape)},
            )

        if not torch.isfinite(vector).all():
            raise InferenceError(
                message="Feature vector contains non-finite values",
                code="INVALID_INPUT",
                details={"features": vector.tolist()},
            )

        return vector

    def predict_proba(self, features: Sequence[float] | torch.Tensor) -> list[float]:
        """Return the probability of every label in ``EMOTION_LABELS`` order.

        Raises:
            ShapeMismatchError: If the vector width or parameter shapes are wrong.
            InferenceError: If the vector is not numeric or not finite.
        """
        with self._lock:
            x = self._as_vector(features)
            if not self._trained:
                values = x.tolist()
                if logger.isEnabledFor(logging.DEBUG):
                    fired = sorted({rule.name for rule in matching_rules(values)})
                    logger.debug("Rule-based prediction, matching rules: %s", ", ".join(fired) or "none")
                return rule_probabilities(values)

            self._params.check_shapes(self.input_size, self.hidden_size, self.output_size)
            _, logits = forward(self._params, x)
            return softmax(logits).tolist()

    def predict(self, features: Sequence[float] | torch.Tensor) -> PredictionResult:
        """Predict the emotion of one feature vector.

        Ties between equal probabilities go to the label listed first in
        ``EMOTION_LABELS``.

        Args:
            features: Vector of ``input_size`` floats.

        Returns:
            PredictionResult with label, confidence and all probabilities.

        Raises:
            ShapeMismatchError: If the vector has the wrong width.
            InferenceError: If the vector is not numeric or not finite.
        """
        with self._lock:
            probabilities = self.predict_proba(features)
            trained = self._trained

        index = max(range(len(probabilities)), key=probabilities.__getitem__)
        return PredictionResult(
            label=EMOTION_LABELS[index],
            confidence=probabilities[index],
            probabilities=probabilities,
            model_name=self.name,
            is_trained=trained,
        )

    # =========================================================================
    # Training
    # =========================================================================

    def train(
        self,
        samples: Iterable[TrainingSample],
        cancel_event: threading.Event | None = None,
    ) -> TrainingReport:
        """Fit the network with per-sample gradient descent.

        Runs ``epochs`` passes. Each pass shuffles the samples and applies one
        update per sample. Samples whose label is not a known emotion are
        skipped. The mean cross-entropy of each epoch is recorded and logged
        every ``LOSS_LOG_INTERVAL`` epochs.

        Cancellation is checked before every epoch. A cancelled run keeps the
        parameters reached so far but leaves the trained flag unchanged.

        Args:
            samples: Labeled feature vectors.
            cancel_event: Optional event; when set, training stops before
                the next epoch.

        Returns:
            TrainingReport describing the run.

        Raises:
            TrainingError: If there are no samples, or the parameters
                diverge (the last finite epoch is restored first).
            ShapeMismatchError: If a labeled vector has the wrong width.
                No parameter is touched in that case.
        """
        samples = list(samples)
        if not samples:
            raise TrainingError(
                message="Cannot train on an empty sample set",
                code="NO_SAMPLES",
            )

        prepared: list[tuple[torch.Tensor, int]] = []
        skipped = 0
        for sample in samples:
            index = label_to_index(sample.label)
            if index is None:
                skipped += 1
                continue
            prepared.append((self._as_vector(sample.features), index))

        report = TrainingReport(num_samples=len(prepared), num_skipped=skipped)

        with self._lock:
            self._params.check_shapes(self.input_size, self.hidden_size, self.output_size)
            logger.info(
                "Starting training: samples=%d skipped=%d epochs=%d learning_rate=%s",
                len(prepared),
                skipped,
                self.epochs,
                self.learning_rate,
            )

            for epoch in range(self.epochs):
                if cancel_event is not None and cancel_event.is_set():
                    report.cancelled = True
                    logger.info("Training cancelled after %d epochs", report.epochs_completed)
                    break

                checkpoint = self._params.clone()
                total_loss = 0.0

                order = torch.randperm(len(prepared), generator=self._generator).tolist()
                for position in order:
                    x, index = prepared[position]
                    hidden, logits = forward(self._params, x)
                    total_loss += cross_entropy(softmax(logits), index)
                    sgd_step(
                        self._params,
                        x,
                        hidden,
                        logits,
                        one_hot(index),
                        self.learning_rate,
                    )

                if not self._params.is_finite():
                    self._params = checkpoint
                    raise TrainingError(
                        message="Training diverged; restored parameters from the previous epoch",
                        code="TRAINING_DIVERGED",
                        details={"epoch": epoch, "epochs_completed": report.epochs_completed},
                    )

                mean_loss = total_loss / max(len(prepared), 1)
                report.epoch_losses.append(mean_loss)
                report.epochs_completed += 1

                if epoch % LOSS_LOG_INTERVAL == 0:
                    logger.info("Epoch %d, average loss: %.4f", epoch, mean_loss)

            if not report.cancelled:
                self._trained = True
                logger.info(
                    "Training completed: epochs=%d final_loss=%s",
                    report.epochs_completed,
                    report.final_loss,
                )

        return report

    # =========================================================================
    # Parameter blob
    # =========================================================================

    def export_parameters(self) -> dict[str, Any]:
        """Return a JSON-compatible snapshot of weights, biases and trained flag."""
        with self._lock:
            return {
                "format_version": BLOB_FORMAT_VERSION,
                "emotions": list(EMOTION_LABELS),
                "weights": [self._params.w1.tolist(), self._params.w2.tolist()],
                "biases": [self._params.b1.tolist(), self._params.b2.tolist()],
                "is_trained": self._trained,
            }

    def import_parameters(self, blob: Mapping[str, Any]) -> None:
        """Replace the parameters with those of an exported blob.

        The blob is fully validated before anything is replaced; on error the
        classifier is left unchanged.

        Raises:
            ParameterBlobError: If the blob is malformed or was trained with
                a different label order.
            ShapeMismatchError: If matrix or vector shapes do not match this
                classifier's architecture.
        """
        params, trained = parameters_from_blob(blob)
        params.check_shapes(self.input_size, self.hidden_size, self.output_size)

        if not params.is_finite():
            raise ParameterBlobError(
                message="Parameter blob contains non-finite values",
                code="INVALID_BLOB",
            )

        with self._lock:
            self._params = params
            self._trained = trained

    def describe(self) -> dict[str, Any]:
        """Return architecture metadata and the live training state."""
        trained = self._trained
        return {
            "name": MODEL_NAME,
            "version": MODEL_VERSION,
            "architecture": "Neural Network (2-layer MLP)",
            "input_features": self.input_size,
            "hidden_units": self.hidden_size,
            "output_classes": self.output_size,
            "learning_rate": self.learning_rate,
            "epochs": self.epochs,
            "emotions": list(EMOTION_LABELS),
            "feature_names": list(FEATURE_NAMES) if self.input_size == FEATURE_SIZE else [],
            "is_trained": trained,
            "training_status": "Trained" if trained else "Using rule-based prediction",
        }


def parameters_from_blob(blob: Mapping[str, Any]) -> tuple[NetworkParameters, bool]:
    """Decode an exported blob into parameters and the trained flag.

    Shapes are not compared against an architecture here; callers use
    ``NetworkParameters.check_shapes`` for that.

    Raises:
        ParameterBlobError: If the blob is structurally invalid.
    """
    if not isinstance(blob, Mapping):
        raise ParameterBlobError(
            message=f"Parameter blob must be a mapping, got {type(blob).__name__}",
            code="INVALID_BLOB",
            details={"type": type(blob).__name__},
        )

    version = blob.get("format_version", BLOB_FORMAT_VERSION)
    if version != BLOB_FORMAT_VERSION:
        raise ParameterBlobError(
            message=f"Unsupported parameter blob version: {version!r}",
            code="INVALID_BLOB",
            details={"format_version": version, "supported": BLOB_FORMAT_VERSION},
        )

    emotions = blob.get("emotions")
    if emotions is not None and list(emotions) != list(EMOTION_LABELS):
        raise ParameterBlobError(
            message="Parameter blob was trained with a different label order",
            code="LABEL_ORDER_MISMATCH",
            details={"expected": list(EMOTION_LABELS), "actual": list(emotions)},
        )

    weights = blob.get("weights")
    biases = blob.get("biases")
    if not isinstance(weights, Sequence) or not isinstance(biases, Sequence) or len(weights) != 2 or len(biases) != 2:
        raise ParameterBlobError(
            message="Parameter blob must hold two weight matrices and two bias vectors",
            code="INVALID_BLOB",
            details={"keys": sorted(str(k) for k in blob.keys())},
        )

    # Blobs saved by the browser dashboard use camelCase.
    trained = blob.get("is_trained", blob.get("isTrained"))
    if not isinstance(trained, bool):
        raise ParameterBlobError(
            message="Parameter blob must carry a boolean is_trained flag",
            code="INVALID_BLOB",
            details={"is_trained": repr(trained)},
        )

    try:
        tensors = [torch.tensor(value, dtype=torch.float64) for value in (*weights, *biases)]
    except (TypeError, ValueError, RuntimeError) as e:
        raise ParameterBlobError(
            message=f"Parameter blob holds non-numeric or ragged arrays: {e}",
            code="INVALID_BLOB",
        ) from e

    w1, w2, b1, b2 = tensors
    return NetworkParameters(w1=w1, b1=b1, w2=w2, b2=b2), trained
