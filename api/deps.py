"""FastAPI dependencies for the emotion recognition service.

This module provides dependency injection functions for:
- Settings access
- The classifier service (model state, persistence, training)
- Audio configuration

Example:
    >>> from fastapi import Depends
    >>> from api.deps import get_service

    >>> @app.get("/")
    >>> async def endpoint(service = Depends(get_service)):
    ...     return {"trained": service.classifier.is_trained}
"""

import logging
import threading
from dataclasses import dataclass, field

from fastapi import Request

from audioio import AudioConfig
from corpus import (
    CorpusSummary,
    RavdessFileInfo,
    describe_file,
    extract_training_sample,
    summarize_corpus,
)
from features import FeatureConfig
from model import EmotionClassifier, ModelLoadError, TrainingReport, load_parameters, save_parameters

from .config import Settings, get_settings as _get_settings


logger = logging.getLogger(__name__)


# Re-export get_settings for dependency injection
get_settings = _get_settings


# =============================================================================
# Classifier Service
# =============================================================================


@dataclass
class TrainingOutcome:
    """What one /train call did."""

    report: TrainingReport
    summary: CorpusSummary
    skipped_files: list[str] = field(default_factory=list)
    saved: bool = False


class ClassifierService:
    """Owns the service's classifier and its persistence.

    This class handles:
    - Loading stored parameters from ``settings.model_path`` at startup
    - Training from uploaded RAVDESS files, one run at a time
    - Saving parameters after training or reset

    Attributes:
        settings: Application settings.
        audio_config: Audio pipeline configuration derived from settings.
        feature_config: Feature extraction configuration.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.audio_config = get_audio_config(settings)
        self.feature_config = FeatureConfig()
        self._classifier = EmotionClassifier(seed=settings.seed)
        self._train_lock = threading.Lock()

    @property
    def classifier(self) -> EmotionClassifier:
        return self._classifier

    def load(self) -> None:
        """Load stored parameters, if a model path is configured.

        A missing file is not an error: the service starts untrained.

        Raises:
            ModelLoadError: If the stored file cannot be read.
            ParameterBlobError: If the stored blob is invalid.
        """
        path = self.settings.model_path
        if path is None:
            logger.info("No model path configured; starting with rule-based prediction")
            return

        try:
            load_parameters(path, self._classifier)
        except ModelLoadError as e:
            if e.code != "MODEL_NOT_FOUND":
                raise
            logger.info("No stored parameters at %s; starting with rule-based prediction", path)

    def reset(self) -> EmotionClassifier:
        """Replace the classifier with a fresh untrained one."""
        with self._train_lock:
            self._classifier = EmotionClassifier(seed=self.settings.seed)
            self._save()
        logger.info("Model reset to untrained state")
        return self._classifier

    def train_from_uploads(self, uploads: list[tuple[str, bytes]]) -> TrainingOutcome:
        """Featurize RAVDESS-named uploads and train on them.

        Runs synchronously; call it from a worker thread. Only one training
        run executes at a time.

        Args:
            uploads: (filename, WAV bytes) pairs.

        Raises:
            TrainingError: If no upload yields a training sample.
        """
        entries: list[RavdessFileInfo] = [describe_file(name) for name, _ in uploads]
        summary = summarize_corpus(entries)

        samples = []
        skipped = []
        for info, (_, data) in zip(entries, uploads):
            sample = extract_training_sample(info, data, self.audio_config, self.feature_config)
            if sample is None:
                skipped.append(info.name)
            else:
                samples.append(sample)

        logger.info(
            "Training request: files=%d samples=%d skipped=%d",
            len(uploads),
            len(samples),
            len(skipped),
        )

        with self._train_lock:
            report = self._classifier.train(samples)
            saved = self._save()

        return TrainingOutcome(report=report, summary=summary, skipped_files=skipped, saved=saved)

    def _save(self) -> bool:
        path = self.settings.model_path
        if path is None:
            return False
        save_parameters(self._classifier, path)
        return True


def get_service(request: Request) -> ClassifierService:
    """Return the ClassifierService attached to the application."""
    return request.app.state.service


# =============================================================================
# Audio Configuration
# =============================================================================


def get_audio_config(settings: Settings | None = None) -> AudioConfig:
    """Build the audio pipeline configuration from settings."""
    if settings is None:
        settings = get_settings()

    return AudioConfig(
        target_sample_rate=settings.target_sample_rate,
        max_duration_sec=settings.max_duration_sec,
    )
