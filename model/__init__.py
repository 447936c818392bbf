"""Model module for Speech Emotion Recognition.

This module provides:
- Canonical emotion label definitions and RAVDESS codes
- EmotionClassifier: rule-based fallback plus a trainable perceptron
- JSON persistence for classifier parameters
- Inference functions for single clips and waveforms

Example:
    >>> from model import EmotionClassifier, predict_clip
    >>> classifier = EmotionClassifier()
    >>> result = predict_clip("speech.wav", classifier)
    >>> print(result.label, result.confidence)
    sad 0.31
"""

from .classifier import MODEL_NAME, MODEL_VERSION, EmotionClassifier, parameters_from_blob
from .errors import (
    InferenceError,
    ModelError,
    ModelLoadError,
    ParameterBlobError,
    ShapeMismatchError,
    TrainingError,
)
from .infer import predict_clip, predict_waveform
from .labels import EMOTION_LABELS, NUM_EMOTIONS, RAVDESS_EMOTION_CODES, label_to_index, one_hot
from .network import cross_entropy, softmax
from .store import load_parameters, save_parameters
from .types import PredictionResult, TrainingReport, TrainingSample

__all__ = [
    # Classifier
    "EmotionClassifier",
    "MODEL_NAME",
    "MODEL_VERSION",
    "parameters_from_blob",
    # Inference functions
    "predict_clip",
    "predict_waveform",
    # Persistence
    "save_parameters",
    "load_parameters",
    # Labels
    "EMOTION_LABELS",
    "NUM_EMOTIONS",
    "RAVDESS_EMOTION_CODES",
    "label_to_index",
    "one_hot",
    # Math helpers
    "softmax",
    "cross_entropy",
    # Types
    "PredictionResult",
    "TrainingSample",
    "TrainingReport",
    # Errors
    "ModelError",
    "ModelLoadError",
    "InferenceError",
    "ShapeMismatchError",
    "ParameterBlobError",
    "TrainingError",
]
