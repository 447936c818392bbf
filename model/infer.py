"""Inference functions for Speech Emotion Recognition.

This module glues the audio pipeline, the feature extractor and a
classifier together for emotion prediction on audio files and waveforms.

Example:
    >>> from model import EmotionClassifier
    >>> from model.infer import predict_clip, predict_waveform
    >>> import torch

    # Predict from file
    >>> result = predict_clip("speech.wav", EmotionClassifier())
    >>> print(result.label, result.confidence)

    # Predict from waveform
    >>> waveform = torch.randn(1, 16000) * 0.1
    >>> result = predict_waveform(waveform, 16000, EmotionClassifier())
"""

from pathlib import Path
from typing import Union

import torch

from audioio import AudioConfig, load_validate_preprocess
from features import FeatureConfig, extract_feature_vector

from .classifier import EmotionClassifier
from .errors import InferenceError
from .types import PredictionResult


def predict_clip(
    path_or_bytes: Union[str, Path, bytes],
    classifier: EmotionClassifier,
    audio_config: AudioConfig | None = None,
    feature_config: FeatureConfig | None = None,
) -> PredictionResult:
    """Predict emotion from an audio file or bytes.

    This function:
    1. Loads and preprocesses the audio using audioio pipeline
    2. Extracts the 20-wide feature vector
    3. Runs the classifier on it

    Args:
        path_or_bytes: Path to audio file (str/Path) or raw WAV bytes.
        classifier: Classifier to predict with.
        audio_config: Audio preprocessing configuration.
            If None, uses default AudioConfig().
        feature_config: Feature extraction configuration.
            If None, uses default FeatureConfig().

    Returns:
        PredictionResult with predicted label, confidence, and probabilities.

    Raises:
        AudioDecodeError: If audio cannot be loaded.
        AudioValidationError: If audio fails validation.
        AudioPreprocessError: If preprocessing fails.
        InferenceError: If inference fails.

    Examples:
        >>> result = predict_clip("speech.wav", classifier)
        >>> print(f"Emotion: {result.label}, Confidence: {result.confidence:.2%}")

        >>> with open("speech.wav", "rb") as f:
        ...     result = predict_clip(f.read(), classifier)
    """
    waveform, sample_rate = load_validate_preprocess(path_or_bytes, audio_config)

    return predict_waveform(
        waveform=waveform,
        sample_rate=sample_rate,
        classifier=classifier,
        feature_config=feature_config,
    )


def predict_waveform(
    waveform: torch.Tensor,
    sample_rate: int,
    classifier: EmotionClassifier,
    feature_config: FeatureConfig | None = None,
) -> PredictionResult:
    """Predict emotion from a preprocessed waveform.

    This function assumes the waveform is already preprocessed
    (mono, float). Use this when you have already loaded and preprocessed
    audio, or for batch processing.

    Args:
        waveform: Audio waveform tensor with shape [1, T] or [T].
        sample_rate: Sample rate of the waveform.
        classifier: Classifier to predict with.
        feature_config: Feature extraction configuration.

    Returns:
        PredictionResult with predicted label, confidence, and probabilities.

    Raises:
        InferenceError: If the waveform is not a mono float tensor.
        FeatureInputError: If the waveform holds non-finite samples.
    """
    if not isinstance(waveform, torch.Tensor):
        raise InferenceError(
            message=f"Waveform must be torch.Tensor, got {type(waveform).__name__}",
            code="INVALID_INPUT",
            details={"type": type(waveform).__name__},
        )

    if waveform.dim() == 2 and waveform.shape[0] == 1:
        waveform = waveform[0]

    if waveform.dim() != 1:
        raise InferenceError(
            message=f"Waveform must have shape [1, T] or [T], got {list(waveform.shape)}",
            code="INVALID_INPUT",
            details={"shape": list(waveform.shape)},
        )

    if not waveform.is_floating_point():
        raise InferenceError(
            message=f"Waveform must be a float tensor, got {waveform.dtype}",
            code="INVALID_INPUT",
            details={"dtype": str(waveform.dtype)},
        )

    vector = extract_feature_vector(waveform, sample_rate, feature_config)
    result = classifier.predict(vector.to_list())
    result.duration_sec = waveform.shape[0] / sample_rate
    return result
