"""Feature extraction for speech emotion recognition.

This module turns decoded mono PCM into numeric descriptors:
- Spectral: centroid, rolloff, zero-crossing rate, RMS energy (whole clip)
- Prosodic: autocorrelation pitch, pitch variation, speaking rate
- Cepstral: 13 MFCCs per 25 ms frame (10 ms hop)

and assembles them into the 20-wide vector the classifier consumes.

Example:
    >>> import torch
    >>> from features import extract_feature_vector, FEATURE_NAMES
    >>> signal = torch.randn(16000, dtype=torch.float64) * 0.1
    >>> vector = extract_feature_vector(signal, sample_rate=16000)
    >>> dict(zip(FEATURE_NAMES, vector.to_list()))["rms_energy"]  # doctest: +SKIP
    0.1
"""

from .config import FeatureConfig
from .errors import FeatureConfigError, FeatureError, FeatureInputError
from .mfcc import (
    average_cepstra,
    compute_mfcc,
    dct_matrix,
    hamming_window,
    hz_to_mel,
    mel_filterbank,
    mel_to_hz,
)
from .prosodic import (
    compute_prosodic_features,
    estimate_f0,
    pitch_lag_range,
    pitch_variation,
    speaking_rate,
)
from .spectral import compute_spectral_features
from .utils import as_signal, frame_signal, seconds_to_samples
from .vector import FEATURE_NAMES, FEATURE_SIZE, FeatureVector, extract_feature_vector


__all__ = [
    # Main API
    "extract_feature_vector",
    "FeatureVector",
    "FEATURE_NAMES",
    "FEATURE_SIZE",
    # Config
    "FeatureConfig",
    # Errors
    "FeatureError",
    "FeatureConfigError",
    "FeatureInputError",
    # Extractors
    "compute_spectral_features",
    "compute_prosodic_features",
    "compute_mfcc",
    "average_cepstra",
    "estimate_f0",
    "pitch_variation",
    "speaking_rate",
    "pitch_lag_range",
    # Building blocks
    "hz_to_mel",
    "mel_to_hz",
    "hamming_window",
    "mel_filterbank",
    "dct_matrix",
    "frame_signal",
    "as_signal",
    "seconds_to_samples",
]
