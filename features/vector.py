"""Assembly of the fixed-order feature vector consumed by the classifier."""

from dataclasses import dataclass, field
from typing import Final

import torch

from .config import DEFAULT_CONFIG, FeatureConfig
from .mfcc import average_cepstra, mfcc_frames
from .prosodic import compute_prosodic_features
from .spectral import compute_spectral_features
from .utils import SignalLike, as_signal


SPECTRAL_NAMES: Final[tuple[str, ...]] = (
    "spectral_centroid",
    "spectral_rolloff",
    "zero_crossing_rate",
    "rms_energy",
)

PROSODIC_NAMES: Final[tuple[str, ...]] = (
    "f0",
    "pitch_variation",
    "speaking_rate",
)

CEPSTRAL_NAMES: Final[tuple[str, ...]] = tuple(f"mfcc_{i}" for i in range(13))

# Order is part of the model contract: reordering invalidates saved parameters.
FEATURE_NAMES: Final[tuple[str, ...]] = SPECTRAL_NAMES + PROSODIC_NAMES + CEPSTRAL_NAMES

FEATURE_SIZE: Final[int] = len(FEATURE_NAMES)


@dataclass
class FeatureVector:
    """Spectral, prosodic and time-averaged cepstral descriptors of one clip.

    Attributes:
        spectral_centroid: Magnitude-weighted mean DFT bin.
        spectral_rolloff: Bin holding 85% of the cumulative magnitude.
        zero_crossing_rate: Fraction of sign changes between samples.
        rms_energy: Root mean square amplitude.
        f0: Autocorrelation pitch estimate in Hz.
        pitch_variation: Standard deviation of per-frame pitch in Hz.
        speaking_rate: Energy peaks per second.
        mfcc: Time-averaged cepstral coefficients.
        num_frames: Number of frames the cepstral average was taken over.
    """

    spectral_centroid: float
    spectral_rolloff: float
    zero_crossing_rate: float
    rms_energy: float
    f0: float
    pitch_variation: float
    speaking_rate: float
    mfcc: list[float] = field(default_factory=lambda: [0.0] * 13)
    num_frames: int = 0

    def to_list(self) -> list[float]:
        """Return the values in ``FEATURE_NAMES`` order."""
        return [
            self.spectral_centroid,
            self.spectral_rolloff,
            self.zero_crossing_rate,
            self.rms_energy,
            self.f0,
            self.pitch_variation,
            self.speaking_rate,
            *self.mfcc,
        ]

    def as_tensor(self) -> torch.Tensor:
        """Return the values as a 1-D float64 tensor."""
        return torch.tensor(self.to_list(), dtype=torch.float64)

    def named(self) -> dict[str, float]:
        """Return a name -> value mapping, keyed by ``FEATURE_NAMES``."""
        return dict(zip(FEATURE_NAMES, self.to_list()))


def extract_feature_vector(
    signal: SignalLike,
    sample_rate: int,
    config: FeatureConfig | None = None,
) -> FeatureVector:
    """Run the whole extraction pipeline on one clip.

    Args:
        signal: Mono PCM samples in [-1, 1].
        sample_rate: Sample rate in Hz.
        config: Feature configuration. If None, uses the defaults.

    Returns:
        FeatureVector whose ``to_list()`` is the classifier input.

    Examples:
        >>> import torch
        >>> vector = extract_feature_vector(torch.zeros(16000), 16000)
        >>> len(vector.to_list())
        20
        >>> vector.rms_energy
        0.0
    """
    if config is None:
        config = DEFAULT_CONFIG

    samples = as_signal(signal, sample_rate)

    centroid, rolloff, zcr, rms = compute_spectral_features(samples, sample_rate, config)
    f0, variation, rate = compute_prosodic_features(samples, sample_rate, config)
    cepstra = mfcc_frames(samples, sample_rate, config)

    return FeatureVector(
        spectral_centroid=centroid,
        spectral_rolloff=rolloff,
        zero_crossing_rate=zcr,
        rms_energy=rms,
        f0=f0,
        pitch_variation=variation,
        speaking_rate=rate,
        mfcc=average_cepstra(cepstra, config.num_cepstral),
        num_frames=int(cepstra.shape[0]),
    )
