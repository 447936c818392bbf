"""Configuration for the feature extraction pipeline."""

from dataclasses import dataclass

from .errors import FeatureConfigError


@dataclass
class FeatureConfig:
    """Parameters shared by the spectral, prosodic and cepstral extractors.

    The defaults are the values every trained model in this project was fit
    with. Changing any of them changes the feature vector and invalidates
    saved parameters.

    Attributes:
        frame_sec: Analysis frame length in seconds. Default 0.025.
        hop_sec: Step between frame starts in seconds. Default 0.010.
        num_mel_filters: Number of triangular mel filters. Default 26.
        num_cepstral: Number of cepstral coefficients kept. Default 13.
        log_floor: Added to filter energies before the log. Default 1e-10.
        rolloff_percent: Cumulative magnitude share for spectral rolloff.
            Default 0.85.
        f0_min_hz: Lowest pitch candidate in Hz. Default 50.0.
        f0_max_hz: Highest pitch candidate in Hz. Default 500.0.
        pitch_tie_tolerance: Relative margin under the best autocorrelation
            within which the shortest lag wins. 0 keeps the plain argmax.
            Default 1e-3.
        rate_block_sec: Block length for speaking-rate energy peaks.
            Default 0.010.
        rate_peak_ratio: Peak threshold as a fraction of mean block energy.
            Default 0.3.
    """

    frame_sec: float = 0.025
    hop_sec: float = 0.010
    num_mel_filters: int = 26
    num_cepstral: int = 13
    log_floor: float = 1e-10
    rolloff_percent: float = 0.85
    f0_min_hz: float = 50.0
    f0_max_hz: float = 500.0
    pitch_tie_tolerance: float = 1e-3
    rate_block_sec: float = 0.010
    rate_peak_ratio: float = 0.3

    def __post_init__(self) -> None:
        """Validate configuration on initialization."""
        self.validate()

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            FeatureConfigError: If any parameter is invalid.
        """
        for name in ("frame_sec", "hop_sec", "rate_block_sec", "f0_min_hz", "f0_max_hz"):
            value = getattr(self, name)
            if value <= 0:
                raise FeatureConfigError(
                    message=f"{name} must be positive, got {value}",
                    code="INVALID_CONFIG",
                    details={"parameter": name, "value": value},
                )

        if self.hop_sec > self.frame_sec:
            raise FeatureConfigError(
                message=f"hop_sec ({self.hop_sec}) must be <= frame_sec ({self.frame_sec})",
                code="INVALID_CONFIG",
                details={
                    "parameter": "hop_sec",
                    "hop_sec": self.hop_sec,
                    "frame_sec": self.frame_sec,
                },
            )

        if self.f0_min_hz >= self.f0_max_hz:
            raise FeatureConfigError(
                message=f"f0_min_hz ({self.f0_min_hz}) must be < f0_max_hz ({self.f0_max_hz})",
                code="INVALID_CONFIG",
                details={
                    "parameter": "f0_min_hz",
                    "f0_min_hz": self.f0_min_hz,
                    "f0_max_hz": self.f0_max_hz,
                },
            )

        if self.num_mel_filters < 1 or not 1 <= self.num_cepstral <= self.num_mel_filters:
            raise FeatureConfigError(
                message=(
                    f"num_cepstral ({self.num_cepstral}) must be between 1 and "
                    f"num_mel_filters ({self.num_mel_filters})"
                ),
                code="INVALID_CONFIG",
                details={
                    "parameter": "num_cepstral",
                    "num_cepstral": self.num_cepstral,
                    "num_mel_filters": self.num_mel_filters,
                },
            )

        if not 0.0 < self.rolloff_percent <= 1.0:
            raise FeatureConfigError(
                message=f"rolloff_percent must be in (0, 1], got {self.rolloff_percent}",
                code="INVALID_CONFIG",
                details={"parameter": "rolloff_percent", "value": self.rolloff_percent},
            )

        if self.pitch_tie_tolerance < 0 or self.rate_peak_ratio < 0 or self.log_floor < 0:
            raise FeatureConfigError(
                message="pitch_tie_tolerance, rate_peak_ratio and log_floor must be non-negative",
                code="INVALID_CONFIG",
                details={
                    "pitch_tie_tolerance": self.pitch_tie_tolerance,
                    "rate_peak_ratio": self.rate_peak_ratio,
                    "log_floor": self.log_floor,
                },
            )


DEFAULT_CONFIG = FeatureConfig()
