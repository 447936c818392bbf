"""Exceptions raised while decoding, validating and preprocessing audio.

Each subclass belongs to one pipeline stage (``decode``, ``validate``,
``preprocess`` or ``config``). The stage travels with the error so the
corpus builder can log where a clip was dropped and the API can report it
next to the error code.
"""

from typing import Any, ClassVar


class AudioIOError(Exception):
    """Base exception for the audio pipeline.

    Attributes:
        message: Human-readable error description.
        code: Short error code, e.g. "INVALID_WAV" or "TOO_LONG".
        details: Offending values (duration, sample rate, channel count).
        stage: Pipeline stage that rejected the clip.
    """

    stage: ClassVar[str] = "audio"

    def __init__(self, message: str, code: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"[{self.code}] {self.message} (details: {self.details})"
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(stage={self.stage!r}, code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """Error context for API responses: details plus stage and code."""
        return {**self.details, "stage": self.stage, "reason": self.code}


class AudioConfigError(AudioIOError):
    """AudioConfig holds out-of-range values (INVALID_CONFIG)."""

    stage = "config"


class AudioDecodeError(AudioIOError):
    """The upload or file could not be turned into samples.

    Codes: FILE_NOT_FOUND, EMPTY_FILE, INVALID_WAV, EMPTY_AUDIO.
    """

    stage = "decode"


class AudioValidationError(AudioIOError):
    """Decoded samples fall outside what the feature extractor accepts.

    Codes: INVALID_DTYPE, EMPTY_AUDIO, NON_FINITE, INVALID_SAMPLE_RATE,
    TOO_SHORT, TOO_LONG, TOO_MANY_CHANNELS. SILENCE only when
    ``AudioConfig.reject_silence`` is switched on.
    """

    stage = "validate"


class AudioPreprocessError(AudioIOError):
    """Mono mixdown or resampling failed.

    Codes: INVALID_SHAPE, UNSUPPORTED_CHANNELS, RESAMPLE_FAILED.
    """

    stage = "preprocess"
