"""Custom exceptions for feature extraction."""

from typing import Any


class FeatureError(Exception):
    """Base exception for all feature extraction errors.

    Attributes:
        message: Human-readable error description.
        code: Short error code string (e.g., "INVALID_INPUT").
        details: Optional dictionary with additional context.
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        """Return formatted error string."""
        if self.details:
            return f"[{self.code}] {self.message} (details: {self.details})"
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        """Return repr string."""
        return f"{self.__class__.__name__}(message={self.message!r}, code={self.code!r}, details={self.details!r})"


class FeatureConfigError(FeatureError):
    """Raised when a FeatureConfig holds inconsistent parameters.

    Common codes:
        - INVALID_CONFIG: A parameter is out of range or contradicts another.
    """
    pass


class FeatureInputError(FeatureError):
    """Raised when the signal handed to an extractor is malformed.

    Common codes:
        - INVALID_INPUT: Non-positive sample rate, multi-channel data,
          or non-finite samples.
    """
    pass
