"""Custom exceptions for the emotion classifier."""

from typing import Any


class ModelError(Exception):
    """Base exception for all model-related errors.

    Attributes:
        message: Human-readable error description.
        code: Short error code string (e.g., "SHAPE_MISMATCH").
        details: Optional dictionary with additional context.
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ModelError.

        Args:
            message: Human-readable error description.
            code: Short error code string.
            details: Optional dictionary with additional context.
        """
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


class ShapeMismatchError(ModelError):
    """Raised when a vector or parameter tensor has the wrong shape.

    Common codes:
        - SHAPE_MISMATCH: Feature vector length or weight matrix shape does
          not match the network architecture.
    """
    pass


class ParameterBlobError(ModelError):
    """Raised when an exported parameter blob cannot be imported.

    Common codes:
        - INVALID_BLOB: Missing keys, wrong types or non-numeric values.
        - LABEL_ORDER_MISMATCH: The blob was trained on a different label order.
    """
    pass


class TrainingError(ModelError):
    """Raised when a training run cannot start or cannot finish.

    Common codes:
        - NO_SAMPLES: The training set is empty.
        - TRAINING_DIVERGED: Parameters became NaN/Inf; the last finite
          epoch was restored.
    """
    pass


class ModelLoadError(ModelError):
    """Raised when persisted parameters cannot be loaded.

    Common codes:
        - MODEL_NOT_FOUND: The parameter file does not exist.
        - LOAD_FAILED: The file exists but is not valid JSON.
    """
    pass


class InferenceError(ModelError):
    """Raised when inference input cannot be interpreted.

    Common codes:
        - INVALID_INPUT: Feature vector is not numeric or not finite.
    """
    pass
