"""Error handling and HTTP mapping for the API.

Error Code Mapping:
    - AudioDecodeError -> 400 INVALID_AUDIO
    - AudioValidationError, AudioPreprocessError, FeatureError,
      CorpusError -> 422 INVALID_INPUT
    - ShapeMismatchError, ParameterBlobError, InferenceError
      -> 422 INVALID_MODEL_INPUT
    - TrainingError -> 422 TRAINING_FAILED
    - ModelLoadError -> 500 MODEL_LOAD_FAILED
    - Generic exceptions -> 500 INTERNAL_ERROR

Every error body has the shape ``{"error": {"code", "message", "details"}}``.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from audioio.errors import AudioDecodeError, AudioIOError
from corpus.errors import CorpusError
from features.errors import FeatureError
from model.errors import (
    InferenceError,
    ModelError,
    ModelLoadError,
    ParameterBlobError,
    ShapeMismatchError,
    TrainingError,
)

from .schemas import ApiErrorResponse, ErrorDetail


logger = logging.getLogger(__name__)


# =============================================================================
# API Exception Classes
# =============================================================================


class ApiError(Exception):
    """Base exception for API errors.

    Attributes:
        status_code: HTTP status code to return.
        code: Machine-readable error code.
        message: Human-readable error message.
        details: Optional additional context.
    """

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        self.details = details


class InvalidAudioError(ApiError):
    """Audio cannot be decoded or read."""

    status_code = 400
    code = "INVALID_AUDIO"
    default_message = "Failed to decode audio file"


class InvalidInputError(ApiError):
    """Request input failed validation."""

    status_code = 422
    code = "INVALID_INPUT"
    default_message = "Invalid input"


class InvalidModelInputError(ApiError):
    """Feature vector or parameter blob does not fit the classifier."""

    status_code = 422
    code = "INVALID_MODEL_INPUT"
    default_message = "Input does not match the model"


class TrainingFailedError(ApiError):
    """Training could not run or diverged."""

    status_code = 422
    code = "TRAINING_FAILED"
    default_message = "Training failed"


class ModelLoadFailedError(ApiError):
    """Stored parameters could not be loaded."""

    status_code = 500
    code = "MODEL_LOAD_FAILED"
    default_message = "Failed to load model"


class InternalError(ApiError):
    """Unexpected internal error."""


# =============================================================================
# Error Mapping Functions
# =============================================================================


# First match wins; subclasses before their bases.
_ERROR_MAP: list[tuple[type[Exception], type[ApiError]]] = [
    (AudioDecodeError, InvalidAudioError),
    (AudioIOError, InvalidInputError),
    (FeatureError, InvalidInputError),
    (CorpusError, InvalidInputError),
    (ShapeMismatchError, InvalidModelInputError),
    (ParameterBlobError, InvalidModelInputError),
    (InferenceError, InvalidModelInputError),
    (TrainingError, TrainingFailedError),
    (ModelLoadError, ModelLoadFailedError),
]


def map_exception_to_api_error(exc: Exception) -> ApiError:
    """Map an internal exception to an API error with HTTP status and code."""
    if isinstance(exc, ApiError):
        return exc

    for exc_type, api_error_type in _ERROR_MAP:
        if isinstance(exc, exc_type):
            if isinstance(exc, AudioIOError):
                details = exc.to_dict()
            else:
                details = {**exc.details, "reason": exc.code}
            return api_error_type(message=exc.message, details=details)

    return InternalError(
        message=str(exc) or "An unexpected error occurred",
        details={"exception_type": type(exc).__name__},
    )


def create_error_response(api_error: ApiError) -> ApiErrorResponse:
    """Wrap an API error in the standard response body."""
    return ApiErrorResponse(
        error=ErrorDetail(
            code=api_error.code,
            message=api_error.message,
            details=api_error.details,
        )
    )


# =============================================================================
# Exception Handlers
# =============================================================================


async def api_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Turn any exception into a structured JSON error response."""
    request_id = getattr(request.state, "request_id", "unknown")
    api_error = map_exception_to_api_error(exc)

    if api_error.status_code >= 500:
        logger.error(
            "Internal error: code=%s message=%s request_id=%s",
            api_error.code,
            api_error.message,
            request_id,
            exc_info=exc,
        )
    else:
        logger.warning(
            "Request error: code=%s message=%s request_id=%s",
            api_error.code,
            api_error.message,
            request_id,
        )

    response = create_error_response(api_error)
    return JSONResponse(
        status_code=api_error.status_code,
        content=response.model_dump(),
        headers={"X-Request-ID": request_id},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers for API and domain errors on ``app``."""
    app.add_exception_handler(ApiError, api_exception_handler)

    for exc_type in (AudioIOError, FeatureError, CorpusError, ModelError):
        app.add_exception_handler(exc_type, api_exception_handler)

    # Catch-all for unexpected errors
    app.add_exception_handler(Exception, api_exception_handler)
