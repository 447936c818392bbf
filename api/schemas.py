"""Pydantic schemas for API request/response models.

Example:
    >>> from api.schemas import PredictResponse
    >>> response = PredictResponse(
    ...     label="happy",
    ...     confidence=0.41,
    ...     probabilities=[0.1, 0.05, 0.41, 0.1, 0.1, 0.08, 0.08, 0.08],
    ...     model_name="EmotiNet-RAVDESS v2.1.0",
    ...     is_trained=True,
    ...     duration_sec=2.5,
    ... )
"""

from typing import Any

from pydantic import BaseModel, Field


# =============================================================================
# Health Endpoint
# =============================================================================


class HealthResponse(BaseModel):
    """Response schema for /health endpoint."""

    status: str = Field(
        default="ok",
        description="Service status",
        examples=["ok"],
    )
    model_name: str = Field(
        description="Classifier name and version",
        examples=["EmotiNet-RAVDESS v2.1.0"],
    )
    is_trained: bool = Field(
        description="False while predictions come from the rule-based fallback",
    )


# =============================================================================
# Model Endpoints
# =============================================================================


class ModelInfoResponse(BaseModel):
    """Response schema for GET /model and POST /model/reset."""

    name: str = Field(examples=["EmotiNet-RAVDESS"])
    version: str = Field(examples=["v2.1.0"])
    architecture: str = Field(examples=["Neural Network (2-layer MLP)"])
    input_features: int = Field(ge=1, examples=[20])
    hidden_units: int = Field(ge=1, examples=[64])
    output_classes: int = Field(ge=1, examples=[8])
    learning_rate: float = Field(gt=0.0, examples=[0.01])
    epochs: int = Field(ge=0, examples=[100])
    emotions: list[str]
    feature_names: list[str]
    is_trained: bool
    training_status: str = Field(examples=["Trained", "Using rule-based prediction"])


# =============================================================================
# Predict Endpoint
# =============================================================================


class PredictResponse(BaseModel):
    """Response schema for /predict endpoint (single-clip emotion)."""

    label: str = Field(
        description="Predicted emotion label",
        examples=["happy", "sad", "angry", "neutral"],
    )
    confidence: float = Field(
        ge=0.0,
        le=1.0,
        description="Probability of the predicted label",
        examples=[0.41],
    )
    probabilities: list[float] = Field(
        description="Probabilities of all labels, in the order of GET /model emotions",
    )
    scores: dict[str, float] | None = Field(
        default=None,
        description="Per-label probabilities keyed by label (if include_scores=true)",
    )
    model_name: str = Field(
        description="Name of the model used for prediction",
        examples=["EmotiNet-RAVDESS v2.1.0"],
    )
    is_trained: bool = Field(
        description="False when the rule-based fallback produced the prediction",
    )
    duration_sec: float = Field(
        ge=0.0,
        description="Duration of the input audio in seconds",
        examples=[2.5],
    )


# =============================================================================
# Train Endpoint
# =============================================================================


class TrainingReportSchema(BaseModel):
    """Outcome of one training run."""

    num_samples: int = Field(ge=0, description="Samples used for updates")
    num_skipped: int = Field(ge=0, description="Samples skipped for an unknown label")
    epochs_completed: int = Field(ge=0)
    final_loss: float | None = Field(default=None, description="Mean loss of the last epoch")
    cancelled: bool = False


class CorpusSummarySchema(BaseModel):
    """File counts of the uploaded corpus."""

    total_files: int = Field(ge=0)
    trainable_files: int = Field(ge=0, description="Files with a known RAVDESS emotion code")
    num_actors: int = Field(ge=0)
    by_actor: dict[str, int]
    by_emotion: dict[str, int]


class TrainResponse(BaseModel):
    """Response schema for /train endpoint."""

    report: TrainingReportSchema
    corpus: CorpusSummarySchema
    skipped_files: list[str] = Field(
        default_factory=list,
        description="Uploads that were not used (unknown emotion or undecodable audio)",
    )
    saved: bool = Field(description="Whether the parameters were written to the model path")
    model: ModelInfoResponse


# =============================================================================
# Error Response
# =============================================================================


class ErrorDetail(BaseModel):
    """Error detail schema."""

    code: str = Field(
        description="Machine-readable error code",
        examples=["INVALID_AUDIO", "INVALID_INPUT", "TRAINING_FAILED"],
    )
    message: str = Field(
        description="Human-readable error message",
        examples=["Failed to decode WAV bytes"],
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error context",
    )


class ApiErrorResponse(BaseModel):
    """Standard error response wrapper."""

    error: ErrorDetail
