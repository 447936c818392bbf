"""FastAPI application for speech emotion recognition.

Endpoints:
- GET /health: Service health check
- GET /model: Classifier description
- POST /predict: Single-clip emotion prediction
- POST /train: Train on uploaded RAVDESS clips
- POST /model/reset: Discard training and return to rule-based prediction

Example:
    Run with uvicorn:

    $ uvicorn api.main:app --host 0.0.0.0 --port 8000
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from model import predict_clip

from .config import Settings, get_settings
from .deps import ClassifierService, get_service
from .errors import InvalidInputError, register_exception_handlers
from .logging import add_middleware, setup_logging
from .schemas import (
    CorpusSummarySchema,
    HealthResponse,
    ModelInfoResponse,
    PredictResponse,
    TrainingReportSchema,
    TrainResponse,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Application Lifecycle
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging on startup and log shutdown."""
    settings: Settings = app.state.settings

    setup_logging(settings.log_level)
    logger.info(
        "Starting %s v%s (model=%s trained=%s)",
        settings.app_name,
        settings.app_version,
        app.state.service.classifier.name,
        app.state.service.classifier.is_trained,
    )

    yield

    logger.info("Application shutdown")


# =============================================================================
# Application Factory
# =============================================================================


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    The classifier service is built (and stored parameters loaded) here
    rather than in the lifespan, so the app is usable without a running
    event loop lifecycle.

    Args:
        settings: Application settings. If None, loads from environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Speech Emotion Recognition API - predict emotions from speech clips and train on RAVDESS.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    service = ClassifierService(settings)
    service.load()
    app.state.settings = settings
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    add_middleware(app)
    register_exception_handlers(app)
    register_routes(app)

    return app


def register_routes(app: FastAPI) -> None:
    """Register all API routes on the application."""

    # =========================================================================
    # System
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health(
        service: Annotated[ClassifierService, Depends(get_service)],
    ) -> HealthResponse:
        classifier = service.classifier
        return HealthResponse(
            status="ok",
            model_name=classifier.name,
            is_trained=classifier.is_trained,
        )

    # =========================================================================
    # Model
    # =========================================================================

    @app.get(
        "/model",
        response_model=ModelInfoResponse,
        tags=["Model"],
        summary="Describe the classifier",
    )
    async def model_info(
        service: Annotated[ClassifierService, Depends(get_service)],
    ) -> ModelInfoResponse:
        return ModelInfoResponse(**service.classifier.describe())

    @app.post(
        "/model/reset",
        response_model=ModelInfoResponse,
        tags=["Model"],
        summary="Reset to an untrained classifier",
    )
    async def model_reset(
        service: Annotated[ClassifierService, Depends(get_service)],
    ) -> ModelInfoResponse:
        classifier = await run_in_threadpool(service.reset)
        return ModelInfoResponse(**classifier.describe())

    # =========================================================================
    # Predict
    # =========================================================================

    @app.post(
        "/predict",
        response_model=PredictResponse,
        tags=["Prediction"],
        summary="Predict emotion from audio",
        description="Predict the emotion of a single WAV clip.",
    )
    async def predict(
        request: Request,
        file: Annotated[UploadFile, File(description="WAV audio file")],
        service: Annotated[ClassifierService, Depends(get_service)],
        include_scores: Annotated[
            bool | None,
            Form(description="Include per-label probability scores"),
        ] = None,
    ) -> PredictResponse:
        settings: Settings = request.app.state.settings
        if include_scores is None:
            include_scores = settings.include_scores_default

        audio_bytes = await file.read()
        if not audio_bytes:
            raise InvalidInputError(
                message="Empty file uploaded",
                details={"filename": file.filename},
            )

        # Waits on the classifier lock while a training run is in progress
        start_time = time.perf_counter()
        result = await run_in_threadpool(
            predict_clip,
            audio_bytes,
            service.classifier,
            audio_config=service.audio_config,
            feature_config=service.feature_config,
        )
        inference_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            "Prediction complete",
            extra={
                "label": result.label,
                "confidence": round(result.confidence, 3),
                "trained": result.is_trained,
                "inference_ms": round(inference_ms, 2),
            },
        )

        return PredictResponse(
            label=result.label,
            confidence=float(result.confidence),
            probabilities=[float(p) for p in result.probabilities],
            scores=result.scores if include_scores else None,
            model_name=result.model_name,
            is_trained=result.is_trained,
            duration_sec=float(result.duration_sec),
        )

    # =========================================================================
    # Train
    # =========================================================================

    @app.post(
        "/train",
        response_model=TrainResponse,
        tags=["Training"],
        summary="Train on RAVDESS clips",
        description=(
            "Upload RAVDESS-named WAV files (e.g. 03-01-05-01-01-01-12.wav). "
            "The emotion is read from the file name; files with an unknown "
            "emotion code are counted but not used. Features are fed to the "
            "network unscaled (spectral centroid and rolloff are FFT bin "
            "indices in the thousands), so on real recordings training often "
            "diverges: the run is then rejected with 422 TRAINING_FAILED, "
            "reason TRAINING_DIVERGED, the parameters roll back to the last finite "
            "epoch and nothing is saved."
        ),
    )
    async def train(
        request: Request,
        files: Annotated[list[UploadFile], File(description="RAVDESS WAV files")],
        service: Annotated[ClassifierService, Depends(get_service)],
    ) -> TrainResponse:
        settings: Settings = request.app.state.settings
        if len(files) > settings.max_train_files:
            raise InvalidInputError(
                message=f"Too many files: {len(files)} > {settings.max_train_files}",
                details={"num_files": len(files), "max_train_files": settings.max_train_files},
            )

        uploads = [(file.filename or "upload.wav", await file.read()) for file in files]

        start_time = time.perf_counter()
        outcome = await run_in_threadpool(service.train_from_uploads, uploads)
        training_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            "Training complete",
            extra={
                "samples": outcome.report.num_samples,
                "epochs": outcome.report.epochs_completed,
                "final_loss": outcome.report.final_loss,
                "saved": outcome.saved,
                "training_ms": round(training_ms, 2),
            },
        )

        return TrainResponse(
            report=TrainingReportSchema(**outcome.report.to_dict()),
            corpus=CorpusSummarySchema(**outcome.summary.to_dict()),
            skipped_files=outcome.skipped_files,
            saved=outcome.saved,
            model=ModelInfoResponse(**service.classifier.describe()),
        )


# =============================================================================
# Application Instance
# =============================================================================


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
