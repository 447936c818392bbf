"""Configuration management for the emotion recognition service.

Settings come from environment variables (or a ``.env`` file) through
pydantic-settings, with defaults suitable for local development.

Example:
    >>> from api.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.app_name)
    Speech Emotion Service
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Environment variables use uppercase names matching the attribute names,
    e.g. ``MODEL_PATH=/var/lib/emotion/model.json``.

    Attributes:
        app_name: Name of the application for OpenAPI docs.
        app_version: API version string.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        model_path: JSON parameter blob loaded at startup and written after
            training. None keeps the model in memory only.
        target_sample_rate: Sample rate audio is resampled to before
            feature extraction.
        max_duration_sec: Maximum allowed audio duration in seconds.
        include_scores_default: Whether /predict includes per-label scores
            when the request does not say.
        seed: Seed for weight initialisation and shuffling.
        max_train_files: Upper bound on files accepted by one /train call.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=(),
    )

    # Application settings
    app_name: str = "Speech Emotion Service"
    app_version: str = "2.1.0"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Model settings
    model_path: Path | None = None
    seed: int | None = None

    # Audio settings
    target_sample_rate: int = 16000
    max_duration_sec: float = 600.0

    # Request limits and defaults
    max_train_files: int = 5000
    include_scores_default: bool = False


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loaded once from the environment."""
    return Settings()
