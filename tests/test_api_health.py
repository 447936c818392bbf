"""Tests for the /health API endpoint."""

import pytest
from fastapi.testclient import TestClient

from api.config import Settings
from api.main import create_app


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with an in-memory model."""
    return Settings(
        app_name="Emotion Test Service",
        log_level="DEBUG",
        model_path=None,
        seed=0,
    )


@pytest.fixture
def client(test_settings: Settings) -> TestClient:
    """Create a test client with the app."""
    return TestClient(create_app(test_settings))


class TestHealthEndpoint:
    """Tests for GET /health endpoint."""

    def test_health_returns_ok(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "ok",
            "model_name": "EmotiNet-RAVDESS v2.1.0",
            "is_trained": False,
        }

    def test_health_has_request_id_header(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert len(response.headers["X-Request-ID"]) > 0

    def test_health_with_custom_request_id(self, client: TestClient) -> None:
        """An incoming X-Request-ID is echoed back."""
        response = client.get("/health", headers={"X-Request-ID": "test-request-123"})

        assert response.headers["X-Request-ID"] == "test-request-123"

    def test_health_has_timing_header(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.headers["X-Response-Time"].endswith("ms")

    def test_unknown_route(self, client: TestClient) -> None:
        assert client.get("/does-not-exist").status_code == 404


class TestStartupLoad:
    """The service loads stored parameters when the app is created."""

    def test_missing_model_file_starts_untrained(self, tmp_path) -> None:
        settings = Settings(model_path=tmp_path / "absent.json", seed=0)
        client = TestClient(create_app(settings))

        assert client.get("/health").json()["is_trained"] is False
        assert not (tmp_path / "absent.json").exists()

    def test_stored_trained_model_is_loaded(self, tmp_path) -> None:
        from model import EmotionClassifier, TrainingSample, save_parameters

        classifier = EmotionClassifier(seed=0, epochs=2)
        classifier.train([TrainingSample([0.5] * 20, "happy")])
        path = save_parameters(classifier, tmp_path / "model.json")

        client = TestClient(create_app(Settings(model_path=path, seed=0)))

        assert client.get("/health").json()["is_trained"] is True

    def test_unreadable_model_file_fails_startup(self, tmp_path) -> None:
        from model import ModelLoadError

        path = tmp_path / "model.json"
        path.write_text("{broken", encoding="utf-8")

        with pytest.raises(ModelLoadError):
            create_app(Settings(model_path=path, seed=0))
