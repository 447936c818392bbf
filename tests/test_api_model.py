"""Tests for the /model and /model/reset API endpoints."""

import json

import pytest
from fastapi.testclient import TestClient

from api.config import Settings
from api.main import create_app
from model import EmotionClassifier, TrainingSample, save_parameters


@pytest.fixture
def model_path(tmp_path):
    """A stored, trained parameter blob."""
    classifier = EmotionClassifier(seed=0, epochs=2)
    classifier.train([TrainingSample([0.5] * 20, "happy"), TrainingSample([-0.5] * 20, "sad")])
    return save_parameters(classifier, tmp_path / "model.json")


@pytest.fixture
def client(model_path) -> TestClient:
    return TestClient(create_app(Settings(model_path=model_path, seed=0)))


class TestModelInfo:
    """Tests for GET /model."""

    def test_describes_classifier(self, client: TestClient) -> None:
        response = client.get("/model")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "EmotiNet-RAVDESS"
        assert data["version"] == "v2.1.0"
        assert data["input_features"] == 20
        assert data["hidden_units"] == 64
        assert data["output_classes"] == 8
        assert data["emotions"][0] == "neutral"
        assert data["feature_names"][0] == "spectral_centroid"
        assert data["is_trained"] is True
        assert data["training_status"] == "Trained"


class TestModelReset:
    """Tests for POST /model/reset."""

    def test_reset_returns_untrained(self, client: TestClient) -> None:
        response = client.post("/model/reset")

        assert response.status_code == 200
        assert response.json()["is_trained"] is False
        assert client.get("/health").json()["is_trained"] is False

    def test_reset_persists(self, client: TestClient, model_path) -> None:
        client.post("/model/reset")

        blob = json.loads(model_path.read_text(encoding="utf-8"))
        assert blob["is_trained"] is False

    def test_reset_without_model_path(self) -> None:
        client = TestClient(create_app(Settings(seed=0)))

        response = client.post("/model/reset")

        assert response.status_code == 200
        assert response.json()["training_status"] == "Using rule-based prediction"
