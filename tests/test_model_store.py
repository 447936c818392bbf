"""Tests for JSON persistence of classifier parameters."""

import json

import pytest

from model import (
    EmotionClassifier,
    ModelLoadError,
    ParameterBlobError,
    TrainingSample,
    load_parameters,
    save_parameters,
)


@pytest.fixture
def trained_classifier() -> EmotionClassifier:
    classifier = EmotionClassifier(seed=0, epochs=3)
    classifier.train(
        [
            TrainingSample([1.0] * 20, "happy"),
            TrainingSample([-1.0] * 20, "sad"),
        ]
    )
    return classifier


class TestSaveParameters:
    """Tests for save_parameters."""

    def test_writes_json_blob(self, tmp_path, trained_classifier):
        path = save_parameters(trained_classifier, tmp_path / "model.json")

        blob = json.loads(path.read_text(encoding="utf-8"))
        assert blob == trained_classifier.export_parameters()
        assert not (tmp_path / "model.json.tmp").exists()

    def test_creates_parent_directories(self, tmp_path, trained_classifier):
        path = save_parameters(trained_classifier, tmp_path / "nested" / "dir" / "model.json")
        assert path.exists()

    def test_overwrites(self, tmp_path, trained_classifier):
        path = tmp_path / "model.json"
        save_parameters(EmotionClassifier(seed=1), path)
        save_parameters(trained_classifier, path)
        assert json.loads(path.read_text(encoding="utf-8"))["is_trained"] is True


class TestLoadParameters:
    """Tests for load_parameters."""

    def test_round_trip(self, tmp_path, trained_classifier):
        path = save_parameters(trained_classifier, tmp_path / "model.json")

        loaded = load_parameters(path)

        assert loaded.is_trained
        vector = [0.2] * 20
        assert loaded.predict_proba(vector) == pytest.approx(trained_classifier.predict_proba(vector))

    def test_loads_into_existing_instance(self, tmp_path, trained_classifier):
        path = save_parameters(trained_classifier, tmp_path / "model.json")
        target = EmotionClassifier(seed=5)

        assert load_parameters(str(path), target) is target
        assert target.is_trained

    def test_missing_file(self, tmp_path):
        with pytest.raises(ModelLoadError) as exc_info:
            load_parameters(tmp_path / "missing.json")
        assert exc_info.value.code == "MODEL_NOT_FOUND"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "model.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ModelLoadError) as exc_info:
            load_parameters(path)
        assert exc_info.value.code == "LOAD_FAILED"

    def test_invalid_blob(self, tmp_path):
        path = tmp_path / "model.json"
        path.write_text(json.dumps({"weights": []}), encoding="utf-8")

        with pytest.raises(ParameterBlobError):
            load_parameters(path)
