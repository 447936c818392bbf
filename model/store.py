"""JSON persistence for classifier parameters.

The classifier never touches storage itself; these helpers move its
parameter blob to and from a file.
"""

import json
import logging
from pathlib import Path

from .classifier import EmotionClassifier
from .errors import ModelLoadError


logger = logging.getLogger(__name__)


def save_parameters(classifier: EmotionClassifier, path: str | Path) -> Path:
    """Write the classifier's parameter blob to ``path`` as JSON.

    Parent directories are created as needed. The file is written to a
    temporary sibling first and then renamed, so readers never see a
    partial blob.

    Returns:
        The path written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    blob = classifier.export_parameters()
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(json.dumps(blob), encoding="utf-8")
    tmp_path.replace(path)

    logger.info("Saved model parameters to %s (is_trained=%s)", path, blob["is_trained"])
    return path


def load_parameters(
    path: str | Path,
    classifier: EmotionClassifier | None = None,
) -> EmotionClassifier:
    """Load a parameter blob from ``path`` into a classifier.

    Args:
        path: JSON file written by ``save_parameters``.
        classifier: Classifier to load into. If None, a default
            ``EmotionClassifier`` is created.

    Returns:
        The classifier holding the loaded parameters.

    Raises:
        ModelLoadError: If the file is missing (MODEL_NOT_FOUND) or is not
            valid JSON (LOAD_FAILED).
        ParameterBlobError: If the blob is structurally invalid.
        ShapeMismatchError: If the blob does not fit the classifier.
    """
    path = Path(path)
    if not path.exists():
        raise ModelLoadError(
            message=f"Model parameter file not found: {path}",
            code="MODEL_NOT_FOUND",
            details={"path": str(path)},
        )

    try:
        blob = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ModelLoadError(
            message=f"Failed to read model parameters: {e}",
            code="LOAD_FAILED",
            details={"path": str(path), "error": str(e)},
        ) from e

    if classifier is None:
        classifier = EmotionClassifier()

    classifier.import_parameters(blob)
    logger.info("Loaded model parameters from %s (is_trained=%s)", path, classifier.is_trained)
    return classifier
