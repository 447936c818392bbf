"""FastAPI service for speech emotion recognition.

Endpoints:
- /health: Service health check
- /model: Classifier description and reset
- /predict: Single-clip emotion prediction
- /train: Training on uploaded RAVDESS clips

Example:
    To run the API server:

    $ uvicorn api.main:app --host 0.0.0.0 --port 8000
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
