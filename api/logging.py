"""Structured logging and per-request context for the emotion service.

Log lines are ``key=value`` pairs. Besides the fixed fields, any value passed
through ``extra=`` (label, confidence, epochs, ...) is rendered as its own
field, so prediction and training events can be grepped by outcome.

Example:
    >>> import logging
    >>> from api.logging import setup_logging
    >>> setup_logging("INFO")
    >>> logging.getLogger("api.main").info("Prediction complete", extra={"label": "calm"})
"""

import logging
import logging.config
import time
import uuid
from contextvars import ContextVar
from typing import Any, Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Attributes every LogRecord carries; anything else came in through ``extra=``
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

_QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "python_multipart")


def _escape(text: str) -> str:
    return text.replace("\n", " | ").replace('"', '\\"')


def _quote(value: Any) -> str:
    text = _escape(str(value))
    return f'"{text}"' if " " in text or not text else text


class StructuredFormatter(logging.Formatter):
    """One ``key=value`` line per record.

    Fixed fields come first (timestamp, level, logger, request_id, message),
    followed by ``extra`` fields in the order they were passed and finally
    the exception, if any.
    """

    def format(self, record: logging.LogRecord) -> str:
        fields: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "request_id": request_id_var.get() or "-",
            "message": f'"{_escape(record.getMessage())}"',
        }
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                fields[key] = _quote(value)
        if record.exc_info:
            fields["exception"] = f'"{_escape(self.formatException(record.exc_info))}"'

        return " ".join(f"{key}={value}" for key, value in fields.items())


def setup_logging(log_level: str = "INFO") -> None:
    """Send every logger through one structured stdout handler.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR).
    """
    level = log_level.upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structured": {
                    "()": StructuredFormatter,
                    "datefmt": "%Y-%m-%dT%H:%M:%S%z",
                },
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "structured",
                    "level": level,
                },
            },
            "root": {"handlers": ["stdout"], "level": level},
            "loggers": {name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
        }
    )


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Request ID, timing and classifier state for every request.

    Reuses an incoming ``X-Request-ID`` or generates a UUID4, exposes it to
    log records through ``request_id_var``, and answers with three headers:
    ``X-Request-ID``, ``X-Response-Time`` and ``X-Model-State`` ("trained"
    or "rules"). The access line records which model served the request.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start_time) * 1000
            classifier = request.app.state.service.classifier
            model_state = "trained" if classifier.is_trained else "rules"

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
            response.headers["X-Model-State"] = model_state

            logging.getLogger("api.access").info(
                "%s %s -> %d",
                request.method,
                request.url.path,
                response.status_code,
                extra={
                    "duration_ms": round(duration_ms, 2),
                    "model": classifier.name,
                    "model_state": model_state,
                },
            )
            return response
        finally:
            request_id_var.reset(token)


def add_middleware(app: FastAPI) -> None:
    """Install the request context middleware on ``app``."""
    app.add_middleware(RequestContextMiddleware)
