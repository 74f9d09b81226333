"""
Structured logging configuration.

Call configure_logging() once at app startup. Every record is written as a
single JSON object so log sinks can parse request context.
"""
import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, Optional

_REQUEST_LOGGER = "src.requests"


class JsonFormatter(logging.Formatter):
    """Render log records as one-line JSON entries."""

    def __init__(self, include_stack: bool = True):
        super().__init__()
        self.include_stack = include_stack

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = getattr(record, "context", None)
        if context:
            entry["context"] = context
        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            entry["error"] = {"name": type(exc).__name__, "message": str(exc)}
            if self.include_stack:
                entry["error"]["stack"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: int | str = logging.INFO, production: bool = False) -> None:
    """Configure root logger with JSON output.

    In production only WARNING and above are emitted and stack traces are
    left out of error entries.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter(include_stack=not production))
    logging.basicConfig(
        level=logging.WARNING if production else level,
        handlers=[handler],
        force=True,
    )
    # Suppress noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def log_request(
    method: str,
    endpoint: str,
    user_id: Optional[str] = None,
    status_code: Optional[int] = None,
    duration_ms: Optional[float] = None,
    **extra: Any,
) -> None:
    """Emit the single info entry for a completed request."""
    logging.getLogger(_REQUEST_LOGGER).info(
        "API Request",
        extra={"context": {
            "method": method,
            "endpoint": endpoint,
            "userId": user_id,
            "statusCode": status_code,
            "duration": duration_ms,
            **extra,
        }},
    )


def log_error(
    error: BaseException,
    method: str,
    endpoint: str,
    user_id: Optional[str] = None,
    status_code: Optional[int] = None,
    **extra: Any,
) -> None:
    """Emit the error entry for a failed request, with the original cause attached."""
    cause = error.__cause__ or error
    logging.getLogger(_REQUEST_LOGGER).error(
        "API Error: %s %s", method, endpoint,
        exc_info=(type(cause), cause, cause.__traceback__),
        extra={"context": {
            "method": method,
            "endpoint": endpoint,
            "userId": user_id,
            "statusCode": status_code,
            **extra,
        }},
    )
