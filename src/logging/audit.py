"""Structured JSON logging for the chat proxy.

One JSON line per record on stdout (plus AUDIT_LOG_FILE when set). Fields
describing the request in flight (request id, caller, provider) live in a
context variable and are stamped onto every record; per-event fields go
in `extra={"audit_data": {...}}`.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone

from src.config.settings import get_settings

LOGGER_NAME = "proxy.audit"

_request_context: ContextVar[dict] = ContextVar("request_context", default={})


def bind_request(caller_id: str) -> str:
    """Start the log context for one proxied request. Returns its request id."""
    request_id = uuid.uuid4().hex[:12]
    _request_context.set({"request_id": request_id, "caller_id": caller_id})
    return request_id


def bind(**fields) -> None:
    """Add fields to the current request's log context."""
    _request_context.set({**_request_context.get(), **fields})


def request_context() -> dict:
    return dict(_request_context.get())


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            **_request_context.get(),
            **getattr(record, "audit_data", {}),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging() -> None:
    settings = get_settings()
    formatter = JSONFormatter()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.audit_log_file:
        handlers.append(logging.FileHandler(settings.audit_log_file))

    logger = get_audit_logger()
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    logger.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.propagate = False


def get_audit_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def elapsed_ms(started: float) -> float:
    """Milliseconds since a `time.perf_counter()` reading."""
    return round((time.perf_counter() - started) * 1000, 2)
