"""Structured JSON logging with credential redaction."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import TextIO

LOGGER = logging.getLogger(__name__)

_STRUCTURED_RESERVED_KEYS: tuple[str, ...] = (
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
)

SENSITIVE_KEYS: frozenset[str] = frozenset(
    {"authorization", "secret_key", "secret", "signature", "api_key"}
)
REDACTED = "***"


class JsonFormatter(logging.Formatter):
    """Render log records as JSON, masking credential-bearing context keys."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - inherited
        exception_text: str | None = None
        if record.exc_info:
            exception_text = self.formatException(record.exc_info)
        elif record.exc_text:
            exception_text = record.exc_text

        context: dict[str, object] = {}
        for key, value in record.__dict__.items():
            if key in _STRUCTURED_RESERVED_KEYS:
                continue
            context[key] = REDACTED if key.lower() in SENSITIVE_KEYS else value

        payload: dict[str, object] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "context": context,
        }
        if exception_text:
            payload["exception"] = exception_text

        return json.dumps(payload, default=str)


def configure_structured_logging(
    logger: logging.Logger | None = None,
    *,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Attach a JSON stream handler to ``logger`` (default: the package logger).

    Calling this again on the same logger returns the existing handler.

    Returns:
        The handler emitting JSON records.
    """

    target = logger or logging.getLogger("iyzipay_client")
    target.setLevel(level)
    for handler in target.handlers:
        if isinstance(handler.formatter, JsonFormatter):
            return handler

    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    target.addHandler(handler)
    return handler
