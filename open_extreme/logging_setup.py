"""Structured JSON logging tagged with request and dataset identifiers.

Every line carries the screener's service name; inside an HTTP request it also
carries the ``X-Request-ID`` and, once a CSV is loaded, the dataset id so a
screen can be traced back to the upload it ran against.
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, TextIO

SERVICE_NAME = "open-extreme-screener"

# LogRecord attributes that never belong in the "extra" block.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}
_CONTEXT_KEYS = ("request_id", "dataset_id")

REQUEST_ID_CONTEXT: ContextVar[str | None] = ContextVar("request_id", default=None)
DATASET_ID_CONTEXT: ContextVar[str | None] = ContextVar("dataset_id", default=None)


class ContextFilter(logging.Filter):
    """Copy the active request and dataset identifiers onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = REQUEST_ID_CONTEXT.get()
        record.dataset_id = DATASET_ID_CONTEXT.get()
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line: envelope, context ids, then any ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - inherited docstring
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: Dict[str, Any] = {
            "ts": stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update({key: getattr(record, key) for key in _CONTEXT_KEYS if getattr(record, key, None)})

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and key not in _CONTEXT_KEYS and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra
        return json.dumps(payload, default=str, separators=(",", ":"))


_CONFIGURED = False


def setup_logging(level: int | str = logging.INFO, *, stream: TextIO | None = None) -> None:
    """Configure the root logger once; later calls are no-ops.

    The HTTP service logs to stdout. The CLI passes ``sys.stderr`` so its JSON
    result on stdout stays parseable.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    handler = logging.StreamHandler(stream=stream or sys.stdout)
    handler.setFormatter(JsonFormatter())
    handler.addFilter(ContextFilter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    logging.captureWarnings(True)
    _CONFIGURED = True


__all__ = [
    "SERVICE_NAME",
    "REQUEST_ID_CONTEXT",
    "DATASET_ID_CONTEXT",
    "ContextFilter",
    "JsonFormatter",
    "setup_logging",
]
