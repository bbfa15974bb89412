"""Structured JSON logging for the TaskFlow service.

Every line is one JSON object holding the standard fields (timestamp, level,
logger, message, request id), the service identity, and whatever the call
site passed through ``extra=``.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any

from .config import Settings
from .context import NO_REQUEST_ID, get_request_id

# anything on a record outside this set arrived through ``extra=``
_BUILTIN_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "request_id",
}


class JsonLogFormatter(logging.Formatter):
    """Render log records as single-line JSON documents."""

    def __init__(self, *, service: str, environment: str) -> None:
        super().__init__()
        self._identity = {"service": service, "environment": environment}

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", NO_REQUEST_ID),
            **self._identity,
        }
        for key, value in vars(record).items():
            if key not in _BUILTIN_RECORD_ATTRS:
                payload.setdefault(key, value)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class RequestContextFilter(logging.Filter):
    """Stamp records with the id of the request being handled."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        record.request_id = get_request_id()
        return True


def configure_logging(settings: Settings) -> None:
    """Route every logger through one JSON handler on stdout.

    Uvicorn is started with ``log_config=None``, so its loggers propagate
    here as well.
    """

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": JsonLogFormatter,
                    "service": settings.project_name,
                    "environment": settings.environment,
                }
            },
            "filters": {"request_context": {"()": RequestContextFilter}},
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "json",
                    "filters": ["request_context"],
                }
            },
            "root": {"handlers": ["stdout"], "level": level},
        }
    )


__all__ = ["JsonLogFormatter", "RequestContextFilter", "configure_logging"]
