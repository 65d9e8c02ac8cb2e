"""Structured JSON logging for the TaskFlow service.

Every line carries the service name, environment, request id and the id of
the authenticated actor (``null`` for anonymous requests), followed by any
``extra`` fields the caller supplied.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any

from .config import Settings
from .context import get_actor_id, get_request_id

_STANDARD_RECORD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "message",
    "asctime",
    "taskName",
}
_CONTEXT_FIELDS = ("request_id", "actor_id")


class JsonLogFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def __init__(self, *, defaults: dict[str, Any] | None = None) -> None:
        super().__init__()
        self._defaults = dict(defaults or {})

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **self._defaults,
            "request_id": getattr(record, "request_id", get_request_id()),
            "actor_id": getattr(record, "actor_id", get_actor_id()),
        }
        for key, value in record.__dict__.items():
            if key in _STANDARD_RECORD_ATTRS or key in _CONTEXT_FIELDS:
                continue
            payload.setdefault(key, _json_safe(value))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _json_safe(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class RequestContextFilter(logging.Filter):
    """Copy the request and actor ids from the current context onto each record.

    An ``actor_id`` passed explicitly through ``extra`` wins over the context.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        record.request_id = get_request_id()
        if getattr(record, "actor_id", None) is None:
            record.actor_id = get_actor_id()
        return True


def configure_logging(settings: Settings) -> None:
    """Route all loggers through one JSON handler on stdout."""

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.captureWarnings(True)
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": JsonLogFormatter,
                    "defaults": {
                        "service": settings.project_name,
                        "environment": settings.environment,
                    },
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
            "loggers": {
                # Uvicorn's own lines are re-rendered as JSON; its access log is
                # replaced by ``taskflow.access`` from the correlation middleware.
                "uvicorn": {"handlers": ["stdout"], "level": level, "propagate": False},
                "uvicorn.error": {"handlers": ["stdout"], "level": level, "propagate": False},
                "uvicorn.access": {"handlers": [], "level": logging.WARNING, "propagate": False},
            },
        }
    )


__all__ = ["JsonLogFormatter", "RequestContextFilter", "configure_logging"]
