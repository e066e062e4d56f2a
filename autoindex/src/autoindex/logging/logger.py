"""JSON logging for autoindex.

Every record is rendered as one JSON object. Anything passed through
``extra=`` (field names, statements, tiers) becomes a top-level key, and the
active OpenTelemetry span is attached so that log lines line up with the
``autoindex.reactor`` and ``autoindex.gateway`` spans.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Set

from opentelemetry import trace

# Attributes every LogRecord carries; only keys outside this set came from ``extra=``
_STANDARD_ATTRIBUTES: Set[str] = set(
    logging.LogRecord("autoindex", logging.INFO, __file__, 0, "", (), None).__dict__
) | {"asctime", "message"}

# Library loggers that are chatty at INFO and above the interesting signal
_NOISY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _span_ids() -> Dict[str, str]:
    context = trace.get_current_span().get_span_context()
    if not context.is_valid:
        return {}
    return {
        "trace_id": f"{context.trace_id:032x}",
        "span_id": f"{context.span_id:016x}",
    }


class JsonLogFormatter(logging.Formatter):
    """Render log records as single-line JSON with trace correlation."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRIBUTES
        )
        payload.update(_span_ids())

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def setup_logging(level: Optional[str] = None) -> None:
    """Install the JSON console handler on the root logger.

    Args:
        level: Base log level; ``settings.log_level`` when omitted.
    """
    if level is None:
        from autoindex.settings import get_settings
        level = get_settings().log_level
    level = level.upper()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": "autoindex.logging.logger.JsonLogFormatter"},
        },
        "filters": {
            "schema_context": {"()": "autoindex.logging.filters.ContextFilter"},
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "filters": ["schema_context"],
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            name: {"level": "WARNING"} for name in _NOISY_LOGGERS
        },
        "root": {"level": level, "handlers": ["stdout"]},
    })
