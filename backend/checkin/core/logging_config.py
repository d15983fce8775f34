"""
Logging setup for the check-in service.

Development logs are one readable line per record; production logs are one
JSON object per line. Both carry the request id set by
RequestLoggingMiddleware, so the log lines of a submission can be grouped.
"""
import json
import logging
import logging.config
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from checkin.core.config import settings

request_id_context: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Copied from `extra=` into JSON entries; anything else (answers, tokens) stays out
_STRUCTURED_FIELDS = (
    "method",
    "path",
    "status_code",
    "duration_ms",
    "client_host",
    "user_identifier",
    "user_id",
    "quiz_id",
    "classification",
    "error_id",
)

DEV_FORMAT = "%(asctime)s %(levelname)-7s [%(request_id)s] %(name)s: %(message)s"


class RequestIdFilter(logging.Filter):
    """Attach the current request id (or "-") to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_context.get() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for the production log pipeline."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "service": settings.APP_NAME,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = request_id_context.get()
        if request_id:
            log_entry["request_id"] = request_id

        for field in _STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.levelno >= logging.ERROR:
            log_entry["source"] = f"{record.pathname}:{record.lineno}"
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def build_logging_config(level: int, json_output: bool) -> Dict[str, Any]:
    """
    Build the dictConfig for the service.

    Args:
        level: Level for the root and "checkin" loggers
        json_output: Use JSONFormatter instead of the readable format

    Returns:
        A dictionary accepted by logging.config.dictConfig
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"request_id": {"()": RequestIdFilter}},
        "formatters": {
            "default": {"format": DEV_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
            "json": {"()": JSONFormatter},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "json" if json_output else "default",
                "filters": ["request_id"],
                "stream": sys.stdout,
            },
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {
            "checkin": {"level": level, "handlers": ["console"], "propagate": False},
            # RequestLoggingMiddleware already logs every request
            "uvicorn.access": {
                "level": logging.WARNING,
                "handlers": ["console"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": logging.WARNING,
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def setup_logging() -> None:
    """Configure logging from LOG_LEVEL and ENV."""
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.config.dictConfig(
        build_logging_config(level, json_output=settings.ENV == "production")
    )
