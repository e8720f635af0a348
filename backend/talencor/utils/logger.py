"""
Structured logging. JSON lines in production, readable text elsewhere.
Sensitive fields passed through ``extra`` are redacted before formatting.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from talencor.config import get_settings

# LogRecord attributes that are not user-supplied extras
_RESERVED_ATTRS = frozenset((
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "message", "taskName",
))

SENSITIVE_KEYS = frozenset((
    "password",
    "access_code",
    "social_insurance_number",
    "session",
    "token",
))


class RedactingFilter(logging.Filter):
    """Replace values of sensitive extras with a placeholder."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key in SENSITIVE_KEYS:
            if key in record.__dict__:
                record.__dict__[key] = "[redacted]"
        return True


class JSONFormatter(logging.Formatter):
    """Format log records as JSON for production log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_obj[key] = value
        return json.dumps(log_obj, default=str)


def setup_logging() -> None:
    """Configure root logger with level and formatter from config."""
    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.addFilter(RedactingFilter())
        if settings.is_production:
            handler.setFormatter(JSONFormatter())
        else:
            handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
                )
            )
        root.addHandler(handler)
    # httpx logs every request URL at INFO, including Graph token endpoints
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name."""
    return logging.getLogger(name)
