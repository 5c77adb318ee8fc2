"""
app/core/logging.py

Purpose: Logging configuration

- JSON lines in production, colored single lines in development
- Dialogue context (user, state, step, update) attached to every record
- Context is per asyncio task, so concurrent webhook calls never mix
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime
from typing import Any, Dict

from app.core.config import settings


# Record attributes a LogContext may set; rendered by both formatters
CONTEXT_FIELDS = ("update_id", "user_id", "state", "step")

_log_context: ContextVar[Dict[str, Any]] = ContextVar("cargolink_log_context", default={})

LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
RESET = "\033[0m"

QUIET_LOGGERS = ("httpx", "httpcore", "motor", "pymongo", "uvicorn.access")


class ContextFilter(logging.Filter):
    """Copies the active LogContext onto each record. Explicit `extra` values win."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def _context_of(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        field: getattr(record, field)
        for field in CONTEXT_FIELDS
        if getattr(record, field, None) is not None
    }


class StructuredFormatter(logging.Formatter):
    """One JSON object per line for the log collector."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.utcfromtimestamp(record.created).isoformat() + "Z",
            "level": record.levelname,
            "service": "cargolink",
            "logger": record.name,
            "msg": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update(_context_of(record))

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


class DevelopmentFormatter(logging.Formatter):
    """
    Readable single-line output:
        [12:00:01] INFO     cargolink.app.flow.engine: ➡️ basic_info/phone -> first_order/from_location [user=42]
    """

    def format(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelname, RESET)
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{color}[{clock}] {record.levelname:<8}{RESET} {record.name}: {record.getMessage()}"

        context = _context_of(record)
        if context:
            line += " [" + ", ".join(f"{key.replace('_id', '')}={value}" for key, value in context.items()) + "]"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


def setup_logging() -> logging.Logger:
    """
    Installs a stdout handler on the root logger.
    Safe to call more than once; the previous handler is replaced.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if settings.is_production else DevelopmentFormatter())
    handler.addFilter(ContextFilter())

    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger("cargolink")
    logger.info(f"Logging configured ({settings.ENVIRONMENT}, level={settings.LOG_LEVEL})")
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger under the "cargolink." namespace
    """
    return logging.getLogger(f"cargolink.{name}")


class LogContext:
    """
    Context manager for adding dialogue context to logs.

    Usage:
        with LogContext(user_id=123, state="basic_info", step="phone"):
            logger.info("Processing contact")

    Nested contexts add to the outer one.
    """

    def __init__(self, **kwargs):
        self.context = kwargs
        self._token = None

    def __enter__(self):
        self._token = _log_context.set({**_log_context.get(), **self.context})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _log_context.reset(self._token)
