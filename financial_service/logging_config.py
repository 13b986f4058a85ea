"""
Structured Logging Configuration Module

JSON (or plain text) log output for ledger and review operations. Records
carry the correlation id of the request being served, set by the API layer
through correlation_context().
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional
import contextvars
import json
import logging


TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

STRUCTURED_FIELDS = ("correlation_id", "user_id", "action", "resource", "extra")

# Correlation id of the request handled in the current context
_correlation_id = contextvars.ContextVar('correlation_id', default=None)


def get_correlation_id() -> Optional[str]:
    return _correlation_id.get()


@contextmanager
def correlation_context(correlation_id: str):
    """Tag every record logged inside the block with correlation_id"""
    token = _correlation_id.set(correlation_id)
    try:
        yield
    finally:
        _correlation_id.reset(token)


class JSONFormatter(logging.Formatter):
    """One JSON object per record, unset structured fields left out"""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in STRUCTURED_FIELDS:
            value = getattr(record, field, None)
            if field == "correlation_id" and value is None:
                value = get_correlation_id()
            if value is not None:
                log_entry[field] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json",
                  logger_name: str = "financial_service") -> logging.Logger:
    """
    Configure the application logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        fmt: "json" for structured output, "text" for plain lines
        logger_name: Name of the application root logger

    Returns:
        The configured logger
    """
    logger = logging.getLogger(logger_name)

    # Reconfiguring replaces the handler instead of stacking another
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    if fmt.lower() == "text":
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    else:
        handler.setFormatter(JSONFormatter())

    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper()))
    logger.propagate = False

    return logger


def get_logger(name: str = "financial_service") -> logging.Logger:
    return logging.getLogger(name)


def log_action(logger: logging.Logger, level: str, message: str,
               user_id: Optional[str] = None, action: Optional[str] = None,
               resource: Optional[str] = None, extra: Optional[dict] = None):
    """
    Log a ledger action with structured fields.

    The correlation id is taken from the current correlation_context().
    """
    levelno = getattr(logging, level.upper())
    if not logger.isEnabledFor(levelno):
        return

    fields = {
        "user_id": user_id,
        "action": action,
        "resource": resource,
        "extra": extra,
        "correlation_id": get_correlation_id(),
    }
    logger.log(levelno, message, extra={k: v for k, v in fields.items() if v is not None})
