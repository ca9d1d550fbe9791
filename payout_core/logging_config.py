"""
Structured Logging Configuration Module

Provides JSON-formatted structured logging for payout validation. Library
modules only obtain loggers; handlers are attached by setup_logging().
"""

import logging
import json
from datetime import datetime, timezone
from typing import Optional

from .config import get_config


# Record attributes copied into the JSON payload when present
STRUCTURED_FIELDS = ("correlation_id", "action", "field", "error_code", "extra")


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "message": record.getMessage(),
        }

        for name in STRUCTURED_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_entry[name] = value

        # Add exception info if present
        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str, ensure_ascii=False)


TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: Optional[str] = None, logger_name: str = "payout_core",
                  log_format: Optional[str] = None,
                  log_file: Optional[str] = None) -> logging.Logger:
    """
    Setup logging for the payout core.

    Unset arguments fall back to PayoutConfig (log_level, log_format, log_file).

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        logger_name: Name of the logger
        log_format: "json" or "text"
        log_file: Path to a log file; stderr when None

    Returns:
        Configured logger instance
    """
    settings = get_config()
    level = level or settings.log_level
    log_format = log_format or settings.log_format
    log_file = log_file or settings.log_file

    logger = logging.getLogger(logger_name)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()

    if log_format.lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper()))

    # Prevent propagation to avoid duplicate logs
    logger.propagate = False

    return logger


def get_logger(name: str = "payout_core") -> logging.Logger:
    """Get logger instance"""
    return logging.getLogger(name)


def log_action(logger: logging.Logger, level: str, message: str,
               action: Optional[str] = None, field: Optional[str] = None,
               error_code: Optional[str] = None,
               correlation_id: Optional[str] = None,
               extra: Optional[dict] = None):
    """
    Log an action with structured data.

    Args:
        logger: Logger instance
        level: Log level (info, warning, error, etc.)
        message: Log message
        action: Operation being performed (e.g. "validate_iban")
        field: Form field the record refers to
        error_code: Stable validation error code
        correlation_id: Correlation ID for request tracing
        extra: Additional structured data
    """
    levelno = getattr(logging, level.upper())
    if not logger.isEnabledFor(levelno):
        return

    # Create a LogRecord with extra fields
    record = logger.makeRecord(
        logger.name, levelno, __name__, 0, message, (), None
    )

    # Add custom fields
    if action:
        record.action = action
    if field:
        record.field = field
    if error_code:
        record.error_code = error_code
    if correlation_id:
        record.correlation_id = correlation_id
    if extra:
        record.extra = extra

    logger.handle(record)
