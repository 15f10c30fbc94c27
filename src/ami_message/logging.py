"""
Structured logging for the message codec.

Features:
- JSON-formatted log output for machine-readable logs
- Consistent field structure across all log entries
- Plain text fallback format for interactive use
- Logs go to stderr by default so CLI output on stdout stays clean
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ami_message.config import LoggingConfig

# Root logger name for the package
LOGGER_NAME = "ami_message"

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# LogRecord attributes that are not user-supplied extra fields
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    }
)


class JSONFormatter(logging.Formatter):
    """
    A logging formatter that outputs log records as JSON objects.

    Each log record is formatted as a JSON object with:
    - timestamp: ISO 8601 formatted timestamp in UTC
    - level: Log level name
    - logger: Logger name
    - message: Log message
    - exception: Formatted traceback, if any
    - Additional fields from the record's extra dict
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record as a JSON string.

        Args:
            record: The log record to format.

        Returns:
            JSON-formatted string representation of the log record.
        """
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key in set(record.__dict__.keys()) - _RESERVED_ATTRS:
            value = getattr(record, key, None)
            if value is not None:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


def setup_logging(
    config: LoggingConfig | None = None,
    *,
    level: str = "WARNING",
    json_format: bool = True,
    log_to_stdout: bool = False,
) -> logging.Logger:
    """
    Configure logging for the ami_message package.

    Args:
        config: Optional LoggingConfig. If provided, overrides other parameters.
        level: Log level if no config is provided.
        json_format: Whether to use JSON formatting (default: True).
        log_to_stdout: Log to stdout instead of stderr (default: False).

    Returns:
        The package root logger.

    Example:
        >>> from ami_message.logging import setup_logging
        >>> logger = setup_logging(level="DEBUG")
        >>> logger.debug("Decoder ready", extra={"variables_mode": "compat"})
    """
    if config is not None:
        log_level = "DEBUG" if config.debug_mode else config.level.upper()
        json_format = config.json_format
        log_to_stdout = config.log_to_stdout
    else:
        log_level = level.upper()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level, logging.WARNING))

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout if log_to_stdout else sys.stderr)
    handler.setLevel(getattr(logging, log_level, logging.WARNING))
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
    logger.addHandler(handler)

    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: The logger name, typically __name__ of the calling module.
            The "ami_message." prefix is added if not present.

    Returns:
        A child logger of the package logger.
    """
    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"

    return logging.getLogger(name)
