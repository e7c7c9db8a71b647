"""Structured JSON logging that never emits the API key header."""

import json
import logging
import sys
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from src.config import settings


def _normalize(name: str) -> str:
    return name.strip().lower().replace("_", "-")


def redact_context(context: Mapping[str, Any], secret_names: Iterable[str]) -> dict[str, Any]:
    """
    Copy a log context without any entry named like a credential header.

    Names compare case-insensitively and treat ``_`` and ``-`` alike, so
    ``X-Api-Key``, ``x-api-key`` and ``x_api_key`` are all dropped. Nested
    mappings, such as a dump of request headers, are redacted too.

    Args:
        context: Fields passed as ``extra={"context": ...}``
        secret_names: Header names whose values must not be logged

    Returns:
        New dict without the secret entries
    """
    hidden = {_normalize(name) for name in secret_names}
    redacted: dict[str, Any] = {}
    for key, value in context.items():
        if _normalize(str(key)) in hidden:
            continue
        if isinstance(value, Mapping):
            value = redact_context(value, hidden)
        redacted[key] = value
    return redacted


class JSONFormatter(logging.Formatter):
    """
    Format log records as single-line JSON objects.

    Output fields:
    - timestamp: ISO 8601 timestamp in UTC
    - level, logger, message
    - correlation_id: Request correlation ID (if present in extra)
    - Fields of the ``context`` dict passed in ``extra``, minus the
      configured API key header
    """

    def __init__(self, secret_names: Iterable[str] | None = None) -> None:
        """
        Initialize JSONFormatter.

        Args:
            secret_names: Context keys to drop; the API_KEY_HEADER setting
                when omitted
        """
        super().__init__()
        self._secret_names = tuple(secret_names) if secret_names is not None else None

    def _hidden_names(self) -> tuple[str, ...]:
        if self._secret_names is not None:
            return self._secret_names
        # Read per record so a changed API_KEY_HEADER is honoured
        return (settings.api_key_header,)

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record as JSON.

        Args:
            record: The log record to format

        Returns:
            JSON string representation of the log record
        """
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if getattr(record, "correlation_id", None):
            log_data["correlation_id"] = record.correlation_id

        context = getattr(record, "context", None)
        if isinstance(context, Mapping):
            log_data.update(redact_context(context, self._hidden_names()))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if record.levelno == logging.DEBUG:
            log_data["file"] = record.pathname
            log_data["line"] = record.lineno
            log_data["function"] = record.funcName

        return json.dumps(log_data, default=str)


def configure_logging(level: str | None = None) -> None:
    """
    Send JSON logs from every logger to stdout.

    Args:
        level: Log level name; defaults to the LOG_LEVEL setting
    """
    level_name = (level or settings.log_level).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(JSONFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    # Replace, not append: create_app may run more than once per process
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    root_logger.info(
        "Logging configured",
        extra={"context": {"log_level": level_name}},
    )


def get_logger(name: str) -> logging.Logger:
    """Return the named logger (typically ``__name__``)."""
    return logging.getLogger(name)
