"""Structured logging for mediator-core.

The ``log_*`` helpers accept a message plus optional structured fields,
which are normalized to strings and attached to the record under
``fields``. Records go to the standard library logger ``mediator_core``,
so host applications configure handlers the usual way.

Example:
    >>> from mediator_core import log_debug
    >>>
    >>> log_debug("Resolved operation", {
    ...     "repository": "UserRepository",
    ...     "operation": "find",
    ... })
"""

from __future__ import annotations

import logging as _logging
from typing import Any

from .types import LogContext

TRACE = 5
_logging.addLevelName(TRACE, "TRACE")

LOGGER_NAME = "mediator_core"
_logger = _logging.getLogger(LOGGER_NAME)

_LEVELS = {
    "trace": TRACE,
    "debug": _logging.DEBUG,
    "info": _logging.INFO,
    "warn": _logging.WARNING,
    "error": _logging.ERROR,
}


def get_logger() -> _logging.Logger:
    """Return the package logger."""
    return _logger


def configure_logging(level: str = "info") -> None:
    """Set the package log level.

    Args:
        level: One of trace, debug, info, warn, error.

    Raises:
        ValueError: If the level name is unknown.
    """
    try:
        _logger.setLevel(_LEVELS[level.lower()])
    except KeyError:
        raise ValueError(f"Unknown log level: {level}") from None


def log_error(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log an ERROR level message with structured fields.

    Args:
        message: The log message.
        fields: Optional structured fields, as a dict or LogContext.
    """
    _log(_logging.ERROR, message, fields)


def log_warn(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a WARN level message with structured fields.

    Args:
        message: The log message.
        fields: Optional structured fields.
    """
    _log(_logging.WARNING, message, fields)


def log_info(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log an INFO level message with structured fields.

    Args:
        message: The log message.
        fields: Optional structured fields.
    """
    _log(_logging.INFO, message, fields)


def log_debug(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a DEBUG level message with structured fields.

    Args:
        message: The log message.
        fields: Optional structured fields.
    """
    _log(_logging.DEBUG, message, fields)


def log_trace(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a TRACE level message with structured fields.

    Used for per-call chain tracing; normally disabled.

    Args:
        message: The log message.
        fields: Optional structured fields.
    """
    _log(TRACE, message, fields)


def _log(level: int, message: str, fields: dict[str, Any] | LogContext | None) -> None:
    if not _logger.isEnabledFor(level):
        return
    fields_dict = _normalize_fields(fields)
    if fields_dict:
        _logger.log(level, "%s %s", message, fields_dict, extra={"fields": fields_dict})
    else:
        _logger.log(level, message)


def _normalize_fields(
    fields: dict[str, Any] | LogContext | None,
) -> dict[str, str] | None:
    """Normalize fields to a dict of strings.

    Args:
        fields: Input fields as dict, LogContext, or None.

    Returns:
        Dict with string values, or None if no fields.
    """
    if fields is None:
        return None

    if isinstance(fields, LogContext):
        return {k: str(v) for k, v in fields.model_dump().items() if v is not None}

    return {k: str(v) for k, v in fields.items()}


__all__ = [
    "TRACE",
    "LOGGER_NAME",
    "configure_logging",
    "get_logger",
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
]
