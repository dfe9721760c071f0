"""Logging helpers for reflex-datatable.

The package logs through a single ``reflex_datatable`` logger.  Messages are
prefixed with the emitting component, e.g. ``[GridEngine] ...``.
"""

import logging
import sys


class _LoggerHolder:
    """Holder for the package logger instance."""

    instance: logging.Logger | None = None


def get_logger() -> logging.Logger:
    """Return the package logger, configuring it on first use.

    The initial level comes from :class:`~reflex_datatable.config.DataTableSettings`
    (``DATATABLE_LOG_LEVEL``).
    """
    if _LoggerHolder.instance is None:
        from reflex_datatable.config import get_settings

        settings = get_settings()
        logger = logging.getLogger("reflex_datatable")
        logger.setLevel(settings.log_level)

        # Only add a handler if the application has not configured one.
        if not logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(logging.Formatter(settings.log_format))
            logger.addHandler(handler)

        _LoggerHolder.instance = logger

    return _LoggerHolder.instance


def debug(msg: str) -> None:
    """Log a debug message."""
    get_logger().debug(msg)


def warn(msg: str) -> None:
    """Log a warning message."""
    get_logger().warning(msg)


def set_level(level: int | str) -> None:
    """Set the package log level (``logging.DEBUG`` or ``"DEBUG"``)."""
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    get_logger().setLevel(level)


def enable_debug() -> None:
    """Log every recomputation, debounce and selection change."""
    set_level(logging.DEBUG)
