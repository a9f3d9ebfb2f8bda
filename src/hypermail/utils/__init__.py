"""Utility functions for Hypermail."""

import logging
from typing import TextIO

import structlog

from hypermail.config import Settings


def resolve_log_level(settings: Settings) -> int:
    """Return the numeric log level, forcing DEBUG in debug mode.

    Args:
        settings: Application settings.

    Returns:
        A ``logging`` level number. Unknown names fall back to INFO.
    """
    if settings.debug:
        return logging.DEBUG
    level = logging.getLevelName(settings.log_level.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(settings: Settings) -> TextIO:
    """Configure structlog to write key/value lines to the log file.

    Curses owns the terminal, so nothing may be logged to stdout or stderr
    while the UI runs.

    Args:
        settings: Application settings.

    Returns:
        The open log file. The caller closes it on exit.
    """
    settings.log_file.parent.mkdir(parents=True, exist_ok=True)
    log_file = settings.log_file.open("a", encoding="utf-8")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(
                key_order=["timestamp", "level", "event"], drop_missing=True
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolve_log_level(settings)),
        logger_factory=structlog.WriteLoggerFactory(file=log_file),
        cache_logger_on_first_use=False,
    )
    return log_file
