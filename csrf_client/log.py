"""
Leveled line logging.

Each client owns a structlog logger bound to its own sink, threshold and
line prefix. Lines look like::

    DEBUG: [xds] HTTP request method=GET url=http://localhost:8000/api/v1/version
"""

import logging
import sys
from enum import IntEnum
from typing import TextIO

import structlog
from structlog.typing import EventDict, FilteringBoundLogger, WrappedLogger


class LogLevel(IntEnum):
    """Log levels, from least to most verbose."""

    PANIC = 0
    ERROR = 1
    WARNING = 2
    INFO = 3
    DEBUG = 4


_STDLIB_LEVELS = {
    LogLevel.PANIC: logging.CRITICAL,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}

_LEVEL_NAMES = {
    "panic": LogLevel.PANIC,
    "error": LogLevel.ERROR,
    "warn": LogLevel.WARNING,
    "warning": LogLevel.WARNING,
    "info": LogLevel.INFO,
    "debug": LogLevel.DEBUG,
}

# structlog method names mapped back to our level labels
_METHOD_LABELS = {
    "critical": "PANIC",
    "error": "ERROR",
    "warning": "WARNING",
    "info": "INFO",
    "debug": "DEBUG",
}


def level_to_string(level: int) -> str:
    """Return the lower-case name of a level, ``"unknown"`` if out of range."""
    try:
        return LogLevel(level).name.lower()
    except ValueError:
        return "unknown"


def parse_level(name: str) -> LogLevel:
    """
    Parse a readable level name.

    Args:
        name: One of panic, error, warn, warning, info, debug (any case).

    Returns:
        Matching LogLevel.

    Raises:
        ValueError: If the name is not a known level.
    """
    try:
        return _LEVEL_NAMES[name.lower()]
    except KeyError:
        msg = "Unknown level"
        raise ValueError(msg) from None


class LineRenderer:
    """Render an event dict as ``LEVEL: <prefix><event> key=value ...``."""

    def __init__(self, prefix: str = "") -> None:
        self._prefix = prefix

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        label = _METHOD_LABELS.get(method_name, method_name.upper())
        event = event_dict.pop("event", "")
        line = f"{label}: {self._prefix}{event}"
        if event_dict:
            line += " " + " ".join(f"{k}={v}" for k, v in event_dict.items())
        return line


def make_logger(
    out: TextIO | None = None,
    level: LogLevel = LogLevel.PANIC,
    prefix: str = "",
) -> FilteringBoundLogger:
    """
    Build a logger writing filtered lines to a sink.

    Args:
        out: Sink to write to. Standard output when None.
        level: Highest level that is written.
        prefix: Prefix for every message.

    Returns:
        A structlog bound logger. ``critical`` is rendered as PANIC.
    """
    return structlog.wrap_logger(
        structlog.PrintLogger(file=out if out is not None else sys.stdout),
        wrapper_class=structlog.make_filtering_bound_logger(_STDLIB_LEVELS[LogLevel(level)]),
        processors=[
            structlog.processors.format_exc_info,
            LineRenderer(prefix),
        ],
        cache_logger_on_first_use=False,
    )

