"""
Log levels and their Cloud Logging severity names.
"""

from __future__ import annotations

import logging
from enum import IntEnum


class Level(IntEnum):
    """Ordered log levels, least severe first."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARNING = 3
    ERROR = 4
    FATAL = 5
    PANIC = 6

    @classmethod
    def from_stdlib(cls, levelno: int) -> Level:
        """Map a standard library numeric level onto a Level."""
        if levelno < logging.DEBUG:
            return cls.TRACE
        if levelno < logging.INFO:
            return cls.DEBUG
        if levelno < logging.WARNING:
            return cls.INFO
        if levelno < logging.ERROR:
            return cls.WARNING
        if levelno < logging.CRITICAL:
            return cls.ERROR
        if levelno == logging.CRITICAL:
            return cls.FATAL
        return cls.PANIC

    @classmethod
    def parse(cls, name: str) -> Level:
        """Parse a level name (case-insensitive, common aliases accepted).

        Raises:
            ValueError: If the name is not a known level
        """
        key = name.strip().upper()
        key = _ALIASES.get(key, key)
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"unknown log level: {name!r}") from None


_ALIASES = {
    "WARN": "WARNING",
    "CRITICAL": "FATAL",
    "EXCEPTION": "ERROR",
}

ALL_LEVELS: tuple[Level, ...] = tuple(Level)

_ERROR_LEVELS = frozenset({Level.ERROR, Level.FATAL, Level.PANIC})


def severity_string(level: Level) -> str:
    """Return the Cloud Logging severity for a level."""
    if level is Level.FATAL:
        return "CRITICAL"
    if level is Level.PANIC:
        return "EMERGENCY"
    return level.name


def is_error(level: Level) -> bool:
    """Whether a level is severe enough for error routing."""
    return level in _ERROR_LEVELS
