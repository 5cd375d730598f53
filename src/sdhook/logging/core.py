"""
Diagnostic logging for sdhook itself.

Delivery failures and other runtime problems are reported here rather than to
the application. The loggers are plain structlog loggers, so they follow
whatever structlog configuration the host application installs;
``configure_logging`` is a convenience for processes that have none.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

import orjson
import structlog
from structlog.typing import EventDict, WrappedLogger

from ..config import settings
from ..config.logging import LogFormat

# Loggers under this prefix are never forwarded back into a hook.
LOGGER_PREFIX = "sdhook"


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    The name is passed to the logger factory (the stdlib logger name when the
    host routes structlog through ``logging``) and carried as ``_name``.
    """
    name = name or LOGGER_PREFIX
    return structlog.get_logger(name, _name=name)


def is_internal_logger(name: str | None) -> bool:
    """Whether a logger name belongs to sdhook's own diagnostics."""
    if not name:
        return False
    return name == LOGGER_PREFIX or name.startswith(LOGGER_PREFIX + ".")


# =============================================================================
# Structlog Processors
# =============================================================================


def orjson_dumps(v: Any, *, default: Any = None) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(v, default=default, option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC).decode()


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add ISO 8601 timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add logger name to log event."""
    event_dict["logger"] = event_dict.pop("_name", event_dict.get("logger", "root"))
    return event_dict


def event_logger_name(event_dict: EventDict) -> str | None:
    """Logger name of an event dict, before or after ``add_logger_name``."""
    return event_dict.get("_name") or event_dict.get("logger")


def _json_renderer(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
    return orjson_dumps(event_dict, default=str)


# =============================================================================
# Configuration Logic
# =============================================================================


def configure_logging(
    *,
    level: str | None = None,
    fmt: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """
    Configure structlog for sdhook's diagnostic output.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
            defaults to SDHOOK_LOG_LEVEL
        fmt: Output format (console, json); defaults to SDHOOK_LOG_FORMAT
        stream: Output stream (default: stderr)
    """
    level = level or settings.logging.level.value
    fmt = fmt or settings.logging.format.value
    stream = stream or sys.stderr
    if LogFormat(fmt.lower()) is LogFormat.JSON:
        renderer: Any = _json_renderer
    else:
        use_color = bool(getattr(stream, "isatty", lambda: False)())
        renderer = structlog.dev.ConsoleRenderer(colors=use_color)

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            add_logger_name,
            add_timestamp,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )
