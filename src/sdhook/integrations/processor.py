"""
structlog integration.

Add ``StackdriverProcessor(hook)`` to the processor chain after the
processors that add ``level``, ``timestamp`` and callsite information and
before the renderer:

    structlog.configure(processors=[
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
        StackdriverProcessor(hook),
        structlog.processors.JSONRenderer(),
    ])
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from structlog.typing import EventDict, WrappedLogger

from ..hook import StackdriverHook, in_delivery
from ..levels import Level
from ..logging import event_logger_name, is_internal_logger
from ..types import Caller, LogEvent

# Keys consumed by the event itself rather than passed on as fields.
RESERVED_KEYS = frozenset(
    {
        "event",
        "_name",
        "message",
        "level",
        "timestamp",
        "exception",
        "exc_info",
        "stack",
        "pathname",
        "func_name",
        "lineno",
    }
)


def _parse_level(event_dict: EventDict, method_name: str) -> Level:
    name = event_dict.get("level") or method_name
    try:
        return Level.parse(str(name))
    except ValueError:
        return Level.INFO


def _parse_time(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            pass
    return datetime.now(timezone.utc)


def _caller(event_dict: EventDict) -> Optional[Caller]:
    pathname = event_dict.get("pathname")
    if not pathname:
        return None
    return Caller(
        file=str(pathname),
        function=str(event_dict.get("func_name", "")),
        line=int(event_dict.get("lineno", 0)),
    )


def event_from_event_dict(event_dict: EventDict, method_name: str) -> LogEvent:
    """Build a ``LogEvent`` from a structlog event dict."""
    message = str(event_dict.get("event", event_dict.get("message", "")))
    for key in ("exception", "stack"):
        if event_dict.get(key):
            message = f"{message}\n{event_dict[key]}"

    fields: Dict[str, Any] = {k: v for k, v in event_dict.items() if k not in RESERVED_KEYS}
    return LogEvent(
        time=_parse_time(event_dict.get("timestamp")),
        level=_parse_level(event_dict, method_name),
        message=message,
        fields=fields,
        caller=_caller(event_dict),
    )


class StackdriverProcessor:
    """Fires each accepted event at a hook and passes the event dict on unchanged.

    sdhook's own events and events logged while delivering are passed on
    without firing.
    """

    def __init__(self, hook: StackdriverHook):
        self.hook = hook

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        if is_internal_logger(event_logger_name(event_dict)) or in_delivery():
            return event_dict
        event = event_from_event_dict(event_dict, method_name)
        if self.hook.accepts(event.level):
            self.hook.fire(event)
        return event_dict
