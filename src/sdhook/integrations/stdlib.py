"""
Standard library ``logging`` integration.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..hook import StackdriverHook, in_delivery
from ..levels import Level
from ..logging import is_internal_logger
from ..types import Caller, LogEvent

# Attributes every LogRecord has; anything else was passed through ``extra``.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


def record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields attached to a record through ``extra``."""
    return {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS and not k.startswith("_")}


class DeliveryLoopFilter(logging.Filter):
    """Drops records that would loop back into the hook.

    That is sdhook's own diagnostics and anything logged on a thread that is
    delivering an event. Handler filters run before the handler lock is taken,
    so these records never wait on a handler that is draining the hook.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return not (is_internal_logger(record.name) or in_delivery())


class StackdriverHandler(logging.Handler):
    """
    Forward standard library log records to a ``StackdriverHook``.

    The handler's formatter renders the message, so tracebacks attached with
    ``exc_info`` end up in the entry text where Error Reporting can find them.
    ``flush`` (and therefore ``logging.shutdown``) drains the hook.
    """

    def __init__(
        self,
        hook: StackdriverHook,
        level: int = logging.NOTSET,
        *,
        flush_timeout: Optional[float] = None,
    ):
        super().__init__(level)
        self.hook = hook
        self.flush_timeout = flush_timeout
        self.addFilter(DeliveryLoopFilter())

    def to_event(self, record: logging.LogRecord) -> LogEvent:
        return LogEvent(
            time=datetime.fromtimestamp(record.created, tz=timezone.utc),
            level=Level.from_stdlib(record.levelno),
            message=self.format(record),
            fields=record_fields(record),
            caller=Caller(file=record.pathname, function=record.funcName, line=record.lineno),
        )

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if not self.hook.accepts(Level.from_stdlib(record.levelno)):
                return
            self.hook.fire(self.to_event(record))
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        self.hook.wait(self.flush_timeout)
