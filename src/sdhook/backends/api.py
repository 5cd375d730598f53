"""
Direct API delivery: Cloud Logging ``entries.write`` and Error Reporting
``events.report``.
"""

from __future__ import annotations

from typing import Optional

from ..error_event import build_error_event
from ..exceptions import DeliveryError
from ..levels import severity_string
from ..types import HookConfig, LogEntry, LogEvent, NormalizedRecord, Route, format_rfc3339
from .base import DeliveryBackend, ErrorReporter, LogWriter


class ApiBackend(DeliveryBackend):
    """Delivers through the logging and error reporting clients.

    Args:
        log_writer: Cloud Logging writer
        error_reporter: Error Reporting client, needed only when a service name
            is configured
    """

    requires_resource = True

    def __init__(self, log_writer: LogWriter, error_reporter: Optional[ErrorReporter] = None):
        self._log_writer = log_writer
        self._error_reporter = error_reporter

    def deliver(self, config: HookConfig, event: LogEvent, record: NormalizedRecord, route: Route) -> None:
        if route is Route.REPORT:
            self._report(config, event, record)
        else:
            self._write(config, event, record, route)

    def _report(self, config: HookConfig, event: LogEvent, record: NormalizedRecord) -> None:
        if self._error_reporter is None:
            raise DeliveryError(
                backend="api",
                operation="report event",
                reason="the error reporting client is not configured",
            )
        error_event = build_error_event(config.error_reporting_service_name, event, record)
        try:
            self._error_reporter.report(config.project_id, error_event)
        except Exception as exc:
            raise DeliveryError(backend="api", operation="report event", reason=str(exc)) from exc

    def _write(self, config: HookConfig, event: LogEvent, record: NormalizedRecord, route: Route) -> None:
        log_name = config.error_reporting_log_name if route is Route.ERROR_LOG else config.log_name
        entry = LogEntry(
            severity=severity_string(event.level),
            timestamp=format_rfc3339(event.time),
            text_payload=event.message,
            labels=record.labels,
            http_request=record.http_request,
        )
        try:
            self._log_writer.write(
                log_name=log_name,
                resource=config.resource,
                labels=config.labels,
                partial_success=config.partial_success,
                entries=[entry],
            )
        except Exception as exc:
            raise DeliveryError(backend="api", operation="deliver log entry", reason=str(exc)) from exc

    def close(self) -> None:
        for client in (self._log_writer, self._error_reporter):
            close = getattr(client, "close", None)
            if callable(close):
                close()
