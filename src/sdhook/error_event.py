"""
Builds Error Reporting payloads from log events.
"""

from __future__ import annotations

from .types import (
    Caller,
    ErrorContext,
    ErrorReportingEvent,
    HttpRequestContext,
    LogEvent,
    NormalizedRecord,
    ServiceContext,
    SourceLocation,
    format_rfc3339,
)


def _caller_of(event: LogEvent) -> Caller | None:
    if event.caller is not None:
        return event.caller
    # Stack frame helpers may attach the call site as a field instead.
    caller = event.fields.get("caller")
    return caller if isinstance(caller, Caller) else None


def build_error_event(service_name: str, event: LogEvent, record: NormalizedRecord) -> ErrorReportingEvent:
    """Build the error event for a normalized log event.

    ``version`` and ``user`` are taken from the labels of the same name.
    """
    report_location = None
    caller = _caller_of(event)
    if caller is not None:
        report_location = SourceLocation(
            file_path=caller.file,
            function_name=caller.function,
            line_number=int(caller.line),
        )

    http_context = None
    if record.http_request is not None:
        req = record.http_request
        http_context = HttpRequestContext(
            method=req.request_method,
            url=req.request_url,
            referrer=req.referer,
            remote_ip=req.remote_ip,
            user_agent=req.user_agent,
        )

    return ErrorReportingEvent(
        event_time=format_rfc3339(event.time),
        message=event.message,
        service_context=ServiceContext(
            service=service_name,
            version=record.labels.get("version", ""),
        ),
        context=ErrorContext(
            user=record.labels.get("user", ""),
            http_request=http_context,
            report_location=report_location,
        ),
    )
