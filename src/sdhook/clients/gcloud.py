"""
Google Cloud clients behind the ``LogWriter`` and ``ErrorReporter``
capabilities.
"""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from google.api import monitored_resource_pb2
from google.auth.credentials import Credentials
from google.cloud.errorreporting_v1beta1 import ReportErrorsServiceClient, ReportedErrorEvent
from google.cloud.logging_v2.services.logging_service_v2 import LoggingServiceV2Client
from google.cloud.logging_v2.types import LogEntry as LogEntryProto
from google.cloud.logging_v2.types import WriteLogEntriesRequest
from google.logging.type import http_request_pb2, log_severity_pb2
from google.protobuf import timestamp_pb2

from ..logging import orjson_dumps
from ..types import ErrorReportingEvent, HttpRequest, LogEntry, MonitoredResource


def severity_value(severity: str) -> int:
    """Numeric ``LogSeverity`` for a severity name; unknown names map to DEFAULT."""
    if severity in log_severity_pb2.LogSeverity.keys():
        return log_severity_pb2.LogSeverity.Value(severity)
    return log_severity_pb2.DEFAULT


def _resource_proto(resource: Optional[MonitoredResource]) -> Optional[monitored_resource_pb2.MonitoredResource]:
    if resource is None:
        return None
    return monitored_resource_pb2.MonitoredResource(type=resource.type, labels=dict(resource.labels))


def _http_request_proto(req: HttpRequest) -> http_request_pb2.HttpRequest:
    return http_request_pb2.HttpRequest(
        request_method=req.request_method,
        request_url=req.request_url,
        referer=req.referer,
        remote_ip=req.remote_ip,
        user_agent=req.user_agent,
    )


def entry_proto(entry: LogEntry) -> LogEntryProto:
    """Convert a ``LogEntry`` into the Cloud Logging API message."""
    timestamp = timestamp_pb2.Timestamp()
    timestamp.FromJsonString(entry.timestamp)
    proto = LogEntryProto(
        severity=severity_value(entry.severity),
        timestamp=timestamp,
        text_payload=entry.text_payload,
        labels=dict(entry.labels),
    )
    if entry.http_request is not None:
        proto.http_request = _http_request_proto(entry.http_request)
    return proto


class GoogleLogWriter:
    """``LogWriter`` backed by the Cloud Logging v2 API client."""

    def __init__(self, client: LoggingServiceV2Client):
        self._client = client

    @classmethod
    def from_credentials(cls, credentials: Optional[Credentials] = None) -> GoogleLogWriter:
        return cls(LoggingServiceV2Client(credentials=credentials))

    def write(
        self,
        *,
        log_name: str,
        resource: Optional[MonitoredResource],
        labels: Mapping[str, str],
        partial_success: bool,
        entries: Sequence[LogEntry],
    ) -> None:
        request = WriteLogEntriesRequest(
            log_name=log_name,
            labels=dict(labels),
            entries=[entry_proto(entry) for entry in entries],
            partial_success=partial_success,
        )
        resource_proto = _resource_proto(resource)
        if resource_proto is not None:
            request.resource = resource_proto
        self._client.write_log_entries(request=request)

    def close(self) -> None:
        self._client.transport.close()


class GoogleErrorReporter:
    """``ErrorReporter`` backed by the Error Reporting v1beta1 API client."""

    def __init__(self, client: ReportErrorsServiceClient):
        self._client = client

    @classmethod
    def from_credentials(cls, credentials: Optional[Credentials] = None) -> GoogleErrorReporter:
        return cls(ReportErrorsServiceClient(credentials=credentials))

    def report(self, project_id: str, event: ErrorReportingEvent) -> None:
        # The JSON layout of ErrorReportingEvent is the API's own.
        proto = ReportedErrorEvent.from_json(orjson_dumps(event.to_dict()))
        self._client.report_error_event(project_name=f"projects/{project_id}", event=proto)

    def close(self) -> None:
        self._client.transport.close()
