"""
Value types shared by the normalizer, the error event builder and the
delivery backends.

Field names follow Python conventions; ``to_dict`` renders the JSON names used
by Cloud Logging and Error Reporting.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .levels import Level


def _compact(values: Dict[str, Any]) -> Dict[str, Any]:
    """Drop empty values (JSON ``omitempty``)."""
    return {k: v for k, v in values.items() if v not in ("", None, {})}


def ensure_utc(value: datetime) -> datetime:
    """Return an aware datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def format_rfc3339(value: datetime) -> str:
    """Format a datetime as an RFC 3339 timestamp with second precision."""
    text = ensure_utc(value).isoformat(timespec="seconds")
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


# =============================================================================
# Input
# =============================================================================


@dataclass(frozen=True)
class Caller:
    """Call site of a log statement."""

    file: str
    function: str
    line: int


@dataclass
class LogEvent:
    """One log event as handed over by the host logging framework."""

    time: datetime
    level: Level
    message: str
    fields: Dict[str, Any] = field(default_factory=dict)
    caller: Optional[Caller] = None

    def snapshot(self) -> LogEvent:
        """Copy the event with its own field mapping (values are shared)."""
        return replace(self, fields=dict(self.fields))


# =============================================================================
# Normalized record
# =============================================================================


@dataclass(frozen=True)
class HttpRequest:
    """HTTP request descriptor attached to a log entry."""

    request_method: str = ""
    request_url: str = ""
    referer: str = ""
    remote_ip: str = ""
    user_agent: str = ""

    def to_dict(self) -> Dict[str, str]:
        return _compact(
            {
                "requestMethod": self.request_method,
                "requestUrl": self.request_url,
                "referer": self.referer,
                "remoteIp": self.remote_ip,
                "userAgent": self.user_agent,
            }
        )


@dataclass(frozen=True)
class NormalizedRecord:
    """Labels and HTTP descriptor derived from an event's fields."""

    labels: Dict[str, str] = field(default_factory=dict)
    http_request: Optional[HttpRequest] = None


# =============================================================================
# Cloud Logging
# =============================================================================


class ResourceType(str, Enum):
    """Common monitored resource types.

    See https://cloud.google.com/logging/docs/api/v2/resource-list for the
    labels each type requires.
    """

    GLOBAL = "global"
    PROJECT = "project"
    GCE_INSTANCE = "gce_instance"
    GKE_CONTAINER = "k8s_container"
    GKE_POD = "k8s_pod"
    GKE_NODE = "k8s_node"
    CLOUD_RUN_REVISION = "cloud_run_revision"
    CLOUD_RUN_JOB = "cloud_run_job"
    CLOUD_FUNCTION = "cloud_function"
    GAE_APP = "gae_app"
    ORGANIZATION = "organization"
    FOLDER = "folder"
    BILLING_ACCOUNT = "billing_account"


@dataclass(frozen=True)
class MonitoredResource:
    """The entity the log entries belong to."""

    type: str
    labels: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def of(cls, resource_type: ResourceType | str, **labels: str) -> MonitoredResource:
        if isinstance(resource_type, ResourceType):
            resource_type = resource_type.value
        return cls(type=resource_type, labels=labels)


@dataclass(frozen=True)
class LogEntry:
    """A single entry of a write call."""

    severity: str
    timestamp: str
    text_payload: str
    labels: Dict[str, str] = field(default_factory=dict)
    http_request: Optional[HttpRequest] = None


# =============================================================================
# Error Reporting
# =============================================================================


@dataclass(frozen=True)
class ServiceContext:
    service: str
    version: str = ""


@dataclass(frozen=True)
class SourceLocation:
    file_path: str
    function_name: str
    line_number: int


@dataclass(frozen=True)
class HttpRequestContext:
    method: str = ""
    url: str = ""
    referrer: str = ""
    remote_ip: str = ""
    user_agent: str = ""


@dataclass(frozen=True)
class ErrorContext:
    user: str = ""
    http_request: Optional[HttpRequestContext] = None
    report_location: Optional[SourceLocation] = None


@dataclass(frozen=True)
class ErrorReportingEvent:
    """Payload for the Error Reporting ``report`` call.

    Layout follows
    https://cloud.google.com/error-reporting/docs/formatting-error-messages
    """

    event_time: str
    message: str
    service_context: ServiceContext
    context: ErrorContext = field(default_factory=ErrorContext)

    def to_dict(self) -> Dict[str, Any]:
        context: Dict[str, Any] = {"user": self.context.user}
        if self.context.http_request is not None:
            req = self.context.http_request
            context["httpRequest"] = _compact(
                {
                    "method": req.method,
                    "url": req.url,
                    "referrer": req.referrer,
                    "remoteIp": req.remote_ip,
                    "userAgent": req.user_agent,
                }
            )
        if self.context.report_location is not None:
            loc = self.context.report_location
            context["reportLocation"] = _compact(
                {
                    "filePath": loc.file_path,
                    "functionName": loc.function_name,
                    "lineNumber": loc.line_number,
                }
            )
        return _compact(
            {
                "eventTime": self.event_time,
                "message": self.message,
                "serviceContext": _compact(
                    {
                        "service": self.service_context.service,
                        "version": self.service_context.version,
                    }
                ),
                "context": _compact(context),
            }
        )


# =============================================================================
# Hook configuration and routing
# =============================================================================


class Route(Enum):
    """Where a delivery goes."""

    REGULAR = "regular"
    # Plain entry diverted to the error reporting log name.
    ERROR_LOG = "error_log"
    # Structured error event.
    REPORT = "report"


@dataclass(frozen=True)
class HookConfig:
    """Immutable hook settings shared by every delivery."""

    levels: tuple[Level, ...]
    project_id: str
    log_name: str
    error_reporting_log_name: str
    resource: Optional[MonitoredResource] = None
    labels: Mapping[str, str] = field(default_factory=dict)
    partial_success: bool = False
    error_reporting_service_name: str = ""
    log_errors_in_regular_log: bool = False
