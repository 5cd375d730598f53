"""
sdhook: Google Cloud Logging (Stackdriver) hook for Python logging.

Log events from the standard library ``logging`` module or structlog are
translated into Cloud Logging entries and delivered in the background, either
through the API or through the local logging agent. Error events can be sent
to Error Reporting as well.

Usage:
    import logging
    from sdhook import MonitoredResource, ResourceType, StackdriverHandler, StackdriverHook
    from sdhook.clients import GoogleLogWriter, service_account_credentials

    credentials, project_id = service_account_credentials(path="credentials.json")
    hook = StackdriverHook(
        project_id=project_id,
        resource=MonitoredResource.of(ResourceType.PROJECT, project_id=project_id),
        log_name="some_log",
        log_writer=GoogleLogWriter.from_credentials(credentials),
    )
    logging.getLogger().addHandler(StackdriverHandler(hook))
    hook.register_exit_handler(timeout=10)
"""

from .exceptions import (
    AgentPostError,
    ConfigurationError,
    DeliveryError,
    HookError,
    InvalidCredentials,
    MissingDeliveryHandle,
    MissingProjectID,
    MissingResource,
    SerializationError,
)
from .hook import DEFAULT_LOG_NAME, HookState, StackdriverHook
from .integrations import StackdriverHandler, StackdriverProcessor
from .levels import ALL_LEVELS, Level, is_error, severity_string
from .normalize import normalize_fields
from .types import (
    Caller,
    ErrorReportingEvent,
    HookConfig,
    HttpRequest,
    LogEntry,
    LogEvent,
    MonitoredResource,
    NormalizedRecord,
    ResourceType,
    Route,
)

__all__ = [
    "ALL_LEVELS",
    "AgentPostError",
    "Caller",
    "ConfigurationError",
    "DEFAULT_LOG_NAME",
    "DeliveryError",
    "ErrorReportingEvent",
    "HookConfig",
    "HookError",
    "HookState",
    "HttpRequest",
    "InvalidCredentials",
    "Level",
    "LogEntry",
    "LogEvent",
    "MissingDeliveryHandle",
    "MissingProjectID",
    "MissingResource",
    "MonitoredResource",
    "NormalizedRecord",
    "ResourceType",
    "Route",
    "SerializationError",
    "StackdriverHandler",
    "StackdriverHook",
    "StackdriverProcessor",
    "is_error",
    "normalize_fields",
    "severity_string",
]
