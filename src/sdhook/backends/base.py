"""
Delivery backend abstraction and the outbound capabilities backends depend on.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..types import ErrorReportingEvent, HookConfig, LogEntry, LogEvent, MonitoredResource, NormalizedRecord, Route


# =============================================================================
# Outbound capabilities
# =============================================================================


class LogWriter(Protocol):
    """Writes a batch of entries to Cloud Logging."""

    def write(
        self,
        *,
        log_name: str,
        resource: Optional[MonitoredResource],
        labels: Mapping[str, str],
        partial_success: bool,
        entries: Sequence[LogEntry],
    ) -> None: ...


class ErrorReporter(Protocol):
    """Reports one event to Error Reporting."""

    def report(self, project_id: str, event: ErrorReportingEvent) -> None: ...


class AgentChannel(Protocol):
    """Posts a structured record to a named channel of the logging agent."""

    def post(self, channel: str, record: Mapping[str, Any]) -> None: ...


# =============================================================================
# Backend Abstraction (Strategy Pattern)
# =============================================================================


class DeliveryBackend(ABC):
    """Abstract base class for delivery backends."""

    # Whether the hook must be given a monitored resource and a project ID.
    requires_resource: bool = True

    @abstractmethod
    def deliver(self, config: HookConfig, event: LogEvent, record: NormalizedRecord, route: Route) -> None:
        """Deliver one event.

        Raises:
            DeliveryError: If the event could not be delivered
        """
        ...

    def close(self) -> None:
        """Release resources held by the backend."""
