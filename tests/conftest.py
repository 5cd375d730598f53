from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Sequence

import pytest

from sdhook.backends import DeliveryBackend
from sdhook.levels import Level
from sdhook.types import (
    ErrorReportingEvent,
    HookConfig,
    LogEntry,
    LogEvent,
    MonitoredResource,
    NormalizedRecord,
    ResourceType,
    Route,
)

EVENT_TIME = datetime(2024, 5, 17, 8, 30, 15, 123456, tzinfo=timezone.utc)


# ================================
# Recording stand-ins for the outbound capabilities
# ================================


class RecordingLogWriter:
    def __init__(self, fail: Optional[Exception] = None) -> None:
        self.calls: list[dict[str, Any]] = []
        self.fail = fail
        self._lock = threading.Lock()

    def write(
        self,
        *,
        log_name: str,
        resource: Optional[MonitoredResource],
        labels: Mapping[str, str],
        partial_success: bool,
        entries: Sequence[LogEntry],
    ) -> None:
        with self._lock:
            self.calls.append(
                {
                    "log_name": log_name,
                    "resource": resource,
                    "labels": labels,
                    "partial_success": partial_success,
                    "entries": list(entries),
                }
            )
        if self.fail is not None:
            raise self.fail


class RecordingErrorReporter:
    def __init__(self, fail: Optional[Exception] = None) -> None:
        self.calls: list[tuple[str, ErrorReportingEvent]] = []
        self.fail = fail
        self._lock = threading.Lock()

    def report(self, project_id: str, event: ErrorReportingEvent) -> None:
        with self._lock:
            self.calls.append((project_id, event))
        if self.fail is not None:
            raise self.fail


class RecordingAgentChannel:
    def __init__(self, fail: Optional[Exception] = None) -> None:
        self.posts: list[tuple[str, dict[str, Any]]] = []
        self.fail = fail
        self.closed = False
        self._lock = threading.Lock()

    def post(self, channel: str, record: Mapping[str, Any]) -> None:
        with self._lock:
            self.posts.append((channel, dict(record)))
        if self.fail is not None:
            raise self.fail

    def close(self) -> None:
        self.closed = True


class RecordingBackend(DeliveryBackend):
    requires_resource = False

    def __init__(self, gate: Optional[threading.Event] = None) -> None:
        self.deliveries: list[tuple[LogEvent, NormalizedRecord, Route]] = []
        self.gate = gate
        self._lock = threading.Lock()

    def deliver(self, config: HookConfig, event: LogEvent, record: NormalizedRecord, route: Route) -> None:
        if self.gate is not None:
            self.gate.wait(timeout=5)
        with self._lock:
            self.deliveries.append((event, record, route))

    @property
    def routes(self) -> list[Route]:
        return [route for _, _, route in self.deliveries]


# ================================
# Fixtures
# ================================


@pytest.fixture
def log_writer() -> RecordingLogWriter:
    return RecordingLogWriter()


@pytest.fixture
def error_reporter() -> RecordingErrorReporter:
    return RecordingErrorReporter()


@pytest.fixture
def agent_channel() -> RecordingAgentChannel:
    return RecordingAgentChannel()


@pytest.fixture
def recording_backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def global_resource() -> MonitoredResource:
    return MonitoredResource.of(ResourceType.GLOBAL)


@pytest.fixture
def make_event():
    """Factory for log events at a fixed time."""

    def _make(level: Level = Level.INFO, message: str = "a random message", **fields: Any) -> LogEvent:
        return LogEvent(time=EVENT_TIME, level=level, message=message, fields=dict(fields))

    return _make


@pytest.fixture
def make_config():
    """Factory for hook configurations with sensible defaults."""

    def _make(**overrides: Any) -> HookConfig:
        values: dict[str, Any] = {
            "levels": tuple(Level),
            "project_id": "p",
            "log_name": "projects/p/logs/default",
            "error_reporting_log_name": "projects/p/logs/default_errors",
            "resource": MonitoredResource(type="global", labels={}),
        }
        values.update(overrides)
        return HookConfig(**values)

    return _make


@pytest.fixture
def gated_backend():
    """Backend whose deliveries block until ``backend.gate.set()``."""
    backend = RecordingBackend(gate=threading.Event())
    yield backend
    backend.gate.set()
