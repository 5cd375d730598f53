"""
The hook: validates configuration, routes each event to a delivery backend on
a worker pool, and tracks outstanding deliveries so they can be drained.
"""

from __future__ import annotations

import atexit
import threading
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Callable, Iterable, Mapping, Optional

from .backends import AgentBackend, AgentChannel, ApiBackend, DeliveryBackend, ErrorReporter, LogWriter
from .concurrency import WaitGroup
from .exceptions import ConfigurationError, MissingDeliveryHandle, MissingProjectID, MissingResource
from .levels import ALL_LEVELS, Level, is_error
from .logging import get_logger
from .normalize import normalize_fields
from .types import HookConfig, LogEvent, MonitoredResource, Route

logger = get_logger("sdhook.hook")

# Log name used when none is configured.
DEFAULT_LOG_NAME = "default"

ERROR_LOG_SUFFIX = "_errors"

FailureObserver = Callable[[LogEvent, Exception], None]

# Set while the current thread is delivering an event.
_delivery = threading.local()


def in_delivery() -> bool:
    """Whether the current thread is inside a hook delivery.

    Logging done by the delivery path (sdhook itself, the Google client
    libraries, the fluent sender) must not be fed back into a hook.
    """
    return getattr(_delivery, "active", False)


class HookState(Enum):
    READY = "ready"
    DRAINING = "draining"
    CLOSED = "closed"


def qualify_log_name(project_id: str, name: str) -> str:
    """Return ``projects/{project_id}/logs/{name}`` when a project is set."""
    if project_id and not name.startswith("projects/"):
        return f"projects/{project_id}/logs/{name}"
    return name


def _select_backend(
    log_writer: Optional[LogWriter],
    error_reporter: Optional[ErrorReporter],
    agent_channel: Optional[AgentChannel],
) -> Optional[DeliveryBackend]:
    # The agent takes precedence when both handles are given.
    if agent_channel is not None:
        return AgentBackend(agent_channel)
    if log_writer is not None:
        return ApiBackend(log_writer, error_reporter)
    return None


class StackdriverHook:
    """Sends log events to Google Cloud Logging.

    Exactly one delivery path is used: the logging agent when
    ``agent_channel`` is given, the API otherwise. ``backend`` replaces both
    with a custom ``DeliveryBackend``.

    ``fire`` never blocks on delivery and never raises for delivery problems;
    failures are written to the ``sdhook`` diagnostic log and passed to
    ``on_failure``. Call ``wait`` (or ``close``) before exit to make sure
    outstanding entries are delivered.

    Args:
        levels: Levels the hook is applied to
        project_id: Google Cloud project ID; qualifies the log name
        resource: Monitored resource sent with each entry
        log_name: Log name, ``"default"`` when empty
        error_reporting_log_name: Log name for error events,
            ``{log_name}_errors`` when empty
        labels: Labels sent with every API entry
        partial_success: Allow partial writes when an entry is malformed
        error_reporting_service_name: Enables Error Reporting for error,
            fatal and panic events
        log_errors_in_regular_log: Keep error events in the regular log when no
            service name is set
        max_workers: Size of the delivery worker pool
        max_pending: When set, ``fire`` blocks once this many deliveries are
            outstanding
        on_failure: Called with the event and the exception of every failed
            delivery

    Raises:
        ConfigurationError: If no delivery handle is given, or the API path
            lacks a resource or project ID
    """

    def __init__(
        self,
        *,
        levels: Iterable[Level] = ALL_LEVELS,
        project_id: str = "",
        resource: Optional[MonitoredResource] = None,
        log_name: str = "",
        error_reporting_log_name: str = "",
        labels: Optional[Mapping[str, str]] = None,
        partial_success: bool = False,
        error_reporting_service_name: str = "",
        log_errors_in_regular_log: bool = False,
        log_writer: Optional[LogWriter] = None,
        error_reporter: Optional[ErrorReporter] = None,
        agent_channel: Optional[AgentChannel] = None,
        backend: Optional[DeliveryBackend] = None,
        max_workers: Optional[int] = None,
        max_pending: Optional[int] = None,
        on_failure: Optional[FailureObserver] = None,
    ):
        selected = backend if backend is not None else _select_backend(log_writer, error_reporter, agent_channel)
        if selected is None:
            raise MissingDeliveryHandle()
        if selected.requires_resource:
            if resource is None:
                raise MissingResource()
            if not project_id:
                raise MissingProjectID()
        if max_pending is not None and max_pending < 1:
            raise ConfigurationError(
                f"max_pending must be positive, got {max_pending}",
                details={"max_pending": max_pending},
            )

        qualified = qualify_log_name(project_id, log_name or DEFAULT_LOG_NAME)
        if error_reporting_log_name:
            error_log = qualify_log_name(project_id, error_reporting_log_name)
        else:
            error_log = qualified + ERROR_LOG_SUFFIX

        self._config = HookConfig(
            levels=tuple(levels),
            project_id=project_id,
            log_name=qualified,
            error_reporting_log_name=error_log,
            resource=resource,
            labels=dict(labels or {}),
            partial_success=partial_success,
            error_reporting_service_name=error_reporting_service_name,
            log_errors_in_regular_log=log_errors_in_regular_log,
        )
        self._backend = selected
        self._on_failure = on_failure
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="sdhook")
        self._limiter = threading.BoundedSemaphore(max_pending) if max_pending else None
        self._in_flight = WaitGroup()
        self._lock = threading.Lock()
        self._state = HookState.READY
        self._waiters = 0

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def config(self) -> HookConfig:
        return self._config

    @property
    def backend(self) -> DeliveryBackend:
        return self._backend

    @property
    def state(self) -> HookState:
        return self._state

    @property
    def in_flight(self) -> int:
        return self._in_flight.count

    def levels(self) -> tuple[Level, ...]:
        """Levels this hook is applied to."""
        return self._config.levels

    def accepts(self, level: Level) -> bool:
        return level in self._config.levels

    def route(self, level: Level) -> Route:
        """Decide where an event of the given level is delivered."""
        if not is_error(level):
            return Route.REGULAR
        if self._config.error_reporting_service_name:
            return Route.REPORT
        if self._config.log_errors_in_regular_log:
            return Route.REGULAR
        return Route.ERROR_LOG

    # -------------------------------------------------------------------------
    # Delivery
    # -------------------------------------------------------------------------

    def fire(self, event: LogEvent) -> None:
        """Schedule delivery of an event and return immediately."""
        if self._state is HookState.CLOSED:
            logger.warning("event_dropped", reason="hook is closed", level=event.level.name)
            return

        snapshot = event.snapshot()
        if self._limiter is not None:
            self._limiter.acquire()
        self._in_flight.add()
        try:
            self._executor.submit(self._deliver, snapshot)
        except RuntimeError as exc:
            # The pool was shut down between the state check and the submit.
            self._release()
            logger.warning("event_dropped", reason=str(exc), level=event.level.name)

    def _deliver(self, event: LogEvent) -> None:
        _delivery.active = True
        try:
            record = normalize_fields(event.fields)
            self._backend.deliver(self._config, event, record, self.route(event.level))
        except Exception as exc:
            logger.error(
                "delivery_failed",
                error=str(exc),
                code=getattr(exc, "code", None),
                level=event.level.name,
            )
            self._notify_failure(event, exc)
        finally:
            _delivery.active = False
            self._release()

    def _notify_failure(self, event: LogEvent, exc: Exception) -> None:
        if self._on_failure is None:
            return
        try:
            self._on_failure(event, exc)
        except Exception as observer_exc:
            logger.error("failure_observer_failed", error=str(observer_exc))

    def _release(self) -> None:
        self._in_flight.done()
        if self._limiter is not None:
            self._limiter.release()

    # -------------------------------------------------------------------------
    # Draining
    # -------------------------------------------------------------------------

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until every fired event has been handled.

        Returns:
            False if ``timeout`` expired with deliveries still outstanding
        """
        with self._lock:
            if self._state is HookState.READY:
                self._state = HookState.DRAINING
            self._waiters += 1
        try:
            return self._in_flight.wait(timeout)
        finally:
            with self._lock:
                self._waiters -= 1
                if self._waiters == 0 and self._state is HookState.DRAINING:
                    self._state = HookState.READY

    def close(self, timeout: Optional[float] = None) -> bool:
        """Drain outstanding deliveries and stop the worker pool.

        Events fired after ``close`` are dropped.
        """
        with self._lock:
            if self._state is HookState.CLOSED:
                return True
            self._state = HookState.CLOSED
        drained = self._in_flight.wait(timeout)
        self._executor.shutdown(wait=drained)
        if drained:
            self._backend.close()
        logger.debug("hook_closed", drained=drained, in_flight=self.in_flight)
        return drained

    def register_exit_handler(self, timeout: Optional[float] = None) -> None:
        """Drain outstanding deliveries when the interpreter exits."""
        atexit.register(self.wait, timeout)

    def __enter__(self) -> StackdriverHook:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
