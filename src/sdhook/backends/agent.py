"""
Delivery through the local Google logging agent.

The record layout is the one the agent's fluentd plugin understands, see
https://github.com/GoogleCloudPlatform/fluent-plugin-google-cloud
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

import orjson

from ..error_event import build_error_event
from ..exceptions import AgentPostError, DeliveryError, SerializationError
from ..levels import severity_string
from ..types import HookConfig, LogEvent, NormalizedRecord, Route, ensure_utc
from .base import AgentChannel, DeliveryBackend

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def split_timestamp(value: datetime) -> tuple[int, int]:
    """Seconds since the epoch and the nanosecond remainder."""
    delta = ensure_utc(value) - _EPOCH
    return delta.days * 86400 + delta.seconds, delta.microseconds * 1000


def build_agent_record(event: LogEvent, record: NormalizedRecord) -> Dict[str, Any]:
    """Flat record: severity, timestamp parts, message, then every label."""
    seconds, nanos = split_timestamp(event.time)
    payload: Dict[str, Any] = {
        "severity": severity_string(event.level),
        "timestampSeconds": str(seconds),
        "timestampNanos": str(nanos),
        "message": event.message,
    }
    payload.update(record.labels)
    if record.http_request is not None:
        payload["httpRequest"] = record.http_request.to_dict()
    return payload


class AgentBackend(DeliveryBackend):
    """Posts records to the logging agent; tolerates absent project/resource."""

    requires_resource = False

    def __init__(self, channel: AgentChannel):
        self._channel = channel

    def deliver(self, config: HookConfig, event: LogEvent, record: NormalizedRecord, route: Route) -> None:
        payload = build_agent_record(event, record)

        if route is Route.REPORT:
            error_event = build_error_event(config.error_reporting_service_name, event, record)
            try:
                error_payload = orjson.loads(orjson.dumps(error_event.to_dict()))
            except (TypeError, ValueError) as exc:
                raise SerializationError(reason=str(exc)) from exc
            error_payload.update(payload)
            self._post(config.error_reporting_log_name, error_payload)
        elif route is Route.ERROR_LOG:
            self._post(config.error_reporting_log_name, payload)
        else:
            self._post(config.log_name, payload)

    def _post(self, channel: str, payload: Dict[str, Any]) -> None:
        try:
            self._channel.post(channel, payload)
        except DeliveryError:
            raise
        except Exception as exc:
            raise AgentPostError(channel=channel, reason=str(exc)) from exc

    def close(self) -> None:
        close = getattr(self._channel, "close", None)
        if callable(close):
            close()
