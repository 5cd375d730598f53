"""
Field normalization: turn an event's structured fields into string labels and
at most one HTTP request descriptor.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, runtime_checkable

import orjson

from .logging import get_logger
from .types import HttpRequest, NormalizedRecord

logger = get_logger("sdhook.normalize")


@runtime_checkable
class InboundRequest(Protocol):
    """An incoming HTTP request as exposed by web frameworks.

    Starlette/FastAPI and Werkzeug/Flask request objects both qualify.
    """

    method: str
    url: Any
    headers: Mapping[str, str]


def _header(headers: Mapping[str, str], name: str) -> str:
    value = headers.get(name)
    if value is None:
        value = headers.get(name.lower())
    return str(value) if value is not None else ""


def _remote_addr(request: Any) -> str:
    addr = getattr(request, "remote_addr", None)
    if addr:
        return str(addr)
    client = getattr(request, "client", None)
    host = getattr(client, "host", None)
    return str(host) if host else ""


def http_request_from_inbound(request: InboundRequest) -> HttpRequest:
    """Build an HTTP descriptor from an inbound request object."""
    return HttpRequest(
        request_method=str(request.method),
        request_url=str(request.url),
        referer=_header(request.headers, "Referer"),
        remote_ip=_remote_addr(request),
        user_agent=_header(request.headers, "User-Agent"),
    )


def stringify(value: Any) -> str:
    """Render a non-string field value as a label value."""
    if isinstance(value, (dict, list, tuple)):
        try:
            return orjson.dumps(value, default=str).decode()
        except TypeError:
            pass
    return str(value)


def normalize_fields(fields: Mapping[str, Any]) -> NormalizedRecord:
    """Split event fields into labels and an optional HTTP descriptor.

    Fields are visited in insertion order. When more than one field carries an
    HTTP request the last one wins and a warning is logged.
    """
    labels: dict[str, str] = {}
    http_request: Optional[HttpRequest] = None
    http_keys: list[str] = []

    for key, value in fields.items():
        if isinstance(value, str):
            labels[key] = value
        elif isinstance(value, HttpRequest):
            http_request = value
            http_keys.append(key)
        elif isinstance(value, InboundRequest):
            http_request = http_request_from_inbound(value)
            http_keys.append(key)
        else:
            labels[key] = stringify(value)

    if len(http_keys) > 1:
        logger.warning("multiple_http_requests", keys=http_keys, selected=http_keys[-1])

    return NormalizedRecord(labels=labels, http_request=http_request)
