"""
Exception hierarchy for sdhook.

Configuration errors are raised synchronously while a hook is being built.
Delivery errors are raised by backends inside worker tasks; the hook logs
them and never lets them reach the code that emitted the log event.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class HookError(Exception):
    """Base class of every sdhook error."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


# ================================
# Configuration errors
# ================================


class ConfigurationError(HookError):
    """The hook cannot be built from the supplied options."""

    def __init__(self, message: str, *, code: str = "INVALID_CONFIGURATION", details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code=code, details=details)


class MissingDeliveryHandle(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("no stackdriver service was provided", code="MISSING_DELIVERY_HANDLE")


class MissingResource(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("the monitored resource was not provided", code="MISSING_RESOURCE")


class MissingProjectID(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("the project id was not provided", code="MISSING_PROJECT_ID")


class InvalidCredentials(ConfigurationError):
    """Credential material is unreadable or incomplete."""

    def __init__(self, *, source: str, reason: str) -> None:
        super().__init__(
            f"invalid google credentials from {source}: {reason}",
            code="INVALID_CREDENTIALS",
            details={"source": source, "reason": reason},
        )


# ================================
# Delivery errors
# ================================


class DeliveryError(HookError):
    """A single event could not be delivered."""

    def __init__(self, *, backend: str, operation: str, reason: str) -> None:
        super().__init__(
            f"{backend} backend failed to {operation}: {reason}",
            code="DELIVERY_FAILED",
            details={"backend": backend, "operation": operation, "reason": reason},
        )
        self.backend = backend
        self.operation = operation


class AgentPostError(DeliveryError):
    """The logging agent rejected or did not receive a record."""

    def __init__(self, *, channel: str, reason: str) -> None:
        super().__init__(backend="agent", operation=f"post to {channel}", reason=reason)
        self.code = "AGENT_POST_FAILED"
        self.details["channel"] = channel


class SerializationError(DeliveryError):
    """The error reporting payload could not be serialized."""

    def __init__(self, *, reason: str) -> None:
        super().__init__(backend="agent", operation="serialize error reporting data", reason=reason)
        self.code = "SERIALIZATION_FAILED"
