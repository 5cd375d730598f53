"""
Delivery backends.

- api: Cloud Logging / Error Reporting clients
- agent: local logging agent (fluentd forward protocol)
"""

from .agent import AgentBackend, build_agent_record
from .api import ApiBackend
from .base import AgentChannel, DeliveryBackend, ErrorReporter, LogWriter

__all__ = [
    "AgentBackend",
    "AgentChannel",
    "ApiBackend",
    "DeliveryBackend",
    "ErrorReporter",
    "LogWriter",
    "build_agent_record",
]
