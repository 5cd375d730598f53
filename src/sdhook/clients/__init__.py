"""
Concrete collaborators: Google API clients, the logging agent channel and
credential helpers.
"""

from .credentials import REQUIRED_SCOPES, compute_credentials, default_credentials, service_account_credentials
from .fluent import DEFAULT_AGENT_HOST, DEFAULT_AGENT_PORT, FluentAgentChannel
from .gcloud import GoogleErrorReporter, GoogleLogWriter

__all__ = [
    "DEFAULT_AGENT_HOST",
    "DEFAULT_AGENT_PORT",
    "FluentAgentChannel",
    "GoogleErrorReporter",
    "GoogleLogWriter",
    "REQUIRED_SCOPES",
    "compute_credentials",
    "default_credentials",
    "service_account_credentials",
]
