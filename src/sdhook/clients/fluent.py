"""
``AgentChannel`` over the fluentd forward protocol, as spoken by the Google
logging agent.
"""

from __future__ import annotations

from typing import Any, Mapping

from fluent import sender

from ..exceptions import AgentPostError

DEFAULT_AGENT_HOST = "localhost"
DEFAULT_AGENT_PORT = 24224


class FluentAgentChannel:
    """Posts records to the logging agent; the channel name is the fluentd tag."""

    def __init__(self, fluent_sender: sender.FluentSender):
        self._sender = fluent_sender

    @classmethod
    def connect(
        cls,
        host: str = DEFAULT_AGENT_HOST,
        port: int = DEFAULT_AGENT_PORT,
        *,
        timeout: float = 3.0,
    ) -> FluentAgentChannel:
        """Create a channel; the socket is opened lazily by the sender."""
        # An empty tag makes the channel name the full tag.
        return cls(sender.FluentSender("", host=host, port=port, timeout=timeout, nanosecond_precision=True))

    def post(self, channel: str, record: Mapping[str, Any]) -> None:
        if self._sender.emit(channel, dict(record)):
            return
        error = self._sender.last_error
        self._sender.clear_last_error()
        raise AgentPostError(channel=channel, reason=str(error) if error else "record not sent")

    def close(self) -> None:
        self._sender.close()
