"""
Diagnostic logging for sdhook.

Library: structlog + orjson, the same pairing used for application logs.
"""

from .core import (
    add_logger_name,
    configure_logging,
    event_logger_name,
    get_logger,
    is_internal_logger,
    orjson_dumps,
)

__all__ = [
    "add_logger_name",
    "configure_logging",
    "event_logger_name",
    "get_logger",
    "is_internal_logger",
    "orjson_dumps",
]
