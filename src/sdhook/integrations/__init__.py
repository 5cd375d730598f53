"""
Host logging framework integrations.

- stdlib: ``logging.Handler``
- processor: structlog processor
"""

from .processor import StackdriverProcessor, event_from_event_dict
from .stdlib import DeliveryLoopFilter, StackdriverHandler, record_fields

__all__ = [
    "DeliveryLoopFilter",
    "StackdriverHandler",
    "StackdriverProcessor",
    "event_from_event_dict",
    "record_fields",
]
