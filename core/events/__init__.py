"""
PDV Event Bus - Public API
============================
State changes are applied first, then heard.
"""

from core.events.dispatcher import DispatchResult, HandlerFailure, dispatch
from core.events.errors import (
    DuplicateSubscriberError,
    EventBusError,
    InvalidEventTypeFormat,
)
from core.events.event import Event
from core.events.publisher import EventPublisher
from core.events.registry import WILDCARD, SubscriberRegistry, Subscription

__all__ = [
    "dispatch",
    "DispatchResult",
    "HandlerFailure",
    "Event",
    "EventPublisher",
    "SubscriberRegistry",
    "Subscription",
    "WILDCARD",
    "EventBusError",
    "InvalidEventTypeFormat",
    "DuplicateSubscriberError",
]
