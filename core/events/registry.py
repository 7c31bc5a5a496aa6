"""
PDV Event Bus - Subscriber Registry
=====================================
Who wants to hear what.

Event types are dotted, ``engine.entity.action[.version]``, at
least three parts. ``WILDCARD`` ("*") subscribes to everything;
the presentation layer uses it to refresh on any change.

Handlers are compared by equality, so a bound method can be
unsubscribed with a fresh reference to the same method.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, List

from core.events.errors import (
    DuplicateSubscriberError,
    EventBusError,
    InvalidEventTypeFormat,
)

logger = logging.getLogger("pdv.events")

WILDCARD = "*"
MIN_EVENT_TYPE_PARTS = 3


@dataclass(frozen=True)
class Subscription:
    event_type: str
    handler: Callable
    subscriber_name: str


def validate_event_type(event_type) -> None:
    if event_type == WILDCARD:
        return
    if (
        not isinstance(event_type, str)
        or len([p for p in event_type.split(".") if p]) < MIN_EVENT_TYPE_PARTS
    ):
        raise InvalidEventTypeFormat(str(event_type))


class SubscriberRegistry:
    def __init__(self):
        self._by_type: Dict[str, List[Subscription]] = {}
        self._lock = Lock()

    def register_subscriber(
        self, event_type: str, handler: Callable, subscriber_name: str,
    ) -> Subscription:
        validate_event_type(event_type)
        if not callable(handler):
            raise EventBusError(f"Subscriber handler is not callable: {handler!r}")

        subscription = Subscription(event_type, handler, subscriber_name)
        with self._lock:
            current = self._by_type.setdefault(event_type, [])
            if any(s.handler == handler for s in current):
                raise DuplicateSubscriberError(
                    event_type, getattr(handler, "__qualname__", repr(handler)),
                )
            current.append(subscription)

        logger.debug(f"{subscriber_name} subscribed to {event_type}")
        return subscription

    def unregister_subscriber(self, handler: Callable) -> int:
        """Drop ``handler`` from every event type; returns how many were dropped."""
        with self._lock:
            before = sum(len(subs) for subs in self._by_type.values())
            self._by_type = {
                event_type: [s for s in subs if s.handler != handler]
                for event_type, subs in self._by_type.items()
            }
            after = sum(len(subs) for subs in self._by_type.values())
        return before - after

    def get_subscribers(self, event_type: str) -> List[Subscription]:
        with self._lock:
            exact = list(self._by_type.get(event_type, ()))
            everything = [] if event_type == WILDCARD else list(self._by_type.get(WILDCARD, ()))
        return exact + everything

    def subscriber_count(self, event_type: str) -> int:
        with self._lock:
            return len(self._by_type.get(event_type, ()))
