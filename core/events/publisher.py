"""
PDV Event Bus - Publisher
===========================
Builds Event envelopes (id + timestamp) and dispatches them.

Engines hold a publisher, never a registry: they state what
happened, the registry decides who hears it.

Inside ``batch()`` events are held back and dispatched only when
the whole unit of work succeeds, the same way persisted events
are dispatched only after commit. A failed unit discards them.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional

from core.events.dispatcher import dispatch
from core.events.event import Event
from core.events.registry import WILDCARD, SubscriberRegistry
from core.identity.ids import IdProvider, UuidIdProvider
from core.time.clock import Clock, get_default_clock

logger = logging.getLogger("pdv.events")


class EventPublisher:
    def __init__(
        self,
        *,
        registry: Optional[SubscriberRegistry] = None,
        clock: Optional[Clock] = None,
        id_provider: Optional[IdProvider] = None,
    ):
        self._registry = registry or SubscriberRegistry()
        self._clock = clock or get_default_clock()
        self._id_provider = id_provider or UuidIdProvider()
        self._pending: Optional[List[Event]] = None

    @property
    def registry(self) -> SubscriberRegistry:
        return self._registry

    def publish(self, event_type: str, payload: Dict[str, Any]) -> Event:
        event = Event(
            event_id=self._id_provider.new_id(),
            event_type=event_type,
            occurred_at=self._clock.now_utc(),
            payload=payload,
        )
        if self._pending is not None:
            self._pending.append(event)
        else:
            dispatch(event, self._registry)
        return event

    @contextmanager
    def batch(self) -> Iterator[None]:
        """Hold events until the block exits cleanly. Nested batches join the outer one."""
        if self._pending is not None:
            yield
            return

        self._pending = []
        try:
            yield
        except BaseException:
            discarded = len(self._pending)
            self._pending = None
            if discarded:
                logger.debug(f"Discarded {discarded} events from failed unit of work")
            raise

        pending, self._pending = self._pending, None
        for event in pending:
            dispatch(event, self._registry)

    def subscribe(
        self,
        handler: Callable[[Event], Any],
        event_type: str = WILDCARD,
        subscriber_name: str = "ui",
    ) -> None:
        self._registry.register_subscriber(event_type, handler, subscriber_name)

    def unsubscribe(self, handler: Callable[[Event], Any]) -> None:
        self._registry.unregister_subscriber(handler)
