"""
PDV Event Bus - Dispatcher
============================
Hands one event to every subscriber that asked for it.

Handlers run in registration order, exact-type subscribers before
wildcard ones. A handler that raises is logged with its traceback
and skipped; the rest still run and the caller never sees the
error. The state change being announced has already happened and
stays happened.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from core.events.event import Event
from core.events.registry import SubscriberRegistry

logger = logging.getLogger("pdv.events")


@dataclass(frozen=True)
class HandlerFailure:
    handler: str
    subscriber: str
    error: str
    error_type: str


@dataclass
class DispatchResult:
    event_type: str
    event_id: str
    notified: int = 0
    failures: List[HandlerFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures


def _handler_name(handler) -> str:
    return getattr(handler, "__qualname__", repr(handler))


def dispatch(event: Event, registry: SubscriberRegistry) -> DispatchResult:
    """Deliver ``event``. Never raises."""
    result = DispatchResult(event_type=event.event_type, event_id=str(event.event_id))

    for subscription in registry.get_subscribers(event.event_type):
        name = _handler_name(subscription.handler)
        try:
            subscription.handler(event)
        except Exception as exc:
            result.failures.append(HandlerFailure(
                handler=name,
                subscriber=subscription.subscriber_name,
                error=str(exc),
                error_type=type(exc).__name__,
            ))
            logger.error(
                f"Subscriber {subscription.subscriber_name} ({name}) failed on "
                f"{event.event_type} [{event.event_id}]: {exc}",
                exc_info=True,
            )
            continue
        result.notified += 1

    logger.debug(
        f"{event.event_type} [{event.event_id}] delivered to {result.notified}, "
        f"{result.failed} failed"
    )
    return result
