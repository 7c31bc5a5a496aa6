"""
PDV Core Time - Clock
=======================
Sale, session and event timestamps all come from a Clock, never
from datetime.now() inside an engine. Timestamps are always
timezone-aware UTC.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    def now_utc(self) -> datetime: ...


class SystemClock:
    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Frozen time for tests; moves only when told to.

        clock = FixedClock(datetime(2025, 3, 1, tzinfo=timezone.utc))
        clock.advance(60)
    """

    def __init__(self, fixed_dt: datetime) -> None:
        if fixed_dt.tzinfo is None or fixed_dt.utcoffset() is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        self._now = fixed_dt

    def now_utc(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> datetime:
        self._now += timedelta(seconds=seconds)
        return self._now


_default_clock: Clock = SystemClock()


def set_default_clock(clock: Clock) -> None:
    """Swap the process-wide fallback clock. Tests only."""
    global _default_clock
    _default_clock = clock


def get_default_clock() -> Clock:
    return _default_clock


def now_utc() -> datetime:
    return _default_clock.now_utc()
