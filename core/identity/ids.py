"""
PDV Identity - Id Providers
=============================
Products, sales and register sessions get opaque string ids from
an injectable provider, the same way the clock is injected.
"""

from __future__ import annotations

import itertools
import uuid
from threading import Lock
from typing import Protocol


class IdProvider(Protocol):
    def new_id(self) -> str:
        ...  # pragma: no cover


class UuidIdProvider:
    """Production ids: random UUID4 strings."""

    def new_id(self) -> str:
        return str(uuid.uuid4())


class SequentialIdProvider:
    """
    Deterministic ids for tests and fixtures.

    Usage:
        ids = SequentialIdProvider("sale")
        ids.new_id()  # 'sale-1'
    """

    def __init__(self, prefix: str = "id") -> None:
        self._prefix = prefix
        self._counter = itertools.count(1)
        self._lock = Lock()

    def new_id(self) -> str:
        with self._lock:
            return f"{self._prefix}-{next(self._counter)}"
