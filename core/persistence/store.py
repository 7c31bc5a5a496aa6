"""
PDV Persistence - State Stores
================================
Where a PdvState lives between runs.

    StateStore            protocol: load_all() / save_all(state)
    InMemoryStateStore    tests and throwaway sessions
    JsonFileStateStore    one JSON file, replaced atomically
    DjangoStateStore      see core.pdv_store.repository

save_all always replaces the whole state; there are no partial
writes to reconcile.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from core.persistence.snapshot import PdvState, dumps, loads

logger = logging.getLogger("pdv.persistence")


@runtime_checkable
class StateStore(Protocol):
    def load_all(self) -> PdvState: ...

    def save_all(self, state: PdvState) -> None: ...


class InMemoryStateStore:
    """Keeps the encoded text, so a save/load pair goes through the codec."""

    def __init__(self, initial: Optional[PdvState] = None):
        self._text: Optional[str] = dumps(initial) if initial is not None else None
        self.save_count = 0

    def load_all(self) -> PdvState:
        if self._text is None:
            return PdvState()
        return loads(self._text)

    def save_all(self, state: PdvState) -> None:
        self._text = dumps(state)
        self.save_count += 1


class JsonFileStateStore:
    def __init__(self, path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load_all(self) -> PdvState:
        """An absent file is an empty state."""
        if not self._path.exists():
            logger.info(f"No state file at {self._path}, starting empty")
            return PdvState()
        state = loads(self._path.read_text(encoding="utf-8"))
        logger.info(
            f"State loaded from {self._path}: {len(state.products)} products, "
            f"{len(state.sales)} sales, {len(state.cash_registers)} sessions"
        )
        return state

    def save_all(self, state: PdvState) -> None:
        """Write to a sibling temp file, then os.replace() it over the target."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(dumps(state))
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug(f"State saved to {self._path}")
