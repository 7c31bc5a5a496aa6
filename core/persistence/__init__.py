"""
PDV Persistence
=================
Snapshot codec plus the stores that hold it.
"""

from core.persistence.snapshot import (
    SCHEMA_VERSION,
    PdvState,
    decode_state,
    dumps,
    encode_state,
    loads,
)
from core.persistence.store import (
    InMemoryStateStore,
    JsonFileStateStore,
    StateStore,
)

__all__ = [
    "SCHEMA_VERSION",
    "PdvState",
    "encode_state",
    "decode_state",
    "dumps",
    "loads",
    "StateStore",
    "InMemoryStateStore",
    "JsonFileStateStore",
]
