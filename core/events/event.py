"""
PDV Event Bus - Event Envelope
================================
Immutable notification that a state change has been applied.

Events are published only AFTER the owning store mutated, so a
subscriber reading the service state sees the change it is told about.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class Event:
    event_id: str
    event_type: str
    occurred_at: datetime
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def source_engine(self) -> str:
        return self.event_type.split(".")[0]
