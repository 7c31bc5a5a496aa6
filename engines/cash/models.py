"""
PDV Cash Engine - Register Session
====================================
One open-to-close lifetime of the cash register.

The session keeps sale ids, not sale copies: the ledger is the
only owner of sale data, so an edit made after the fact shows
through both the ledger and the session.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class SessionStatus(Enum):
    OPEN = "open"
    CLOSED = "closed"


def _dt(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


@dataclass(frozen=True)
class CashRegisterSession:
    session_id: str
    opened_at: datetime
    opening_balance: float
    sale_ids: Tuple[str, ...] = ()
    status: SessionStatus = SessionStatus.OPEN
    notes: Optional[str] = None
    closed_at: Optional[datetime] = None
    expected_closing_balance: Optional[float] = None
    actual_closing_balance: Optional[float] = None
    cash_shortage: Optional[float] = None  # actual - expected; negative = missing cash

    @property
    def is_open(self) -> bool:
        return self.status is SessionStatus.OPEN

    def to_dict(self) -> dict:
        return {
            "id": self.session_id,
            "opened_at": self.opened_at.isoformat(),
            "opening_balance": self.opening_balance,
            "sale_ids": list(self.sale_ids),
            "status": self.status.value,
            "notes": self.notes,
            "closed_at": self.closed_at.isoformat() if self.closed_at else None,
            "expected_closing_balance": self.expected_closing_balance,
            "actual_closing_balance": self.actual_closing_balance,
            "cash_shortage": self.cash_shortage,
        }

    @classmethod
    def from_dict(cls, data: dict) -> CashRegisterSession:
        return cls(
            session_id=data["id"],
            opened_at=datetime.fromisoformat(data["opened_at"]),
            opening_balance=data["opening_balance"],
            sale_ids=tuple(data.get("sale_ids", ())),
            status=SessionStatus(data.get("status", SessionStatus.OPEN.value)),
            notes=data.get("notes"),
            closed_at=_dt(data.get("closed_at")),
            expected_closing_balance=data.get("expected_closing_balance"),
            actual_closing_balance=data.get("actual_closing_balance"),
            cash_shortage=data.get("cash_shortage"),
        )
