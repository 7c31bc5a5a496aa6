"""
PDV Sales Engine - Sale Record
================================
A finalized sale. Owned by the ledger; changed afterwards only
by the edit and cancel transitions.

Status transitions:
    completed → edited
    edited    → edited
    completed | edited → cancelled   (terminal, record is kept)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from core.config.fees import PaymentMethod
from core.primitives.item import DiscountDescriptor, LineItem


class SaleStatus(Enum):
    COMPLETED = "completed"
    EDITED = "edited"
    CANCELLED = "cancelled"


def _dt(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


@dataclass(frozen=True)
class Sale:
    """
    Invariant: total == subtotal - total_discount + payment_fee.
    The four amounts are always produced together by the pricing
    engine, never adjusted one at a time.
    """
    sale_id: str
    items: Tuple[LineItem, ...]
    subtotal: float
    total_discount: float
    payment_fee: float
    total: float
    payment_method: PaymentMethod
    created_at: datetime
    status: SaleStatus = SaleStatus.COMPLETED
    notes: Optional[str] = None
    discount: Optional[DiscountDescriptor] = None
    updated_at: Optional[datetime] = None

    @property
    def is_cancelled(self) -> bool:
        return self.status is SaleStatus.CANCELLED

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.items)

    def to_dict(self) -> dict:
        return {
            "id": self.sale_id,
            "items": [line.to_dict() for line in self.items],
            "subtotal": self.subtotal,
            "total_discount": self.total_discount,
            "payment_fee": self.payment_fee,
            "total": self.total,
            "payment_method": self.payment_method.value,
            "created_at": self.created_at.isoformat(),
            "status": self.status.value,
            "notes": self.notes,
            "discount": self.discount.to_dict() if self.discount else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Sale:
        return cls(
            sale_id=data["id"],
            items=tuple(LineItem.from_dict(item) for item in data["items"]),
            subtotal=data["subtotal"],
            total_discount=data["total_discount"],
            payment_fee=data["payment_fee"],
            total=data["total"],
            payment_method=PaymentMethod.parse(data["payment_method"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            status=SaleStatus(data.get("status", SaleStatus.COMPLETED.value)),
            notes=data.get("notes"),
            discount=(
                DiscountDescriptor.from_dict(data["discount"])
                if data.get("discount") else None
            ),
            updated_at=_dt(data.get("updated_at")),
        )
