"""
PDV Sales Engine - Request Commands
=====================================
Typed sale requests, validated on construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from core.config.fees import PaymentMethod
from core.errors import ValidationError
from core.primitives.item import DiscountDescriptor, LineItem


def _validate_discount(discount) -> None:
    if discount is not None and not isinstance(discount, DiscountDescriptor):
        raise ValidationError("discount must be a DiscountDescriptor or None.")


@dataclass(frozen=True)
class FinalizeSaleRequest:
    """Turn the cart into a sale. payment_method accepts the enum or its value."""
    payment_method: PaymentMethod
    discount: Optional[DiscountDescriptor] = None
    notes: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(
            self, "payment_method", PaymentMethod.parse(self.payment_method),
        )
        _validate_discount(self.discount)


@dataclass(frozen=True)
class EditSaleRequest:
    """Replace a sale's lines, payment method and global discount."""
    sale_id: str
    lines: Tuple[LineItem, ...]
    payment_method: PaymentMethod
    discount: Optional[DiscountDescriptor] = None

    def __post_init__(self):
        if not self.sale_id:
            raise ValidationError("sale_id must be non-empty.")
        object.__setattr__(self, "lines", tuple(self.lines))
        if not self.lines:
            raise ValidationError("lines must be non-empty.")
        if not all(isinstance(line, LineItem) for line in self.lines):
            raise ValidationError("lines must contain LineItem values.")
        object.__setattr__(
            self, "payment_method", PaymentMethod.parse(self.payment_method),
        )
        _validate_discount(self.discount)
