"""
PDV Item Primitive - Product / Line Item / Discount
=====================================================
Shared value types consumed by: Catalog, Cart, Pricing, Sales,
Reporting.

RULES:
- Values are immutable snapshots (frozen dataclasses)
- A sale keeps the Product value it was rung up with, so
  catalog edits and deletes never alter history
- Prices are floats; no rounding happens here
- Line discounts are percentages, stored as given and clamped
  to [0, 100] by every computation

This file contains NO persistence logic.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from core.errors import ValidationError


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# ══════════════════════════════════════════════════════════════
# PRODUCT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Product:
    """
    Catalog product.

    stock may go negative after sales: that is a visible
    data-integrity signal, never an error.
    """
    product_id: str
    name: str
    price: float
    stock: int
    category: str = ""
    description: Optional[str] = None
    barcode: Optional[str] = None
    image_url: Optional[str] = None

    def is_low_stock(self, threshold: int) -> bool:
        return self.stock < threshold

    def with_stock(self, stock: int) -> Product:
        return replace(self, stock=stock)

    def to_dict(self) -> dict:
        return {
            "id": self.product_id,
            "name": self.name,
            "price": self.price,
            "stock": self.stock,
            "category": self.category,
            "description": self.description,
            "barcode": self.barcode,
            "image_url": self.image_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Product:
        return cls(
            product_id=data["id"],
            name=data["name"],
            price=data["price"],
            stock=data["stock"],
            category=data.get("category", ""),
            description=data.get("description"),
            barcode=data.get("barcode"),
            image_url=data.get("image_url"),
        )


# ══════════════════════════════════════════════════════════════
# LINE ITEM
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LineItem:
    """One product + quantity + discount percentage in a Cart or Sale."""
    product: Product
    quantity: int
    discount: float = 0.0

    def __post_init__(self):
        if not isinstance(self.product, Product):
            raise ValidationError("product must be a Product.")
        if (
            not isinstance(self.quantity, int)
            or isinstance(self.quantity, bool)
            or self.quantity <= 0
        ):
            raise ValidationError("quantity must be positive integer.")
        if not _is_number(self.discount):
            raise ValidationError("discount must be a number.")

    @property
    def product_id(self) -> str:
        return self.product.product_id

    @property
    def gross_amount(self) -> float:
        return self.product.price * self.quantity

    def to_dict(self) -> dict:
        return {
            "product": self.product.to_dict(),
            "quantity": self.quantity,
            "discount": self.discount,
        }

    @classmethod
    def from_dict(cls, data: dict) -> LineItem:
        return cls(
            product=Product.from_dict(data["product"]),
            quantity=data["quantity"],
            discount=data.get("discount", 0.0),
        )


# ══════════════════════════════════════════════════════════════
# SALE-LEVEL DISCOUNT
# ══════════════════════════════════════════════════════════════

class DiscountKind(Enum):
    PERCENTAGE = "percentage"
    AMOUNT = "amount"


@dataclass(frozen=True)
class DiscountDescriptor:
    """
    Global (whole-sale) discount as the operator typed it.

    Stored on the Sale unchanged, so an edit starts from what was
    entered instead of a percentage derived back from an amount.
    """
    kind: DiscountKind
    value: float

    def __post_init__(self):
        if not isinstance(self.kind, DiscountKind):
            raise ValidationError(f"discount kind '{self.kind}' not valid.")
        if not _is_number(self.value):
            raise ValidationError("discount value must be a number.")

    @classmethod
    def percentage(cls, percent: float) -> DiscountDescriptor:
        return cls(kind=DiscountKind.PERCENTAGE, value=percent)

    @classmethod
    def amount(cls, amount: float) -> DiscountDescriptor:
        return cls(kind=DiscountKind.AMOUNT, value=amount)

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict) -> DiscountDescriptor:
        try:
            kind = DiscountKind(data["kind"])
        except (KeyError, ValueError):
            raise ValidationError(
                f"discount kind '{data.get('kind')}' not valid."
            ) from None
        return cls(kind=kind, value=data["value"])
