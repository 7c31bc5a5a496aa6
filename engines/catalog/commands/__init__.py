"""
PDV Catalog Engine - Request Commands
=======================================
Typed catalog requests, validated on construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.errors import ValidationError


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class AddProductRequest:
    """Register a new product. The catalog assigns the id."""
    name: str
    price: float
    stock: int
    category: str = ""
    description: Optional[str] = None
    barcode: Optional[str] = None
    image_url: Optional[str] = None

    def __post_init__(self):
        if not self.name or not isinstance(self.name, str):
            raise ValidationError("name must be non-empty.")
        if not _is_number(self.price) or self.price < 0:
            raise ValidationError("price must be non-negative number.")
        if not isinstance(self.stock, int) or isinstance(self.stock, bool):
            raise ValidationError("stock must be an integer.")
        if self.stock < 0:
            raise ValidationError("stock must be non-negative integer.")
