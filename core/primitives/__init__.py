"""
PDV Core Primitives - Shared Value Types
==========================================
Pure Python, immutable, deterministic building blocks used by
every engine.

Primitives:
    item  - Product, LineItem, DiscountDescriptor
"""

from core.primitives.item import (
    DiscountDescriptor,
    DiscountKind,
    LineItem,
    Product,
)

__all__ = [
    "Product",
    "LineItem",
    "DiscountKind",
    "DiscountDescriptor",
]
