"""
PDV Cart Engine - Event Types and Payload Builders
====================================================
The cart is transient: these events exist so a screen can
re-render, nothing durable listens to them.
"""

from __future__ import annotations

from core.primitives.item import LineItem


CART_LINE_ADDED_V1 = "cart.line.added.v1"
CART_LINE_REMOVED_V1 = "cart.line.removed.v1"
CART_LINE_DISCOUNTED_V1 = "cart.line.discounted.v1"
CART_LINE_QUANTITY_SET_V1 = "cart.line.quantity_set.v1"
CART_CLEARED_V1 = "cart.cleared.v1"

CART_EVENT_TYPES = (
    CART_LINE_ADDED_V1,
    CART_LINE_REMOVED_V1,
    CART_LINE_DISCOUNTED_V1,
    CART_LINE_QUANTITY_SET_V1,
    CART_CLEARED_V1,
)


def build_line_payload(line: LineItem) -> dict:
    return {
        "product_id": line.product_id,
        "quantity": line.quantity,
        "discount": line.discount,
    }


def build_line_removed_payload(product_id: str) -> dict:
    return {"product_id": product_id}


def build_cart_cleared_payload(line_count: int) -> dict:
    return {"lines_cleared": line_count}
