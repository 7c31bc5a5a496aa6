"""
PDV Cart Engine - In-Progress Sale
====================================
Ordered line items, unique by product id.

No stock validation happens here: stock sufficiency is never
enforced, overselling shows up later as negative stock.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, List, Optional, Tuple

from core.errors import ValidationError
from core.events.publisher import EventPublisher
from core.primitives.item import LineItem, Product
from engines.cart.events import (
    CART_CLEARED_V1,
    CART_LINE_ADDED_V1,
    CART_LINE_DISCOUNTED_V1,
    CART_LINE_QUANTITY_SET_V1,
    CART_LINE_REMOVED_V1,
    build_cart_cleared_payload,
    build_line_payload,
    build_line_removed_payload,
)

logger = logging.getLogger("pdv.cart")


def _require_positive_quantity(quantity) -> None:
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
        raise ValidationError("quantity must be positive integer.")


class Cart:
    def __init__(
        self,
        lines: Iterable[LineItem] = (),
        *,
        publisher: EventPublisher | None = None,
    ):
        self._lines: List[LineItem] = list(lines)
        self._publisher = publisher or EventPublisher()

    def _index_of(self, product_id: str) -> Optional[int]:
        for index, line in enumerate(self._lines):
            if line.product_id == product_id:
                return index
        return None

    # ── Mutations ─────────────────────────────────────────────

    def add(self, product: Product, quantity: int = 1) -> LineItem:
        """
        Add a product. An existing line for the same product has its
        quantity increased and its discount left as it was.
        """
        _require_positive_quantity(quantity)

        index = self._index_of(product.product_id)
        if index is None:
            line = LineItem(product=product, quantity=quantity, discount=0.0)
            self._lines.append(line)
        else:
            current = self._lines[index]
            line = replace(current, quantity=current.quantity + quantity)
            self._lines[index] = line

        logger.debug(f"Cart line added: {product.product_id} x{quantity}")
        self._publisher.publish(CART_LINE_ADDED_V1, build_line_payload(line))
        return line

    def remove(self, product_id: str) -> bool:
        index = self._index_of(product_id)
        if index is None:
            return False
        del self._lines[index]
        self._publisher.publish(
            CART_LINE_REMOVED_V1, build_line_removed_payload(product_id),
        )
        return True

    def set_line_discount(self, product_id: str, percent: float) -> Optional[LineItem]:
        """
        Store a line discount percentage as given; pricing clamps it
        to [0, 100]. Absent lines are ignored.
        """
        index = self._index_of(product_id)
        if index is None:
            return None
        line = replace(self._lines[index], discount=percent)
        self._lines[index] = line
        self._publisher.publish(CART_LINE_DISCOUNTED_V1, build_line_payload(line))
        return line

    def set_line_quantity(self, product_id: str, quantity: int) -> Optional[LineItem]:
        _require_positive_quantity(quantity)
        index = self._index_of(product_id)
        if index is None:
            return None
        line = replace(self._lines[index], quantity=quantity)
        self._lines[index] = line
        self._publisher.publish(CART_LINE_QUANTITY_SET_V1, build_line_payload(line))
        return line

    def clear(self) -> None:
        count = len(self._lines)
        self._lines = []
        self._publisher.publish(CART_CLEARED_V1, build_cart_cleared_payload(count))

    def restore(self, lines: Iterable[LineItem]) -> None:
        self._lines = list(lines)

    # ── Queries ───────────────────────────────────────────────

    @property
    def lines(self) -> Tuple[LineItem, ...]:
        return tuple(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def get_line(self, product_id: str) -> Optional[LineItem]:
        index = self._index_of(product_id)
        return None if index is None else self._lines[index]

    def __len__(self) -> int:
        return len(self._lines)
