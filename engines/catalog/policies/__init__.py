"""
PDV Catalog Engine - Policies
===============================
Validation policies for catalog operations.
"""

from __future__ import annotations

from typing import Callable, Optional

from core.commands.rejection import ReasonCode, RejectionReason
from core.primitives.item import Product


def product_must_exist_policy(
    product_id: str,
    product_lookup: Callable[[str], Optional[Product]],
) -> Optional[RejectionReason]:
    if product_lookup(product_id) is None:
        return RejectionReason(
            code=ReasonCode.PRODUCT_NOT_FOUND,
            message=f"Product '{product_id}' not found.",
            policy_name="product_must_exist_policy",
        )
    return None


def product_update_valid_policy(product: Product) -> Optional[RejectionReason]:
    """
    Price stays non-negative on update. Stock is not range-checked:
    after sales it can legitimately be negative.
    """
    if not product.name:
        return RejectionReason(
            code=ReasonCode.INVALID_INPUT,
            message="Product name must be non-empty.",
            policy_name="product_update_valid_policy",
        )
    if isinstance(product.price, bool) or not isinstance(product.price, (int, float)) \
            or product.price < 0:
        return RejectionReason(
            code=ReasonCode.INVALID_INPUT,
            message=f"Product price must be non-negative, got {product.price}.",
            policy_name="product_update_valid_policy",
        )
    if isinstance(product.stock, bool) or not isinstance(product.stock, int):
        return RejectionReason(
            code=ReasonCode.INVALID_INPUT,
            message="Product stock must be an integer.",
            policy_name="product_update_valid_policy",
        )
    return None
