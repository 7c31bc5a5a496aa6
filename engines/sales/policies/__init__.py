"""
PDV Sales Engine - Policies
=============================
Validation policies for the sale lifecycle.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from core.commands.rejection import ReasonCode, RejectionReason
from core.primitives.item import LineItem
from engines.sales.models import Sale, SaleStatus


def cart_must_not_be_empty_policy(
    lines: Sequence[LineItem],
) -> Optional[RejectionReason]:
    if not lines:
        return RejectionReason(
            code=ReasonCode.EMPTY_CART,
            message="Cannot finalize a sale from an empty cart.",
            policy_name="cart_must_not_be_empty_policy",
        )
    return None


def sale_must_exist_policy(
    sale_id: str,
    sale_lookup: Callable[[str], Optional[Sale]],
) -> Optional[RejectionReason]:
    if sale_lookup(sale_id) is None:
        return RejectionReason(
            code=ReasonCode.SALE_NOT_FOUND,
            message=f"Sale '{sale_id}' not found.",
            policy_name="sale_must_exist_policy",
        )
    return None


def edit_requires_active_sale_policy(sale: Sale) -> Optional[RejectionReason]:
    """Only completed or already edited sales can be edited."""
    if sale.status is SaleStatus.CANCELLED:
        return RejectionReason(
            code=ReasonCode.SALE_CANCELLED,
            message=(
                f"Sale '{sale.sale_id}' is cancelled. "
                f"Cancelled sales cannot be edited."
            ),
            policy_name="edit_requires_active_sale_policy",
        )
    return None
