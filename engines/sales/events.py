"""
PDV Sales Engine - Event Types and Payload Builders
=====================================================
Sales owns the ledger: finalize → edit* → cancel.
Finalization also decrements catalog stock and records the sale
on the open register session.
"""

from __future__ import annotations

from engines.sales.models import Sale


SALES_SALE_FINALIZED_V1 = "sales.sale.finalized.v1"
SALES_SALE_EDITED_V1 = "sales.sale.edited.v1"
SALES_SALE_CANCELLED_V1 = "sales.sale.cancelled.v1"

SALES_EVENT_TYPES = (
    SALES_SALE_FINALIZED_V1,
    SALES_SALE_EDITED_V1,
    SALES_SALE_CANCELLED_V1,
)


def _totals(sale: Sale) -> dict:
    return {
        "subtotal": sale.subtotal,
        "total_discount": sale.total_discount,
        "payment_fee": sale.payment_fee,
        "total": sale.total,
    }


def build_sale_finalized_payload(sale: Sale, session_id: str) -> dict:
    payload = {
        "sale_id": sale.sale_id,
        "session_id": session_id,
        "payment_method": sale.payment_method.value,
        "lines": [
            {"product_id": line.product_id, "quantity": line.quantity}
            for line in sale.items
        ],
        "created_at": sale.created_at,
    }
    payload.update(_totals(sale))
    return payload


def build_sale_edited_payload(previous: Sale, sale: Sale) -> dict:
    payload = {
        "sale_id": sale.sale_id,
        "payment_method": sale.payment_method.value,
        "previous_total": previous.total,
        "edited_at": sale.updated_at,
    }
    payload.update(_totals(sale))
    return payload


def build_sale_cancelled_payload(sale: Sale) -> dict:
    return {
        "sale_id": sale.sale_id,
        "total": sale.total,
        "payment_method": sale.payment_method.value,
        "cancelled_at": sale.updated_at,
    }
