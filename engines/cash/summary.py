"""
PDV Cash Engine - Payment Summary
===================================
Fold of a session's sales into per-method buckets.

Recomputed on every call, never cached: an edited or cancelled
sale is reflected by the very next summary.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable

from core.config.fees import PaymentMethod
from engines.sales.models import Sale


@dataclass(frozen=True)
class PaymentSummary:
    cash: float = 0.0
    credit: float = 0.0
    debit: float = 0.0
    pix: float = 0.0
    total: float = 0.0
    total_discounts: float = 0.0
    total_payment_fees: float = 0.0

    def amount_for(self, method) -> float:
        return getattr(self, PaymentMethod.parse(method).value)

    def to_dict(self) -> dict:
        return {
            "cash": self.cash,
            "credit": self.credit,
            "debit": self.debit,
            "pix": self.pix,
            "total": self.total,
            "total_discounts": self.total_discounts,
            "total_payment_fees": self.total_payment_fees,
        }


def summarize(sales: Iterable[Sale]) -> PaymentSummary:
    """Cancelled sales contribute zero to every bucket."""
    summary = PaymentSummary()
    for sale in sales:
        if sale.is_cancelled:
            continue
        bucket = sale.payment_method.value
        summary = replace(
            summary,
            **{bucket: getattr(summary, bucket) + sale.total},
            total=summary.total + sale.total,
            total_discounts=summary.total_discounts + sale.total_discount,
            total_payment_fees=summary.total_payment_fees + sale.payment_fee,
        )
    return summary
