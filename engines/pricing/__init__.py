"""
PDV Pricing Engine - Public API
=================================
Pure totals computation for carts and historical sales.
"""

from engines.pricing.calculator import (
    CartTotals,
    PaymentTotals,
    SaleTotals,
    clamp_percent,
    compute_cart_totals,
    compute_line_discount,
    compute_line_discounts,
    compute_payment_fee,
    compute_payment_total,
    compute_sale_totals,
    compute_subtotal,
    distribute_discount,
    normalize_discount,
)

__all__ = [
    "CartTotals",
    "PaymentTotals",
    "SaleTotals",
    "clamp_percent",
    "compute_subtotal",
    "compute_line_discount",
    "compute_line_discounts",
    "normalize_discount",
    "distribute_discount",
    "compute_cart_totals",
    "compute_payment_fee",
    "compute_payment_total",
    "compute_sale_totals",
]
