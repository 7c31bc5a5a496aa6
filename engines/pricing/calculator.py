"""
PDV Pricing Engine - Totals Calculator
========================================
Pure computation, no stored state.

    subtotal                = Σ price × quantity
    total_discount          = per-line percentages, or a global
                              DiscountDescriptor when one is given
    subtotal_after_discount = subtotal - total_discount  (never < 0)
    payment_fee             = see compute_payment_fee()
    total                   = subtotal_after_discount + payment_fee

No rounding is applied. Stored totals are the raw float results;
currency rounding belongs to display formatting.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple

from core.config.fees import (
    FEE_EXEMPT_METHODS,
    FeeKind,
    FeeSchedule,
    PaymentMethod,
)
from core.primitives.item import DiscountDescriptor, DiscountKind, LineItem


# ══════════════════════════════════════════════════════════════
# RESULT TYPES
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CartTotals:
    subtotal: float
    total_discount: float
    subtotal_after_discount: float


@dataclass(frozen=True)
class PaymentTotals:
    payment_fee: float
    total: float


@dataclass(frozen=True)
class SaleTotals:
    """total == subtotal - total_discount + payment_fee, by construction."""
    subtotal: float
    total_discount: float
    payment_fee: float
    total: float


# ══════════════════════════════════════════════════════════════
# DISCOUNTS
# ══════════════════════════════════════════════════════════════

def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def clamp_percent(percent: float) -> float:
    return clamp(percent, 0, 100)


def compute_subtotal(lines: Iterable[LineItem]) -> float:
    return sum((line.product.price * line.quantity for line in lines), 0.0)


def compute_line_discount(line: LineItem) -> float:
    return line.product.price * line.quantity * clamp_percent(line.discount) / 100


def compute_line_discounts(lines: Iterable[LineItem]) -> float:
    return sum((compute_line_discount(line) for line in lines), 0.0)


def normalize_discount(descriptor: DiscountDescriptor, subtotal: float) -> float:
    """Currency amount of a global discount, clamped to [0, subtotal]."""
    if descriptor.kind is DiscountKind.PERCENTAGE:
        amount = subtotal * descriptor.value / 100
    else:
        amount = min(descriptor.value, subtotal)
    return clamp(amount, 0, subtotal)


def distribute_discount(
    lines: Iterable[LineItem], descriptor: Optional[DiscountDescriptor],
) -> Tuple[LineItem, ...]:
    """
    Spread a global discount over every line as the same percentage.

    An amount is converted to its share of the subtotal, so the
    per-line discounts add back up to normalize_discount().
    """
    lines = tuple(lines)
    if descriptor is None:
        return lines

    subtotal = compute_subtotal(lines)
    if descriptor.kind is DiscountKind.PERCENTAGE:
        percent = clamp_percent(descriptor.value)
    elif subtotal > 0:
        percent = normalize_discount(descriptor, subtotal) / subtotal * 100
    else:
        percent = 0.0
    return tuple(replace(line, discount=percent) for line in lines)


def compute_cart_totals(
    lines: Iterable[LineItem],
    global_discount: Optional[DiscountDescriptor] = None,
) -> CartTotals:
    """
    Without a global discount the per-line percentages apply;
    with one, the descriptor alone governs the discount.
    """
    lines = tuple(lines)
    subtotal = compute_subtotal(lines)
    if global_discount is None:
        total_discount = clamp(compute_line_discounts(lines), 0, subtotal)
    else:
        total_discount = normalize_discount(global_discount, subtotal)
    return CartTotals(
        subtotal=subtotal,
        total_discount=total_discount,
        subtotal_after_discount=max(0.0, subtotal - total_discount),
    )


# ══════════════════════════════════════════════════════════════
# PAYMENT FEES
# ══════════════════════════════════════════════════════════════

def compute_payment_fee(
    amount: float, payment_method, fee_schedule: FeeSchedule,
) -> float:
    """
    cash and pix never carry a fee, whatever rule is configured.
    credit and debit are charged only by a percentage rule; a
    fixed rule on them yields no fee.
    """
    method = PaymentMethod.parse(payment_method)
    if method in FEE_EXEMPT_METHODS:
        return 0.0

    rule = fee_schedule.rule_for(method)
    if rule.kind is FeeKind.PERCENTAGE:
        return amount * rule.value / 100
    return 0.0


def compute_payment_total(
    subtotal_after_discount: float, payment_method, fee_schedule: FeeSchedule,
) -> PaymentTotals:
    fee = compute_payment_fee(subtotal_after_discount, payment_method, fee_schedule)
    return PaymentTotals(payment_fee=fee, total=subtotal_after_discount + fee)


def compute_sale_totals(
    lines: Iterable[LineItem],
    payment_method,
    fee_schedule: FeeSchedule,
    global_discount: Optional[DiscountDescriptor] = None,
) -> SaleTotals:
    cart_totals = compute_cart_totals(lines, global_discount)
    subtotal_after_discount = cart_totals.subtotal - cart_totals.total_discount
    payment = compute_payment_total(
        subtotal_after_discount, payment_method, fee_schedule,
    )
    return SaleTotals(
        subtotal=cart_totals.subtotal,
        total_discount=cart_totals.total_discount,
        payment_fee=payment.payment_fee,
        total=subtotal_after_discount + payment.payment_fee,
    )
