"""
Tests for engines.pricing: subtotal, discounts and payment fees.
"""

import pytest

from core.config.fees import DEFAULT_FEE_SCHEDULE, FeeRule, PaymentMethod
from core.errors import ValidationError
from core.primitives.item import DiscountDescriptor, LineItem, Product
from engines.pricing import (
    compute_cart_totals,
    compute_line_discounts,
    compute_payment_fee,
    compute_payment_total,
    compute_sale_totals,
    compute_subtotal,
    distribute_discount,
    normalize_discount,
)


def _line(price, quantity=1, discount=0.0, pid="p-1"):
    product = Product(product_id=pid, name=pid, price=price, stock=10)
    return LineItem(product=product, quantity=quantity, discount=discount)


HUNDRED = (_line(25.0, 2, pid="a"), _line(50.0, 1, pid="b"))


class TestSubtotalAndDiscounts:
    def test_subtotal(self):
        assert compute_subtotal(HUNDRED) == 100.0
        assert compute_subtotal(()) == 0.0

    def test_line_discounts(self):
        lines = (_line(10.0, 2, 10, "a"), _line(50.0, 1, 50, "b"))
        assert compute_line_discounts(lines) == pytest.approx(27.0)

    def test_line_discount_is_clamped(self):
        assert compute_line_discounts((_line(10.0, 1, 150),)) == 10.0
        assert compute_line_discounts((_line(10.0, 1, -20),)) == 0.0

    @pytest.mark.parametrize(
        "descriptor, expected",
        [
            (DiscountDescriptor.percentage(10), 10.0),
            (DiscountDescriptor.amount(15), 15.0),
            (DiscountDescriptor.amount(250), 100.0),
            (DiscountDescriptor.amount(-5), 0.0),
            (DiscountDescriptor.percentage(120), 100.0),
        ],
    )
    def test_normalize_discount(self, descriptor, expected):
        assert normalize_discount(descriptor, 100.0) == expected

    def test_cart_totals_use_line_discounts_without_descriptor(self):
        totals = compute_cart_totals((_line(100.0, 1, 10),))
        assert totals.total_discount == 10.0
        assert totals.subtotal_after_discount == 90.0

    def test_cart_totals_descriptor_governs(self):
        totals = compute_cart_totals((_line(100.0, 1, 10),), DiscountDescriptor.amount(30))
        assert totals.total_discount == 30.0
        assert totals.subtotal_after_discount == 70.0


class TestDistributeDiscount:
    def test_none_returns_lines_unchanged(self):
        assert distribute_discount(HUNDRED, None) == HUNDRED

    def test_percentage_applied_to_every_line(self):
        lines = distribute_discount(HUNDRED, DiscountDescriptor.percentage(10))
        assert [line.discount for line in lines] == [10, 10]
        assert compute_line_discounts(lines) == pytest.approx(10.0)

    def test_amount_converted_to_share_of_subtotal(self):
        lines = distribute_discount(HUNDRED, DiscountDescriptor.amount(20))
        assert [line.discount for line in lines] == [20.0, 20.0]
        assert compute_line_discounts(lines) == pytest.approx(20.0)

    def test_zero_subtotal_amount_discount(self):
        lines = distribute_discount((_line(0.0),), DiscountDescriptor.amount(5))
        assert lines[0].discount == 0.0

    def test_input_lines_untouched(self):
        distribute_discount(HUNDRED, DiscountDescriptor.percentage(50))
        assert all(line.discount == 0.0 for line in HUNDRED)


class TestPaymentFee:
    def test_credit_percentage(self):
        totals = compute_payment_total(100.0, "credit", DEFAULT_FEE_SCHEDULE)
        assert totals.payment_fee == 3.5
        assert totals.total == 103.5

    def test_debit_percentage(self):
        assert compute_payment_fee(100.0, PaymentMethod.DEBIT, DEFAULT_FEE_SCHEDULE) == 2.0

    @pytest.mark.parametrize("method", ["cash", "pix"])
    def test_cash_and_pix_never_charged(self, method):
        schedule = DEFAULT_FEE_SCHEDULE.with_rule(method, FeeRule.percentage(5))
        totals = compute_payment_total(100.0, method, schedule)
        assert totals.payment_fee == 0.0
        assert totals.total == 100.0

    @pytest.mark.parametrize("method", ["credit", "debit"])
    def test_fixed_rule_on_card_yields_no_fee(self, method):
        schedule = DEFAULT_FEE_SCHEDULE.with_rule(method, FeeRule.fixed(1.5))
        assert compute_payment_fee(100.0, method, schedule) == 0.0

    def test_unknown_method(self):
        with pytest.raises(ValidationError):
            compute_payment_fee(100.0, "voucher", DEFAULT_FEE_SCHEDULE)


class TestSaleTotals:
    @pytest.mark.parametrize("method", ["cash", "credit", "debit", "pix"])
    def test_total_invariant(self, method):
        lines = (_line(19.9, 3, 7.5, "a"), _line(3.33, 7, 0, "b"))
        totals = compute_sale_totals(lines, method, DEFAULT_FEE_SCHEDULE)
        assert totals.total == totals.subtotal - totals.total_discount + totals.payment_fee

    def test_fee_charged_on_discounted_amount(self):
        totals = compute_sale_totals(
            HUNDRED, "credit", DEFAULT_FEE_SCHEDULE, DiscountDescriptor.amount(20),
        )
        assert totals.total_discount == 20.0
        assert totals.payment_fee == pytest.approx(2.8)
        assert totals.total == pytest.approx(82.8)
