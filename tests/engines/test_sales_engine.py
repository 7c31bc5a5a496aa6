"""
Tests for engines.sales: finalize, edit and cancel.
"""

from datetime import date, datetime, timezone

import pytest

from core.config.fees import DEFAULT_FEE_SCHEDULE, FeeRule, PaymentMethod
from core.errors import InvalidTransition, NoOpenSession, NotFound, ValidationError
from core.events.publisher import EventPublisher
from core.identity.ids import SequentialIdProvider
from core.primitives.item import DiscountDescriptor, LineItem
from core.time.clock import FixedClock
from engines.cart.services import Cart
from engines.cash.services import CashRegisterService
from engines.catalog.commands import AddProductRequest
from engines.catalog.services import CatalogService
from engines.pricing.calculator import compute_line_discounts
from engines.sales.events import (
    SALES_SALE_CANCELLED_V1,
    SALES_SALE_EDITED_V1,
    SALES_SALE_FINALIZED_V1,
)
from engines.sales.models import SaleStatus
from engines.sales.services import SaleLedger, SaleService

NOW = datetime(2025, 3, 1, 14, 0, tzinfo=timezone.utc)


class Till:
    """Catalog + cart + register + ledger wired to one publisher."""

    def __init__(self):
        self.clock = FixedClock(NOW)
        self.publisher = EventPublisher(clock=self.clock)
        self.heard = []
        self.publisher.subscribe(self.heard.append)
        ids = SequentialIdProvider("id")
        self.ledger = SaleLedger()
        self.catalog = CatalogService(publisher=self.publisher, id_provider=ids)
        self.cart = Cart(publisher=self.publisher)
        self.register = CashRegisterService(
            sale_lookup=self.ledger.get,
            publisher=self.publisher,
            clock=self.clock,
            id_provider=ids,
        )
        self.sales = SaleService(
            catalog=self.catalog,
            register=self.register,
            ledger=self.ledger,
            publisher=self.publisher,
            clock=self.clock,
            id_provider=ids,
        )
        self.coffee = self.catalog.add(AddProductRequest(name="Coffee", price=25.0, stock=10))
        self.cake = self.catalog.add(AddProductRequest(name="Cake", price=50.0, stock=3))

    def ring(self, method="cash", discount=None, **quantities):
        products = {"coffee": self.coffee, "cake": self.cake}
        for name, quantity in quantities.items():
            self.cart.add(products[name], quantity)
        return self.sales.finalize(self.cart, method, DEFAULT_FEE_SCHEDULE, discount)


@pytest.fixture
def till():
    return Till()


# ── Finalize ─────────────────────────────────────────────────

class TestFinalize:
    def test_records_sale_everywhere(self, till):
        till.register.open(50.0)
        sale = till.ring("credit", coffee=2, cake=1)

        assert sale.subtotal == 100.0
        assert sale.payment_fee == 3.5
        assert sale.total == 103.5
        assert sale.status is SaleStatus.COMPLETED
        assert sale.created_at == NOW
        assert till.ledger.get(sale.sale_id) == sale
        assert till.register.current_session.sale_ids == (sale.sale_id,)
        assert till.catalog.get(till.coffee.product_id).stock == 8
        assert till.catalog.get(till.cake.product_id).stock == 2
        assert till.cart.is_empty

    def test_pix_has_no_fee(self, till):
        till.register.open(0.0)
        sale = till.ring("pix", coffee=4)
        assert sale.payment_fee == 0.0
        assert sale.total == 100.0

    def test_total_invariant_with_line_discounts(self, till):
        till.register.open(0.0)
        till.cart.add(till.coffee, 3)
        till.cart.set_line_discount(till.coffee.product_id, 12.5)
        sale = till.sales.finalize(till.cart, PaymentMethod.DEBIT, DEFAULT_FEE_SCHEDULE)
        assert sale.total_discount == pytest.approx(9.375)
        assert sale.total == sale.subtotal - sale.total_discount + sale.payment_fee

    def test_global_discount_is_distributed_and_kept(self, till):
        till.register.open(0.0)
        descriptor = DiscountDescriptor.amount(20)
        sale = till.ring("cash", discount=descriptor, coffee=2, cake=1)
        assert sale.total_discount == pytest.approx(20.0)
        assert sale.total == pytest.approx(80.0)
        assert sale.discount == descriptor
        assert [line.discount for line in sale.items] == [20.0, 20.0]

    def test_items_are_snapshots(self, till):
        till.register.open(0.0)
        sale = till.ring(coffee=1)
        till.catalog.delete(till.coffee.product_id)
        assert till.ledger.get(sale.sale_id).items[0].product.name == "Coffee"

    def test_stock_may_go_negative(self, till):
        till.register.open(0.0)
        till.ring(cake=5)
        assert till.catalog.get(till.cake.product_id).stock == -2

    def test_deleted_product_is_skipped(self, till):
        till.register.open(0.0)
        till.cart.add(till.coffee, 1)
        till.catalog.delete(till.coffee.product_id)
        sale = till.sales.finalize(till.cart, "cash", DEFAULT_FEE_SCHEDULE)
        assert sale.total == 25.0

    def test_events_heard_after_commit(self, till):
        till.register.open(0.0)
        till.heard.clear()
        till.ring(coffee=1)
        assert till.heard[-1].event_type == SALES_SALE_FINALIZED_V1
        assert "catalog.stock.decremented.v1" in [e.event_type for e in till.heard]

    def test_without_open_session_changes_nothing(self, till):
        till.cart.add(till.coffee, 2)
        lines = till.cart.lines
        with pytest.raises(NoOpenSession):
            till.sales.finalize(till.cart, "cash", DEFAULT_FEE_SCHEDULE)
        assert till.ledger.all() == ()
        assert till.cart.lines == lines
        assert till.catalog.get(till.coffee.product_id).stock == 10

    def test_empty_cart_rejected(self, till):
        till.register.open(0.0)
        with pytest.raises(ValidationError):
            till.sales.finalize(till.cart, "cash", DEFAULT_FEE_SCHEDULE)

    def test_unknown_method_rejected(self, till):
        till.register.open(0.0)
        till.cart.add(till.coffee, 1)
        with pytest.raises(ValidationError):
            till.sales.finalize(till.cart, "voucher", DEFAULT_FEE_SCHEDULE)
        assert len(till.cart) == 1

    def test_failure_mid_unit_rolls_everything_back(self, till, monkeypatch):
        till.register.open(0.0)
        till.cart.add(till.coffee, 2)
        lines = till.cart.lines
        till.heard.clear()

        def broken_clear():
            raise RuntimeError("cart storage failed")

        monkeypatch.setattr(till.cart, "clear", broken_clear)
        with pytest.raises(RuntimeError):
            till.sales.finalize(till.cart, "cash", DEFAULT_FEE_SCHEDULE)

        assert till.ledger.all() == ()
        assert till.register.current_session.sale_ids == ()
        assert till.catalog.get(till.coffee.product_id).stock == 10
        assert till.cart.lines == lines
        assert till.heard == []


# ── Edit ─────────────────────────────────────────────────────

class TestEdit:
    def test_recomputes_with_current_schedule(self, till):
        till.register.open(0.0)
        sale = till.ring("cash", coffee=2)
        schedule = DEFAULT_FEE_SCHEDULE.with_rule("credit", FeeRule.percentage(10))
        till.clock.advance(60)

        lines = (LineItem(product=till.cake, quantity=2),)
        edited = till.sales.edit(sale.sale_id, lines, "credit", schedule)

        assert edited.status is SaleStatus.EDITED
        assert edited.subtotal == 100.0
        assert edited.payment_fee == 10.0
        assert edited.total == 110.0
        assert edited.created_at == sale.created_at
        assert edited.updated_at > sale.created_at
        assert till.heard[-1].event_type == SALES_SALE_EDITED_V1

    def test_descriptor_is_spread_over_edited_lines(self, till):
        till.register.open(0.0)
        sale = till.ring(coffee=2)
        lines = (LineItem(product=till.coffee, quantity=4, discount=50),)
        edited = till.sales.edit(
            sale.sale_id, lines, "cash", DEFAULT_FEE_SCHEDULE,
            DiscountDescriptor.percentage(10),
        )
        assert edited.total_discount == 10.0
        assert edited.discount == DiscountDescriptor.percentage(10)
        assert [line.discount for line in edited.items] == [10.0]
        assert compute_line_discounts(edited.items) == edited.total_discount

    def test_amount_descriptor_matches_line_discounts(self, till):
        till.register.open(0.0)
        sale = till.ring(coffee=1)
        lines = (
            LineItem(product=till.coffee, quantity=2, discount=50),
            LineItem(product=till.cake, quantity=1),
        )
        edited = till.sales.edit(
            sale.sale_id, lines, "cash", DEFAULT_FEE_SCHEDULE,
            DiscountDescriptor.amount(25.0),
        )
        assert edited.total_discount == 25.0
        assert edited.total == 75.0
        assert compute_line_discounts(edited.items) == pytest.approx(25.0)

    def test_line_discounts_without_descriptor(self, till):
        till.register.open(0.0)
        sale = till.ring(coffee=2)
        lines = (LineItem(product=till.coffee, quantity=4, discount=50),)
        edited = till.sales.edit(sale.sale_id, lines, "cash", DEFAULT_FEE_SCHEDULE)
        assert edited.total_discount == 50.0
        assert edited.total == 50.0

    def test_edit_twice_stays_edited(self, till):
        till.register.open(0.0)
        sale = till.ring(coffee=1)
        lines = (LineItem(product=till.coffee, quantity=3),)
        till.sales.edit(sale.sale_id, lines, "cash", DEFAULT_FEE_SCHEDULE)
        again = till.sales.edit(sale.sale_id, lines, "pix", DEFAULT_FEE_SCHEDULE)
        assert again.status is SaleStatus.EDITED

    def test_does_not_touch_stock(self, till):
        till.register.open(0.0)
        sale = till.ring(coffee=1)
        lines = (LineItem(product=till.coffee, quantity=9),)
        till.sales.edit(sale.sale_id, lines, "cash", DEFAULT_FEE_SCHEDULE)
        assert till.catalog.get(till.coffee.product_id).stock == 9

    def test_unknown_sale(self, till):
        with pytest.raises(NotFound):
            till.sales.edit("ghost", (LineItem(product=till.coffee, quantity=1),),
                            "cash", DEFAULT_FEE_SCHEDULE)

    def test_cancelled_sale_cannot_be_edited(self, till):
        till.register.open(0.0)
        sale = till.ring(coffee=1)
        till.sales.cancel(sale.sale_id)
        with pytest.raises(InvalidTransition):
            till.sales.edit(sale.sale_id, (LineItem(product=till.coffee, quantity=1),),
                            "cash", DEFAULT_FEE_SCHEDULE)

    def test_empty_lines_rejected(self, till):
        till.register.open(0.0)
        sale = till.ring(coffee=1)
        with pytest.raises(ValidationError):
            till.sales.edit(sale.sale_id, (), "cash", DEFAULT_FEE_SCHEDULE)
        assert till.ledger.get(sale.sale_id) == sale


# ── Cancel ───────────────────────────────────────────────────

class TestCancel:
    def test_flags_and_keeps_record(self, till):
        till.register.open(0.0)
        sale = till.ring(coffee=1)
        cancelled = till.sales.cancel(sale.sale_id)
        assert cancelled.status is SaleStatus.CANCELLED
        assert cancelled.total == sale.total
        assert till.sales.list() == (cancelled,)
        assert till.catalog.get(till.coffee.product_id).stock == 9
        assert till.heard[-1].event_type == SALES_SALE_CANCELLED_V1

    def test_cancel_twice_is_noop(self, till):
        till.register.open(0.0)
        sale = till.ring(coffee=1)
        first = till.sales.cancel(sale.sale_id)
        events = len(till.heard)
        second = till.sales.cancel(sale.sale_id)
        assert second == first
        assert len(till.heard) == events

    def test_unknown_sale(self, till):
        with pytest.raises(NotFound):
            till.sales.cancel("ghost")


# ── Queries ──────────────────────────────────────────────────

class TestSaleQueries:
    def test_list_for_day_and_resolve(self, till):
        till.register.open(0.0)
        first = till.ring(coffee=1)
        till.clock.advance(24 * 3600)
        second = till.ring(coffee=1)

        assert till.sales.list_for_day(date(2025, 3, 1)) == [first]
        assert till.sales.list_for_day(date(2025, 3, 2)) == [second]
        assert till.sales.resolve([second.sale_id, "ghost"]) == (second,)

    def test_get_unknown(self, till):
        with pytest.raises(NotFound):
            till.sales.get("ghost")
        assert till.sales.find("ghost") is None
