"""
Shared fixtures: a fully populated PDV state.
"""

from datetime import datetime, timedelta, timezone

import pytest

from core.config.fees import DEFAULT_FEE_SCHEDULE, FeeRule, PaymentMethod
from core.persistence import PdvState
from core.primitives.item import DiscountDescriptor, LineItem, Product
from engines.cash.models import CashRegisterSession, SessionStatus
from engines.sales.models import Sale, SaleStatus

BRT = timezone(timedelta(hours=-3))


def build_state() -> PdvState:
    coffee = Product(product_id="p-1", name="Coffee", price=0.1, stock=-2, category="drinks")
    bread = Product(product_id="p-2", name="Bread", price=1 / 3, stock=40, barcode="789")
    line = LineItem(product=coffee, quantity=3, discount=12.5)
    sale = Sale(
        sale_id="s-1",
        items=(line, LineItem(product=bread, quantity=1)),
        subtotal=0.30000000000000004 + 1 / 3,
        total_discount=0.0375,
        payment_fee=0.021,
        total=0.30000000000000004 + 1 / 3 - 0.0375 + 0.021,
        payment_method=PaymentMethod.CREDIT,
        created_at=datetime(2025, 3, 1, 9, 30, 15, 123456, tzinfo=BRT),
        status=SaleStatus.EDITED,
        notes="table 4",
        discount=DiscountDescriptor.amount(0.0375),
        updated_at=datetime(2025, 3, 1, 10, 0, 0, 1, tzinfo=timezone.utc),
    )
    closed = CashRegisterSession(
        session_id="r-1",
        opened_at=datetime(2025, 2, 28, 8, 0, 0, 999999, tzinfo=timezone.utc),
        opening_balance=50.0,
        status=SessionStatus.CLOSED,
        closed_at=datetime(2025, 2, 28, 18, 0, tzinfo=timezone.utc),
        expected_closing_balance=70.0,
        actual_closing_balance=65.0,
        cash_shortage=-5.0,
    )
    current = CashRegisterSession(
        session_id="r-2",
        opened_at=datetime(2025, 3, 1, 8, 0, tzinfo=BRT),
        opening_balance=100.0,
        sale_ids=("s-1",),
        notes="morning",
    )
    return PdvState(
        products=(coffee, bread),
        sales=(sale,),
        cash_registers=(closed, current),
        fee_schedule=DEFAULT_FEE_SCHEDULE.with_rule("pix", FeeRule.percentage(0.99)),
        cart=(LineItem(product=bread, quantity=2, discount=5),),
    )




@pytest.fixture
def sample_state() -> PdvState:
    return build_state()
