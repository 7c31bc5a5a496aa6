"""
PDV Sales Engine - Application Service
========================================
Sale ledger plus the finalize / edit / cancel transitions.

Finalization is the one operation touching three engines:
    1. ledger append
    2. register session append
    3. catalog stock decrement
    4. cart clear
These four effects are one unit. If any of them fails, every
store is put back as it was and no event is heard.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from core.config.fees import FeeSchedule
from core.errors import raise_for_rejection
from core.events.publisher import EventPublisher
from core.identity.ids import IdProvider, UuidIdProvider
from core.primitives.item import DiscountDescriptor, LineItem
from core.time.clock import Clock, get_default_clock
from engines.cart.services import Cart
from engines.cash.policies import session_must_be_open_policy
from engines.cash.services import CashRegisterService
from engines.catalog.services import CatalogService
from engines.pricing.calculator import compute_sale_totals, distribute_discount
from engines.sales.commands import EditSaleRequest, FinalizeSaleRequest
from engines.sales.events import (
    SALES_SALE_CANCELLED_V1,
    SALES_SALE_EDITED_V1,
    SALES_SALE_FINALIZED_V1,
    build_sale_cancelled_payload,
    build_sale_edited_payload,
    build_sale_finalized_payload,
)
from engines.sales.models import Sale, SaleStatus
from engines.sales.policies import (
    cart_must_not_be_empty_policy,
    edit_requires_active_sale_policy,
    sale_must_exist_policy,
)

logger = logging.getLogger("pdv.sales")


# ══════════════════════════════════════════════════════════════
# LEDGER STORE
# ══════════════════════════════════════════════════════════════

class SaleLedger:
    """Sole owner of sale records, in creation order."""

    def __init__(self, sales: Iterable[Sale] = ()):
        self._sales: Dict[str, Sale] = {}
        self.restore(sales)

    def append(self, sale: Sale) -> None:
        if sale.sale_id in self._sales:
            raise ValueError(f"Sale '{sale.sale_id}' already recorded.")
        self._sales[sale.sale_id] = sale

    def replace(self, sale: Sale) -> None:
        if sale.sale_id not in self._sales:
            raise KeyError(sale.sale_id)
        self._sales[sale.sale_id] = sale

    def get(self, sale_id: str) -> Optional[Sale]:
        return self._sales.get(sale_id)

    def all(self) -> Tuple[Sale, ...]:
        return tuple(self._sales.values())

    def restore(self, sales: Iterable[Sale]) -> None:
        self._sales = {s.sale_id: s for s in sales}

    def __len__(self) -> int:
        return len(self._sales)


# ══════════════════════════════════════════════════════════════
# APPLICATION SERVICE
# ══════════════════════════════════════════════════════════════

def _sold_quantities(lines: Iterable[LineItem]) -> Dict[str, int]:
    quantities: Dict[str, int] = {}
    for line in lines:
        quantities[line.product_id] = quantities.get(line.product_id, 0) + line.quantity
    return quantities


class SaleService:
    """Sales Engine application service."""

    def __init__(
        self,
        *,
        catalog: CatalogService,
        register: CashRegisterService,
        ledger: SaleLedger | None = None,
        publisher: EventPublisher | None = None,
        clock: Clock | None = None,
        id_provider: IdProvider | None = None,
    ):
        self._catalog = catalog
        self._register = register
        self._ledger = ledger if ledger is not None else SaleLedger()
        self._publisher = publisher or EventPublisher()
        self._clock = clock or get_default_clock()
        self._id_provider = id_provider or UuidIdProvider()

    # ── Finalize ──────────────────────────────────────────────

    def finalize(
        self,
        cart: Cart,
        payment_method,
        fee_schedule: FeeSchedule,
        discount: Optional[DiscountDescriptor] = None,
        notes: Optional[str] = None,
    ) -> Sale:
        """
        Ring up the cart.

        A global discount is spread over the lines as a percentage
        before totals are computed; the cart itself is left alone
        until the sale is committed.
        """
        session = self._register.current_session
        raise_for_rejection(session_must_be_open_policy(session))
        raise_for_rejection(cart_must_not_be_empty_policy(cart.lines))
        request = FinalizeSaleRequest(
            payment_method=payment_method, discount=discount, notes=notes,
        )

        lines = distribute_discount(cart.lines, request.discount)
        totals = compute_sale_totals(lines, request.payment_method, fee_schedule)
        sale = Sale(
            sale_id=self._id_provider.new_id(),
            items=lines,
            subtotal=totals.subtotal,
            total_discount=totals.total_discount,
            payment_fee=totals.payment_fee,
            total=totals.total,
            payment_method=request.payment_method,
            created_at=self._clock.now_utc(),
            status=SaleStatus.COMPLETED,
            notes=request.notes,
            discount=request.discount,
        )

        previous_products = self._catalog.store.all()
        previous_sales = self._ledger.all()
        previous_current = self._register.current_session
        previous_history = self._register.history()
        previous_cart = cart.lines

        with self._publisher.batch():
            try:
                self._ledger.append(sale)
                self._register.record_sale(sale.sale_id)
                self._catalog.apply_stock_decrements(_sold_quantities(lines))
                cart.clear()
                self._publisher.publish(
                    SALES_SALE_FINALIZED_V1,
                    build_sale_finalized_payload(sale, session.session_id),
                )
            except Exception:
                self._catalog.restore(previous_products)
                self._ledger.restore(previous_sales)
                self._register.restore(previous_current, previous_history)
                cart.restore(previous_cart)
                logger.error(
                    f"Sale finalization rolled back: {sale.sale_id}",
                    exc_info=True,
                )
                raise

        logger.info(
            f"Sale finalized: {sale.sale_id} total {sale.total} "
            f"via {sale.payment_method.value} (session {session.session_id})"
        )
        return sale

    # ── Edit / Cancel ─────────────────────────────────────────

    def edit(
        self,
        sale_id: str,
        lines: Iterable[LineItem],
        payment_method,
        fee_schedule: FeeSchedule,
        discount: Optional[DiscountDescriptor] = None,
    ) -> Sale:
        """
        Recompute a sale from new lines with the CURRENT fee schedule.

        With a global discount the descriptor is spread over the new
        lines as in finalize, replacing their own percentages; without
        one the per-line percentages stand. Stock is not adjusted.
        """
        raise_for_rejection(sale_must_exist_policy(sale_id, self._ledger.get))
        previous = self._ledger.get(sale_id)
        raise_for_rejection(edit_requires_active_sale_policy(previous))
        request = EditSaleRequest(
            sale_id=sale_id,
            lines=tuple(lines),
            payment_method=payment_method,
            discount=discount,
        )

        lines = distribute_discount(request.lines, request.discount)
        totals = compute_sale_totals(
            lines, request.payment_method, fee_schedule, request.discount,
        )
        edited = replace(
            previous,
            items=lines,
            subtotal=totals.subtotal,
            total_discount=totals.total_discount,
            payment_fee=totals.payment_fee,
            total=totals.total,
            payment_method=request.payment_method,
            status=SaleStatus.EDITED,
            discount=request.discount,
            updated_at=self._clock.now_utc(),
        )
        self._ledger.replace(edited)

        logger.info(
            f"Sale edited: {sale_id} total {previous.total} → {edited.total}"
        )
        self._publisher.publish(
            SALES_SALE_EDITED_V1, build_sale_edited_payload(previous, edited),
        )
        return edited

    def cancel(self, sale_id: str) -> Sale:
        """
        Flag a sale as cancelled. The record stays in history and
        stock is not restored. Cancelling twice is a no-op.
        """
        raise_for_rejection(sale_must_exist_policy(sale_id, self._ledger.get))
        sale = self._ledger.get(sale_id)
        if sale.is_cancelled:
            logger.debug(f"Sale {sale_id} already cancelled")
            return sale

        cancelled = replace(
            sale, status=SaleStatus.CANCELLED, updated_at=self._clock.now_utc(),
        )
        self._ledger.replace(cancelled)

        logger.info(f"Sale cancelled: {sale_id} (total {sale.total})")
        self._publisher.publish(
            SALES_SALE_CANCELLED_V1, build_sale_cancelled_payload(cancelled),
        )
        return cancelled

    def restore(self, sales: Iterable[Sale]) -> None:
        self._ledger.restore(sales)

    # ── Queries ───────────────────────────────────────────────

    def get(self, sale_id: str) -> Sale:
        raise_for_rejection(sale_must_exist_policy(sale_id, self._ledger.get))
        return self._ledger.get(sale_id)

    def find(self, sale_id: str) -> Optional[Sale]:
        return self._ledger.get(sale_id)

    def list(self) -> Tuple[Sale, ...]:
        return self._ledger.all()

    def list_for_day(self, day: date) -> List[Sale]:
        """Sales created on a UTC calendar day (the by-date lookup)."""
        return [
            s for s in self._ledger.all()
            if s.created_at.astimezone(timezone.utc).date() == day
        ]

    def resolve(self, sale_ids: Iterable[str]) -> Tuple[Sale, ...]:
        return tuple(
            sale for sale in (self._ledger.get(i) for i in sale_ids)
            if sale is not None
        )

    @property
    def ledger(self) -> SaleLedger:
        return self._ledger
