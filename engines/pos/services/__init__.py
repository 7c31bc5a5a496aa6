"""
PDV POS Facade - State-Owning Service
=======================================
The single object the presentation layer talks to.

PosService owns the catalog, cart, sale ledger, cash register and
fee schedule, and wires them to one shared EventPublisher so a
finalize can hold back every event until the whole unit commits.

Observation is by subscription: ``subscribe(handler)`` receives an
Event after every change; the handler reads fresh state back from
the service.

Every mutation runs under one re-entrant lock, so ``open`` and
``finalize`` serialize on the open-session check. With a state
store attached and ``autosave`` on, the full state is saved after
each successful mutation.
"""

from __future__ import annotations

import functools
import logging
import threading
from datetime import date
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple

from core.config.fees import DEFAULT_FEE_SCHEDULE, FeeSchedule
from core.config.settings import PdvSettings
from core.errors import ValidationError
from core.events.event import Event
from core.events.publisher import EventPublisher
from core.events.registry import WILDCARD
from core.identity.ids import IdProvider, UuidIdProvider
from core.persistence.snapshot import PdvState
from core.persistence.store import StateStore
from core.primitives.item import DiscountDescriptor, LineItem, Product
from core.time.clock import Clock, get_default_clock
from engines.cart.services import Cart
from engines.cash.models import CashRegisterSession
from engines.cash.services import CashRegisterService
from engines.cash.summary import PaymentSummary, summarize
from engines.catalog.commands import AddProductRequest
from engines.catalog.services import CatalogService
from engines.pos.events import (
    POS_STATE_LOADED_V1,
    SETTINGS_FEE_SCHEDULE_UPDATED_V1,
    build_fee_schedule_updated_payload,
    build_state_loaded_payload,
)
from engines.reporting.report import SalesReport, build_sales_report
from engines.sales.models import Sale
from engines.sales.services import SaleLedger, SaleService

logger = logging.getLogger("pdv.pos")


def _mutation(method: Callable) -> Callable:
    """Run under the service lock, then autosave if configured."""

    @functools.wraps(method)
    def wrapper(self: "PosService", *args, **kwargs):
        with self._lock:
            result = method(self, *args, **kwargs)
            self._autosave()
            return result

    return wrapper


class PosService:
    def __init__(
        self,
        *,
        settings: PdvSettings | None = None,
        fee_schedule: FeeSchedule | None = None,
        state_store: StateStore | None = None,
        autosave: bool = False,
        clock: Clock | None = None,
        id_provider: IdProvider | None = None,
        publisher: EventPublisher | None = None,
    ):
        self._settings = settings or PdvSettings()
        self._fee_schedule = fee_schedule or DEFAULT_FEE_SCHEDULE
        self._state_store = state_store
        self._autosave_enabled = autosave
        self._clock = clock or get_default_clock()
        ids = id_provider or UuidIdProvider()
        self._publisher = publisher or EventPublisher(clock=self._clock)
        self._lock = threading.RLock()

        self._ledger = SaleLedger()
        self._catalog = CatalogService(publisher=self._publisher, id_provider=ids)
        self._cart = Cart(publisher=self._publisher)
        self._register = CashRegisterService(
            sale_lookup=self._ledger.get,
            publisher=self._publisher,
            clock=self._clock,
            id_provider=ids,
        )
        self._sales = SaleService(
            catalog=self._catalog,
            register=self._register,
            ledger=self._ledger,
            publisher=self._publisher,
            clock=self._clock,
            id_provider=ids,
        )

    # ══════════════════════════════════════════════════════════
    # CATALOG
    # ══════════════════════════════════════════════════════════

    @_mutation
    def add_product(
        self,
        name: str,
        price: float,
        stock: int,
        category: str = "",
        description: Optional[str] = None,
        barcode: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> Product:
        return self._catalog.add(AddProductRequest(
            name=name,
            price=price,
            stock=stock,
            category=category,
            description=description,
            barcode=barcode,
            image_url=image_url,
        ))

    @_mutation
    def update_product(self, product: Product) -> Product:
        return self._catalog.update(product)

    @_mutation
    def delete_product(self, product_id: str) -> bool:
        return self._catalog.delete(product_id)

    def get_product(self, product_id: str) -> Product:
        return self._catalog.get(product_id)

    def find_products(self, text: str) -> List[Product]:
        return self._catalog.find_by_name(text)

    def low_stock(self, threshold: Optional[int] = None) -> List[Product]:
        if threshold is None:
            threshold = self._settings.low_stock_threshold
        return self._catalog.low_stock(threshold)

    # ══════════════════════════════════════════════════════════
    # CART
    # ══════════════════════════════════════════════════════════

    @_mutation
    def add_to_cart(self, product: Product | str, quantity: int = 1) -> LineItem:
        """Accepts a Product or a catalog id."""
        if not isinstance(product, Product):
            product = self._catalog.get(product)
        return self._cart.add(product, quantity)

    @_mutation
    def remove_from_cart(self, product_id: str) -> bool:
        return self._cart.remove(product_id)

    @_mutation
    def set_line_discount(self, product_id: str, percent: float) -> Optional[LineItem]:
        return self._cart.set_line_discount(product_id, percent)

    @_mutation
    def set_line_quantity(self, product_id: str, quantity: int) -> Optional[LineItem]:
        return self._cart.set_line_quantity(product_id, quantity)

    @_mutation
    def clear_cart(self) -> None:
        self._cart.clear()

    @property
    def cart(self) -> Tuple[LineItem, ...]:
        return self._cart.lines

    # ══════════════════════════════════════════════════════════
    # SALES
    # ══════════════════════════════════════════════════════════

    @_mutation
    def finalize_sale(
        self,
        payment_method,
        discount: Optional[DiscountDescriptor] = None,
        notes: Optional[str] = None,
    ) -> Sale:
        return self._sales.finalize(
            self._cart, payment_method, self._fee_schedule, discount, notes,
        )

    @_mutation
    def edit_sale(
        self,
        sale_id: str,
        lines: Iterable[LineItem],
        payment_method,
        discount: Optional[DiscountDescriptor] = None,
    ) -> Sale:
        return self._sales.edit(
            sale_id, lines, payment_method, self._fee_schedule, discount,
        )

    @_mutation
    def cancel_sale(self, sale_id: str) -> Sale:
        return self._sales.cancel(sale_id)

    def get_sale(self, sale_id: str) -> Sale:
        return self._sales.get(sale_id)

    def sales_for_day(self, day: date) -> List[Sale]:
        return self._sales.list_for_day(day)

    # ══════════════════════════════════════════════════════════
    # CASH REGISTER
    # ══════════════════════════════════════════════════════════

    @_mutation
    def open_register(
        self, opening_balance: float, notes: Optional[str] = None,
    ) -> CashRegisterSession:
        return self._register.open(opening_balance, notes)

    @_mutation
    def close_register(
        self, actual_closing_balance: float, notes: Optional[str] = None,
    ) -> CashRegisterSession:
        return self._register.close(actual_closing_balance, notes)

    def summarize(self, sales: Optional[Iterable[Sale]] = None) -> PaymentSummary:
        """Summary of the given sales, or of the open session when omitted."""
        if sales is None:
            return self._register.current_summary()
        return summarize(sales)

    def session_summary(self, session_id: str) -> PaymentSummary:
        return self._register.session_summary(session_id)

    def sessions_for_day(self, day: date) -> List[CashRegisterSession]:
        return self._register.list_for_day(day)

    # ══════════════════════════════════════════════════════════
    # SETTINGS
    # ══════════════════════════════════════════════════════════

    @_mutation
    def update_fee_schedule(self, schedule: FeeSchedule | Mapping[str, Any]) -> FeeSchedule:
        """Replace the schedule. Stored sales keep the fees they were rung up with."""
        if isinstance(schedule, Mapping):
            schedule = FeeSchedule.from_dict(schedule)
        if not isinstance(schedule, FeeSchedule):
            raise ValidationError("fee schedule must be a FeeSchedule.")

        previous, self._fee_schedule = self._fee_schedule, schedule
        logger.info(f"Fee schedule updated: {schedule.to_dict()}")
        self._publisher.publish(
            SETTINGS_FEE_SCHEDULE_UPDATED_V1,
            build_fee_schedule_updated_payload(previous, schedule),
        )
        return schedule

    @property
    def fee_schedule(self) -> FeeSchedule:
        return self._fee_schedule

    @property
    def settings(self) -> PdvSettings:
        return self._settings

    # ══════════════════════════════════════════════════════════
    # READ ACCESSORS
    # ══════════════════════════════════════════════════════════

    @property
    def products(self) -> Tuple[Product, ...]:
        return self._catalog.list()

    @property
    def sales(self) -> Tuple[Sale, ...]:
        return self._sales.list()

    @property
    def current_session(self) -> Optional[CashRegisterSession]:
        return self._register.current_session

    @property
    def cash_registers(self) -> Tuple[CashRegisterSession, ...]:
        return self._register.all_sessions()

    def report(self, day: Optional[date] = None) -> SalesReport:
        return build_sales_report(
            self._sales.list(),
            self._catalog.list(),
            day=day,
            low_stock_threshold=self._settings.low_stock_threshold,
        )

    # ══════════════════════════════════════════════════════════
    # OBSERVATION
    # ══════════════════════════════════════════════════════════

    def subscribe(
        self, handler: Callable[[Event], Any], event_type: str = WILDCARD,
    ) -> None:
        self._publisher.subscribe(handler, event_type=event_type)

    def unsubscribe(self, handler: Callable[[Event], Any]) -> None:
        self._publisher.unsubscribe(handler)

    # ══════════════════════════════════════════════════════════
    # PERSISTENCE
    # ══════════════════════════════════════════════════════════

    def snapshot(self) -> PdvState:
        with self._lock:
            return PdvState(
                products=self._catalog.list(),
                sales=self._sales.list(),
                cash_registers=self._register.all_sessions(),
                fee_schedule=self._fee_schedule,
                cart=self._cart.lines,
            )

    def restore(self, state: PdvState) -> None:
        with self._lock:
            self._catalog.restore(state.products)
            self._sales.restore(state.sales)
            self._register.restore(state.open_session, state.closed_sessions)
            self._fee_schedule = state.fee_schedule
            self._cart.restore(state.cart)
            self._publisher.publish(
                POS_STATE_LOADED_V1, build_state_loaded_payload(state),
            )

    def load(self, state_store: StateStore | None = None) -> PdvState:
        store = self._resolve_store(state_store)
        state = store.load_all()
        self.restore(state)
        logger.info(
            f"State loaded: {len(state.products)} products, "
            f"{len(state.sales)} sales, {len(state.cash_registers)} sessions"
        )
        return state

    def save(self, state_store: StateStore | None = None) -> PdvState:
        store = self._resolve_store(state_store)
        with self._lock:
            state = self.snapshot()
            store.save_all(state)
        return state

    def attach(self, state_store: StateStore, autosave: bool = True) -> None:
        self._state_store = state_store
        self._autosave_enabled = autosave

    def _resolve_store(self, state_store: StateStore | None) -> StateStore:
        store = state_store or self._state_store
        if store is None:
            raise ValidationError("No state store attached.")
        return store

    def _autosave(self) -> None:
        if self._autosave_enabled and self._state_store is not None:
            self._state_store.save_all(self.snapshot())
