"""
PDV Cash Engine - Application Service
=======================================
Register state machine:

    NO_SESSION → OPEN → CLOSED → (a fresh OPEN may start)

Closed sessions are archived and never reopened.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, timezone
from typing import Callable, Iterable, List, Optional, Tuple

from core.commands.rejection import ReasonCode, RejectionReason
from core.errors import AlreadyOpen, raise_for_rejection
from core.events.publisher import EventPublisher
from core.identity.ids import IdProvider, UuidIdProvider
from core.time.clock import Clock, get_default_clock
from engines.cash.commands import CloseRegisterRequest, OpenRegisterRequest
from engines.cash.events import (
    CASH_SESSION_CLOSED_V1,
    CASH_SESSION_OPENED_V1,
    CASH_SESSION_SALE_RECORDED_V1,
    build_sale_recorded_payload,
    build_session_closed_payload,
    build_session_opened_payload,
)
from engines.cash.models import CashRegisterSession, SessionStatus
from engines.cash.policies import (
    no_session_open_policy,
    session_must_be_open_policy,
)
from engines.cash.summary import PaymentSummary, summarize
from engines.sales.models import Sale

logger = logging.getLogger("pdv.cash")

SaleLookup = Callable[[str], Optional[Sale]]


# ══════════════════════════════════════════════════════════════
# STORE
# ══════════════════════════════════════════════════════════════

class CashRegisterStore:
    """The open session (if any) plus the archive of closed ones."""

    def __init__(
        self,
        current: Optional[CashRegisterSession] = None,
        history: Iterable[CashRegisterSession] = (),
    ):
        self.current: Optional[CashRegisterSession] = current
        self.history: List[CashRegisterSession] = list(history)

    def restore(
        self,
        current: Optional[CashRegisterSession],
        history: Iterable[CashRegisterSession],
    ) -> None:
        self.current = current
        self.history = list(history)


# ══════════════════════════════════════════════════════════════
# APPLICATION SERVICE
# ══════════════════════════════════════════════════════════════

class CashRegisterService:
    """Cash Register Engine application service."""

    def __init__(
        self,
        *,
        sale_lookup: SaleLookup,
        store: CashRegisterStore | None = None,
        publisher: EventPublisher | None = None,
        clock: Clock | None = None,
        id_provider: IdProvider | None = None,
    ):
        self._sale_lookup = sale_lookup
        self._store = store or CashRegisterStore()
        self._publisher = publisher or EventPublisher()
        self._clock = clock or get_default_clock()
        self._id_provider = id_provider or UuidIdProvider()

    # ── Commands ──────────────────────────────────────────────

    def open(self, opening_balance: float, notes: Optional[str] = None) -> CashRegisterSession:
        current = self._store.current
        rejection = no_session_open_policy(current)
        if rejection is not None:
            raise AlreadyOpen(
                rejection.message, rejection.code, session_id=current.session_id,
            )
        request = OpenRegisterRequest(opening_balance=opening_balance, notes=notes)

        session = CashRegisterSession(
            session_id=self._id_provider.new_id(),
            opened_at=self._clock.now_utc(),
            opening_balance=request.opening_balance,
            notes=request.notes,
        )
        self._store.current = session
        logger.info(
            f"Register opened: {session.session_id} "
            f"(opening balance {session.opening_balance})"
        )
        self._publisher.publish(
            CASH_SESSION_OPENED_V1, build_session_opened_payload(session),
        )
        return session

    def close(
        self, actual_closing_balance: float, notes: Optional[str] = None,
    ) -> CashRegisterSession:
        """
        Reconcile and archive the open session.

            expected = opening_balance + summary.cash
            cash_shortage = actual - expected   (negative = missing cash)

        The session keeps the closing notes; the opening notes are
        overwritten even when none are given.
        """
        session = self._store.current
        raise_for_rejection(session_must_be_open_policy(session))
        request = CloseRegisterRequest(
            actual_closing_balance=actual_closing_balance, notes=notes,
        )

        summary = summarize(self.sales_for(session))
        expected = session.opening_balance + summary.cash
        closed = replace(
            session,
            status=SessionStatus.CLOSED,
            closed_at=self._clock.now_utc(),
            expected_closing_balance=expected,
            actual_closing_balance=request.actual_closing_balance,
            cash_shortage=request.actual_closing_balance - expected,
            notes=request.notes,
        )
        self._store.history.append(closed)
        self._store.current = None

        log = logger.warning if closed.cash_shortage < 0 else logger.info
        log(
            f"Register closed: {closed.session_id} expected {expected}, "
            f"actual {closed.actual_closing_balance}, "
            f"difference {closed.cash_shortage}"
        )
        self._publisher.publish(
            CASH_SESSION_CLOSED_V1, build_session_closed_payload(closed, summary),
        )
        return closed

    def record_sale(self, sale_id: str) -> CashRegisterSession:
        """Append a finalized sale to the open session."""
        session = self._store.current
        raise_for_rejection(session_must_be_open_policy(session))

        updated = replace(session, sale_ids=session.sale_ids + (sale_id,))
        self._store.current = updated
        self._publisher.publish(
            CASH_SESSION_SALE_RECORDED_V1,
            build_sale_recorded_payload(updated, sale_id),
        )
        return updated

    def restore(
        self,
        current: Optional[CashRegisterSession],
        history: Iterable[CashRegisterSession] = (),
    ) -> None:
        self._store.restore(current, history)

    # ── Queries ───────────────────────────────────────────────

    @property
    def current_session(self) -> Optional[CashRegisterSession]:
        return self._store.current

    def history(self) -> Tuple[CashRegisterSession, ...]:
        return tuple(self._store.history)

    def all_sessions(self) -> Tuple[CashRegisterSession, ...]:
        sessions = tuple(self._store.history)
        if self._store.current is not None:
            sessions += (self._store.current,)
        return sessions

    def sales_for(self, session: CashRegisterSession) -> Tuple[Sale, ...]:
        sales = []
        for sale_id in session.sale_ids:
            sale = self._sale_lookup(sale_id)
            if sale is None:
                logger.warning(
                    f"Session {session.session_id} references unknown sale {sale_id}"
                )
                continue
            sales.append(sale)
        return tuple(sales)

    def current_summary(self) -> PaymentSummary:
        if self._store.current is None:
            return PaymentSummary()
        return summarize(self.sales_for(self._store.current))

    def get_session(self, session_id: str) -> CashRegisterSession:
        for session in self.all_sessions():
            if session.session_id == session_id:
                return session
        raise_for_rejection(RejectionReason(
            code=ReasonCode.SESSION_NOT_FOUND,
            message=f"Cash register session '{session_id}' not found.",
            policy_name="session_must_exist_policy",
        ))

    def session_summary(self, session_id: str) -> PaymentSummary:
        return summarize(self.sales_for(self.get_session(session_id)))

    def list_for_day(self, day: date) -> List[CashRegisterSession]:
        """Sessions opened on a UTC calendar day (the by-date lookup)."""
        return [
            s for s in self.all_sessions()
            if s.opened_at.astimezone(timezone.utc).date() == day
        ]

    @property
    def store(self) -> CashRegisterStore:
        return self._store
