"""
PDV Cash Engine - Event Types and Payload Builders
====================================================
Single-drawer register lifecycle: open → record sales → close
with expected-vs-actual reconciliation.
"""

from __future__ import annotations

from engines.cash.models import CashRegisterSession
from engines.cash.summary import PaymentSummary


# ══════════════════════════════════════════════════════════════
# EVENT TYPE CONSTANTS
# ══════════════════════════════════════════════════════════════

CASH_SESSION_OPENED_V1 = "cash.session.opened.v1"
CASH_SESSION_CLOSED_V1 = "cash.session.closed.v1"
CASH_SESSION_SALE_RECORDED_V1 = "cash.session.sale_recorded.v1"

CASH_EVENT_TYPES = (
    CASH_SESSION_OPENED_V1,
    CASH_SESSION_CLOSED_V1,
    CASH_SESSION_SALE_RECORDED_V1,
)


# ══════════════════════════════════════════════════════════════
# PAYLOAD BUILDERS
# ══════════════════════════════════════════════════════════════

def build_session_opened_payload(session: CashRegisterSession) -> dict:
    return {
        "session_id": session.session_id,
        "opening_balance": session.opening_balance,
        "opened_at": session.opened_at,
    }


def build_session_closed_payload(
    session: CashRegisterSession, summary: PaymentSummary,
) -> dict:
    return {
        "session_id": session.session_id,
        "expected_closing_balance": session.expected_closing_balance,
        "actual_closing_balance": session.actual_closing_balance,
        "cash_shortage": session.cash_shortage,
        "summary": summary.to_dict(),
        "closed_at": session.closed_at,
    }


def build_sale_recorded_payload(session: CashRegisterSession, sale_id: str) -> dict:
    return {
        "session_id": session.session_id,
        "sale_id": sale_id,
        "sale_count": len(session.sale_ids),
    }
