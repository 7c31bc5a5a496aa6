"""
PDV Cash Engine - Policies
============================
At most one register session may be open at any time.
"""

from __future__ import annotations

from typing import Optional

from core.commands.rejection import ReasonCode, RejectionReason
from engines.cash.models import CashRegisterSession


def session_must_be_open_policy(
    session: Optional[CashRegisterSession],
) -> Optional[RejectionReason]:
    """Reject sale finalization / register close without an open session."""
    if session is None or not session.is_open:
        return RejectionReason(
            code=ReasonCode.NO_OPEN_SESSION,
            message="The cash register must be open for this operation.",
            policy_name="session_must_be_open_policy",
        )
    return None


def no_session_open_policy(
    session: Optional[CashRegisterSession],
) -> Optional[RejectionReason]:
    """Reject opening while another session is still open."""
    if session is not None and session.is_open:
        return RejectionReason(
            code=ReasonCode.SESSION_ALREADY_OPEN,
            message=(
                f"Cash register session '{session.session_id}' is already open. "
                f"Close it before opening a new one."
            ),
            policy_name="no_session_open_policy",
        )
    return None
