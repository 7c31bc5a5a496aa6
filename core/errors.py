"""
PDV Core - Errors
===================
Error types surfaced synchronously to the presentation layer.

Every error carries a machine-readable ``code`` (see
core.commands.rejection.ReasonCode) next to the human message.
Nothing here is retried: all failures are a function of input.
"""

from __future__ import annotations

from core.commands.rejection import ReasonCode, RejectionReason


class PdvError(Exception):
    """Base error for all PDV engine operations."""

    default_code = ReasonCode.INVALID_INPUT

    def __init__(self, message: str, code: str | None = None):
        self.code = code or self.default_code
        super().__init__(message)


class ValidationError(PdvError, ValueError):
    """Malformed input: negative price/stock, non-positive quantity, ..."""

    default_code = ReasonCode.INVALID_INPUT


class NotFound(PdvError, LookupError):
    """Reference to a nonexistent product, sale or session."""

    default_code = ReasonCode.SALE_NOT_FOUND


class NoOpenSession(PdvError):
    """Sale finalization or register close attempted without an open session."""

    default_code = ReasonCode.NO_OPEN_SESSION

    def __init__(self, message: str = None, code: str | None = None):
        super().__init__(
            message or "The cash register must be open for this operation.",
            code,
        )


class AlreadyOpen(PdvError):
    """Register open attempted while a session is active."""

    default_code = ReasonCode.SESSION_ALREADY_OPEN

    def __init__(
        self, message: str = None, code: str | None = None, session_id: str | None = None,
    ):
        self.session_id = session_id
        super().__init__(
            message or f"Cash register session '{session_id}' is already open.",
            code,
        )


class InvalidTransition(PdvError):
    """Status change not allowed from the record's current status."""

    default_code = ReasonCode.SALE_CANCELLED


# ══════════════════════════════════════════════════════════════
# REJECTION → ERROR
# ══════════════════════════════════════════════════════════════

_ERROR_BY_CODE = {
    ReasonCode.INVALID_INPUT: ValidationError,
    ReasonCode.EMPTY_CART: ValidationError,
    ReasonCode.PRODUCT_NOT_FOUND: NotFound,
    ReasonCode.SALE_NOT_FOUND: NotFound,
    ReasonCode.SESSION_NOT_FOUND: NotFound,
    ReasonCode.SALE_CANCELLED: InvalidTransition,
}


def error_for_rejection(reason: RejectionReason) -> PdvError:
    if reason.code == ReasonCode.NO_OPEN_SESSION:
        return NoOpenSession(reason.message, reason.code)
    if reason.code == ReasonCode.SESSION_ALREADY_OPEN:
        return AlreadyOpen(reason.message, reason.code)
    error_cls = _ERROR_BY_CODE.get(reason.code, ValidationError)
    return error_cls(reason.message, reason.code)


def raise_for_rejection(reason: RejectionReason | None) -> None:
    """Raise the PdvError matching a policy rejection (None is a pass)."""
    if reason is None:
        return
    raise error_for_rejection(reason)
