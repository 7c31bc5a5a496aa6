"""
PDV Command Layer - Rejection Model
=====================================
What a policy returns when it refuses an operation.

Policies are pure checks: they look at the request and the current
state and return None to allow, or a RejectionReason to refuse.
They never raise. The owning service converts the reason into a
PdvError with core.errors.raise_for_rejection().
"""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class RejectionReason:
    code: str
    message: str
    policy_name: str

    def __post_init__(self):
        for name in ("code", "message", "policy_name"):
            value = getattr(self, name)
            if not value or not isinstance(value, str):
                raise ValueError(f"{name} must be a non-empty string.")

    def to_dict(self) -> dict:
        return asdict(self)


class ReasonCode:
    """Machine-readable codes carried by rejections and errors."""

    INVALID_INPUT = "INVALID_INPUT"
    EMPTY_CART = "EMPTY_CART"

    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    SALE_NOT_FOUND = "SALE_NOT_FOUND"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"

    NO_OPEN_SESSION = "NO_OPEN_SESSION"
    SESSION_ALREADY_OPEN = "SESSION_ALREADY_OPEN"

    SALE_CANCELLED = "SALE_CANCELLED"
