"""
PDV Cash Engine - Request Commands
====================================
Typed register requests, validated on construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.errors import ValidationError


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class OpenRegisterRequest:
    """Open the register with the cash counted into the drawer."""
    opening_balance: float
    notes: Optional[str] = None

    def __post_init__(self):
        if not _is_number(self.opening_balance) or self.opening_balance < 0:
            raise ValidationError("opening_balance must be non-negative number.")


@dataclass(frozen=True)
class CloseRegisterRequest:
    """Close the register with the cash actually counted in the drawer."""
    actual_closing_balance: float
    notes: Optional[str] = None

    def __post_init__(self):
        if not _is_number(self.actual_closing_balance) or self.actual_closing_balance < 0:
            raise ValidationError(
                "actual_closing_balance must be non-negative number."
            )
