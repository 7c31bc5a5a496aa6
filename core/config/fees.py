"""
PDV Core Config - Fee Schedule
================================
Admin-configurable payment-method fees.

The schedule is global configuration, read on every total
computation and replaced only by an explicit settings update.
Sales never store the rule, only the fee amount it produced.

Persisted shape (one settings record):
    {"cash":   {"type": "fixed",      "value": 0},
     "credit": {"type": "percentage", "value": 3.5},
     "debit":  {"type": "percentage", "value": 2},
     "pix":    {"type": "fixed",      "value": 0}}
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict

from core.errors import ValidationError


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class PaymentMethod(Enum):
    CASH = "cash"
    CREDIT = "credit"
    DEBIT = "debit"
    PIX = "pix"

    @classmethod
    def parse(cls, value) -> "PaymentMethod":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                f"payment_method '{value}' not valid. "
                f"Expected one of {sorted(m.value for m in cls)}."
            ) from None


class FeeKind(Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


# Never charged a fee, whatever rule is configured for them.
FEE_EXEMPT_METHODS = frozenset({PaymentMethod.CASH, PaymentMethod.PIX})


# ══════════════════════════════════════════════════════════════
# FEE RULE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class FeeRule:
    """
    Fee applied to one payment method.

    kind=PERCENTAGE: value is a rate, 3.5 means 3.5% of the amount.
    kind=FIXED:      value is a currency amount.
    """

    kind: FeeKind
    value: float = 0.0

    def __post_init__(self) -> None:
        if not isinstance(self.kind, FeeKind):
            raise ValidationError(f"fee kind '{self.kind}' not valid.")
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise ValidationError("fee value must be a number.")
        if self.value < 0:
            raise ValidationError(
                f"fee value must be non-negative, got {self.value}."
            )

    @classmethod
    def fixed(cls, amount: float = 0.0) -> "FeeRule":
        return cls(kind=FeeKind.FIXED, value=amount)

    @classmethod
    def percentage(cls, rate: float) -> "FeeRule":
        return cls(kind=FeeKind.PERCENTAGE, value=rate)

    def to_dict(self) -> dict:
        return {"type": self.kind.value, "value": self.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeeRule":
        try:
            kind = FeeKind(data["type"])
        except (KeyError, ValueError):
            raise ValidationError(
                f"fee rule type '{data.get('type')}' not valid."
            ) from None
        return cls(kind=kind, value=data.get("value", 0))


# ══════════════════════════════════════════════════════════════
# FEE SCHEDULE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class FeeSchedule:
    """One FeeRule per payment method. Immutable; use with_rule()."""

    cash: FeeRule
    credit: FeeRule
    debit: FeeRule
    pix: FeeRule

    def __post_init__(self) -> None:
        for method in PaymentMethod:
            if not isinstance(getattr(self, method.value), FeeRule):
                raise ValidationError(
                    f"fee rule for '{method.value}' must be a FeeRule."
                )

    def rule_for(self, method) -> FeeRule:
        return getattr(self, PaymentMethod.parse(method).value)

    def with_rule(self, method, rule: FeeRule) -> "FeeSchedule":
        return replace(self, **{PaymentMethod.parse(method).value: rule})

    def to_dict(self) -> dict:
        return {m.value: getattr(self, m.value).to_dict() for m in PaymentMethod}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeeSchedule":
        unknown = set(data) - {m.value for m in PaymentMethod}
        if unknown:
            raise ValidationError(
                f"Unknown payment methods in fee schedule: {sorted(unknown)}."
            )
        rules = {}
        for method in PaymentMethod:
            raw = data.get(method.value)
            rules[method.value] = (
                FeeRule.from_dict(raw) if raw is not None
                else getattr(DEFAULT_FEE_SCHEDULE, method.value)
            )
        return cls(**rules)


DEFAULT_FEE_SCHEDULE = FeeSchedule(
    cash=FeeRule.fixed(0),
    credit=FeeRule.percentage(3.5),
    debit=FeeRule.percentage(2),
    pix=FeeRule.fixed(0),
)
