"""
PDV Persistence - State Snapshot Codec
========================================
The whole PDV state as one JSON-compatible blob.

Layout:
    {
        "schema_version": 1,
        "products":       [Product.to_dict(), ...],
        "sales":          [Sale.to_dict(), ...],
        "cash_registers": [CashRegisterSession.to_dict(), ...],
        "settings":       {"fee_schedule": FeeSchedule.to_dict()},
        "cart":           [LineItem.to_dict(), ...]
    }

Rules:
- Timestamps are ISO-8601 strings with offset and microseconds
- Floats are plain JSON numbers, so a round trip is exact
- The cart is carried for convenience only; it is transient state
- At most one session may be open
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from core.config.fees import DEFAULT_FEE_SCHEDULE, FeeSchedule
from core.errors import ValidationError
from core.primitives.item import LineItem, Product
from engines.cash.models import CashRegisterSession
from engines.sales.models import Sale

SCHEMA_VERSION = 1


@dataclass(frozen=True)
class PdvState:
    products: Tuple[Product, ...] = ()
    sales: Tuple[Sale, ...] = ()
    cash_registers: Tuple[CashRegisterSession, ...] = ()
    fee_schedule: FeeSchedule = DEFAULT_FEE_SCHEDULE
    cart: Tuple[LineItem, ...] = field(default=())

    def __post_init__(self) -> None:
        open_ids = [s.session_id for s in self.cash_registers if s.is_open]
        if len(open_ids) > 1:
            raise ValidationError(
                f"At most one cash register session may be open, found {len(open_ids)}."
            )

    @property
    def open_session(self) -> Optional[CashRegisterSession]:
        for session in self.cash_registers:
            if session.is_open:
                return session
        return None

    @property
    def closed_sessions(self) -> Tuple[CashRegisterSession, ...]:
        return tuple(s for s in self.cash_registers if not s.is_open)


# ══════════════════════════════════════════════════════════════
# ENCODE / DECODE
# ══════════════════════════════════════════════════════════════

def encode_state(state: PdvState) -> Dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "products": [p.to_dict() for p in state.products],
        "sales": [s.to_dict() for s in state.sales],
        "cash_registers": [c.to_dict() for c in state.cash_registers],
        "settings": {"fee_schedule": state.fee_schedule.to_dict()},
        "cart": [line.to_dict() for line in state.cart],
    }


def decode_state(data: Dict[str, Any]) -> PdvState:
    """Missing collections decode as empty; a missing schedule as the default."""
    if not isinstance(data, dict):
        raise ValidationError("State blob must be a JSON object.")

    version = data.get("schema_version", SCHEMA_VERSION)
    if version != SCHEMA_VERSION:
        raise ValidationError(f"Unsupported state schema_version {version}.")

    fee_data = (data.get("settings") or {}).get("fee_schedule")
    try:
        return PdvState(
            products=tuple(Product.from_dict(p) for p in data.get("products", ())),
            sales=tuple(Sale.from_dict(s) for s in data.get("sales", ())),
            cash_registers=tuple(
                CashRegisterSession.from_dict(c)
                for c in data.get("cash_registers", ())
            ),
            fee_schedule=(
                FeeSchedule.from_dict(fee_data) if fee_data else DEFAULT_FEE_SCHEDULE
            ),
            cart=tuple(LineItem.from_dict(line) for line in data.get("cart", ())),
        )
    except ValidationError:
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise ValidationError(f"Malformed state blob: {exc!r}") from exc


def dumps(state: PdvState) -> str:
    return json.dumps(encode_state(state), ensure_ascii=False, indent=2)


def loads(text: str) -> PdvState:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"State is not valid JSON: {exc}") from exc
    return decode_state(data)
