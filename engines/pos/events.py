"""
PDV POS Facade - Event Types and Payload Builders
===================================================
"""

from __future__ import annotations

from core.config.fees import FeeSchedule

SETTINGS_FEE_SCHEDULE_UPDATED_V1 = "settings.fee_schedule.updated.v1"
POS_STATE_LOADED_V1 = "pos.state.loaded.v1"

POS_EVENT_TYPES = (
    SETTINGS_FEE_SCHEDULE_UPDATED_V1,
    POS_STATE_LOADED_V1,
)


def build_fee_schedule_updated_payload(
    previous: FeeSchedule, schedule: FeeSchedule,
) -> dict:
    return {
        "previous": previous.to_dict(),
        "fee_schedule": schedule.to_dict(),
    }


def build_state_loaded_payload(state) -> dict:
    return {
        "product_count": len(state.products),
        "sale_count": len(state.sales),
        "session_count": len(state.cash_registers),
        "has_open_session": state.open_session is not None,
    }
