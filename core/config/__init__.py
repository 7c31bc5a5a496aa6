"""
PDV Core Config - Public API
===============================
Fee schedule and runtime settings.
Doctrine: no fee rates hardcoded in engine logic.
"""

from core.config.fees import (
    DEFAULT_FEE_SCHEDULE,
    FEE_EXEMPT_METHODS,
    FeeKind,
    FeeRule,
    FeeSchedule,
    PaymentMethod,
)
from core.config.settings import PdvSettings

__all__ = [
    "PaymentMethod",
    "FeeKind",
    "FeeRule",
    "FeeSchedule",
    "DEFAULT_FEE_SCHEDULE",
    "FEE_EXEMPT_METHODS",
    "PdvSettings",
]
