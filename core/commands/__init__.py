"""
PDV Command Layer - Public API
================================
Structured policy rejections shared by every engine.
"""

from core.commands.rejection import ReasonCode, RejectionReason

__all__ = [
    "ReasonCode",
    "RejectionReason",
]
