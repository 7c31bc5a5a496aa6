"""
PDV Identity - Public API
=========================
Opaque id generation for catalog, ledger and register records.
"""

from core.identity.ids import IdProvider, SequentialIdProvider, UuidIdProvider

__all__ = [
    "IdProvider",
    "UuidIdProvider",
    "SequentialIdProvider",
]
