"""Domain layer definitions."""

from .ledger import RemainingLedger

__all__ = [
    "RemainingLedger",
]
