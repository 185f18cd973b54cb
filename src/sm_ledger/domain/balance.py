"""Balance derivation: the ledger is the only source of truth for points."""

from collections.abc import Iterable

from src.sm_ledger.domain.models import LedgerEntry


def sum_entries(entries: Iterable[LedgerEntry]) -> int:
    """Available balance = plain sum of amounts. Order-insensitive."""
    return sum(e.amount for e in entries)
