"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock (or the in-memory store) that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_ledger.domain.models import LedgerEntry, NewLedgerEntry


class LedgerRepositoryProtocol(Protocol):
    async def lock_user(self, db: AsyncSession, user_id: str) -> None: ...

    async def append(self, db: AsyncSession, entry: NewLedgerEntry) -> LedgerEntry: ...

    async def entries_for_user(
        self, db: AsyncSession, user_id: str
    ) -> list[LedgerEntry]: ...

    async def list_entries(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        source_kind: str | None,
    ) -> list[LedgerEntry]: ...
