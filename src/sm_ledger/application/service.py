"""PointsApplicationService: read side of the ledger.

Both operations are read-only and run without an explicit transaction.
Writes to the ledger only happen through the Award Policy and the
Redemption Coordinator.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_ledger.application.balance import BalanceCalculator
from src.sm_ledger.application.schemas import (
    BalanceResponse,
    LedgerEntryItem,
    LedgerResponse,
    cursor_decode,
    cursor_encode,
)
from src.sm_ledger.domain.repository import LedgerRepositoryProtocol
from src.sm_ledger.infrastructure.cache import BalanceCache
from src.sm_ledger.infrastructure.persistence import LedgerRepository


class PointsApplicationService:
    def __init__(
        self,
        repo: LedgerRepositoryProtocol | None = None,
        cache: BalanceCache | None = None,
    ) -> None:
        self._repo: LedgerRepositoryProtocol = repo or LedgerRepository()
        self._calculator = BalanceCalculator(self._repo)
        self._cache = cache or BalanceCache()

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        cached = await self._cache.get(user_id)
        if cached is not None:
            return BalanceResponse.from_points(user_id, cached)
        balance = await self._calculator.balance_of(db, user_id)
        await self._cache.set(user_id, balance)
        return BalanceResponse.from_points(user_id, balance)

    async def list_ledger(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: str | None,
        limit: int,
        source_kind: str | None,
    ) -> LedgerResponse:
        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        entries = await self._repo.list_entries(
            db, user_id, cursor_id, limit + 1, source_kind
        )
        has_more = len(entries) > limit
        page = entries[:limit]

        items = [LedgerEntryItem.from_domain(e) for e in page]
        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return LedgerResponse(items=items, next_cursor=next_cursor, has_more=has_more)
