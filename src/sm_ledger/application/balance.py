"""BalanceCalculator: derives available points from the full ledger history.

Recomputes from every entry on each call; there is no stored balance column to
drift. Callers that need a race-free value (redemption) must hold the per-user
lock from LedgerRepository.lock_user in the same transaction first.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.errors import DataIntegrityFaultError
from src.sm_ledger.domain.balance import sum_entries
from src.sm_ledger.domain.repository import LedgerRepositoryProtocol
from src.sm_ledger.infrastructure.persistence import LedgerRepository

logger = logging.getLogger(__name__)


class BalanceCalculator:
    def __init__(self, repo: LedgerRepositoryProtocol | None = None) -> None:
        self._repo: LedgerRepositoryProtocol = repo or LedgerRepository()

    async def balance_of(self, db: AsyncSession, user_id: str) -> int:
        """Sum of all ledger amounts for user_id.

        Raises:
            DataIntegrityFaultError: the sum is negative. Reported, never corrected.
        """
        entries = await self._repo.entries_for_user(db, user_id)
        balance = sum_entries(entries)
        if balance < 0:
            logger.error(
                "Negative balance for user=%s: balance=%d over %d entries",
                user_id,
                balance,
                len(entries),
            )
            raise DataIntegrityFaultError(user_id, balance)
        return balance
