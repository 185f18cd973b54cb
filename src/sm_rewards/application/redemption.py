"""RedemptionCoordinator: spends points on a reward item, atomically.

One transaction, locks always taken in the same order:

  1. per-user advisory lock   (LedgerRepository.lock_user)
  2. reward item row lock     (SELECT ... FOR UPDATE)

then, under both locks: redemption count → redeemability rules → business exists →
balance → INSERT redemption → APPEND REDEMPTION debit (source_ref = redemption id) → COMMIT.

The user lock makes two redemptions by one user serialize, so neither can
spend points the other already spent. The item lock makes concurrent
redemptions of one capped item serialize, so the cap is never overshot.
Any failure rolls back both rows; a redemption never exists without its debit.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.database import TRANSIENT_DB_ERRORS
from src.sm_common.datetime_utils import utc_now
from src.sm_common.enums import SourceKind
from src.sm_common.errors import (
    BusinessNotFoundError,
    RewardItemNotFoundError,
    TransientFailureError,
)
from src.sm_ledger.application.balance import BalanceCalculator
from src.sm_ledger.domain.models import NewLedgerEntry
from src.sm_ledger.domain.repository import LedgerRepositoryProtocol
from src.sm_ledger.infrastructure.cache import BalanceCache
from src.sm_ledger.infrastructure.persistence import LedgerRepository
from src.sm_rewards.domain.models import RedemptionReceipt
from src.sm_rewards.domain.repository import RewardRepositoryProtocol
from src.sm_rewards.domain.rules import check_affordable, check_redeemable, resolve_business
from src.sm_rewards.infrastructure.persistence import RewardRepository

logger = logging.getLogger(__name__)


class RedemptionCoordinator:
    def __init__(
        self,
        reward_repo: RewardRepositoryProtocol | None = None,
        ledger_repo: LedgerRepositoryProtocol | None = None,
        cache: BalanceCache | None = None,
    ) -> None:
        self._rewards: RewardRepositoryProtocol = reward_repo or RewardRepository()
        self._ledger: LedgerRepositoryProtocol = ledger_repo or LedgerRepository()
        self._calculator = BalanceCalculator(self._ledger)
        self._cache = cache or BalanceCache()

    async def redeem(
        self,
        db: AsyncSession,
        user_id: str,
        reward_item_id: int,
        business_id: int | None = None,
    ) -> RedemptionReceipt:
        """Redeem reward_item_id for user_id, or raise and leave no trace.

        Raises:
            RewardItemNotFoundError, RewardInactiveError, RewardExpiredError,
            RewardExhaustedError, RewardBusinessMismatchError,
            InsufficientPointsError: rule violations, nothing written.
            DataIntegrityFaultError: the user's ledger already sums negative.
            TransientFailureError: storage failed mid-flight, safe to retry.
        """
        try:
            receipt = await self._redeem_locked(db, user_id, reward_item_id, business_id)
            await db.commit()
        except TRANSIENT_DB_ERRORS as exc:
            await db.rollback()
            logger.warning(
                "Redemption of item=%s by user=%s rolled back: %s",
                reward_item_id,
                user_id,
                exc,
            )
            raise TransientFailureError() from exc
        except Exception:
            await db.rollback()
            raise

        await self._cache.invalidate(user_id)
        logger.info(
            "Redeemed item=%s user=%s redemption=%s points=%d remaining=%d",
            reward_item_id,
            user_id,
            receipt.redemption.id,
            receipt.redemption.points_redeemed,
            receipt.remaining_points,
        )
        return receipt

    async def _redeem_locked(
        self,
        db: AsyncSession,
        user_id: str,
        reward_item_id: int,
        business_id: int | None,
    ) -> RedemptionReceipt:
        # Lock order matters: user first, then item. Never the reverse.
        await self._ledger.lock_user(db, user_id)
        item = await self._rewards.get_reward_item(db, reward_item_id, for_update=True)
        if item is None:
            raise RewardItemNotFoundError(reward_item_id)

        redemption_count = 0
        if item.max_redemptions is not None:
            redemption_count = await self._rewards.count_redemptions(db, item.id)
        check_redeemable(item, redemption_count, utc_now())
        target_business_id = resolve_business(item, business_id)
        business_name = await self._rewards.get_business_name(db, target_business_id)
        if target_business_id is not None and business_name is None:
            raise BusinessNotFoundError(target_business_id)

        balance = await self._calculator.balance_of(db, user_id)
        check_affordable(balance, item.point_threshold)

        redemption = await self._rewards.insert_redemption(
            db, user_id, item.id, target_business_id, item.point_threshold
        )
        debit = await self._ledger.append(
            db,
            NewLedgerEntry(
                user_id=user_id,
                amount=-item.point_threshold,
                source_kind=SourceKind.REDEMPTION,
                source_ref=str(redemption.id),
                business_id=target_business_id,
                description=f"Redeemed {item.name}",
            ),
        )

        return RedemptionReceipt(
            redemption=redemption,
            ledger_entry_id=debit.id,
            reward_name=item.name,
            business_name=business_name,
            remaining_points=balance - item.point_threshold,
        )
