"""RewardApplicationService: thin composition layer over the catalog and redemption.

redeem delegates the whole transaction to RedemptionCoordinator.
list_catalog and list_redemptions are read-only.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.datetime_utils import utc_now
from src.sm_ledger.application.schemas import cursor_decode, cursor_encode
from src.sm_rewards.application.redemption import RedemptionCoordinator
from src.sm_rewards.application.schemas import (
    CatalogResponse,
    RedeemResponse,
    RedemptionHistoryItem,
    RedemptionHistoryResponse,
    RewardItemResponse,
)
from src.sm_rewards.domain.repository import RewardRepositoryProtocol
from src.sm_rewards.infrastructure.persistence import RewardRepository


class RewardApplicationService:
    def __init__(
        self,
        repo: RewardRepositoryProtocol | None = None,
        coordinator: RedemptionCoordinator | None = None,
    ) -> None:
        self._repo: RewardRepositoryProtocol = repo or RewardRepository()
        self._coordinator = coordinator or RedemptionCoordinator(reward_repo=self._repo)

    async def list_catalog(
        self, db: AsyncSession, business_id: int | None
    ) -> CatalogResponse:
        entries = await self._repo.list_catalog(db, utc_now(), business_id)
        return CatalogResponse(items=[RewardItemResponse.from_domain(e) for e in entries])

    async def redeem(
        self,
        db: AsyncSession,
        user_id: str,
        reward_item_id: int,
        business_id: int | None,
    ) -> RedeemResponse:
        receipt = await self._coordinator.redeem(db, user_id, reward_item_id, business_id)
        return RedeemResponse.from_receipt(receipt)

    async def list_redemptions(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: str | None,
        limit: int,
    ) -> RedemptionHistoryResponse:
        cursor_id = cursor_decode(cursor)
        rows = await self._repo.list_redemptions(db, user_id, cursor_id, limit + 1)
        has_more = len(rows) > limit
        page = rows[:limit]
        next_cursor = cursor_encode(page[-1].redemption_id) if has_more and page else None
        return RedemptionHistoryResponse(
            items=[RedemptionHistoryItem.from_domain(h) for h in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )
