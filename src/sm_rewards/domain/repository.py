"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock (or the in-memory store) that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_rewards.domain.models import (
    CatalogEntry,
    Redemption,
    RedemptionHistoryEntry,
    RewardItem,
)


class RewardRepositoryProtocol(Protocol):
    async def get_reward_item(
        self, db: AsyncSession, reward_item_id: int, for_update: bool = False
    ) -> RewardItem | None: ...

    async def count_redemptions(self, db: AsyncSession, reward_item_id: int) -> int: ...

    async def insert_redemption(
        self,
        db: AsyncSession,
        user_id: str,
        reward_item_id: int,
        business_id: int | None,
        points_redeemed: int,
    ) -> Redemption: ...

    async def get_business_name(
        self, db: AsyncSession, business_id: int | None
    ) -> str | None: ...

    async def list_catalog(
        self, db: AsyncSession, now: datetime, business_id: int | None
    ) -> list[CatalogEntry]: ...

    async def list_redemptions(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
    ) -> list[RedemptionHistoryEntry]: ...
