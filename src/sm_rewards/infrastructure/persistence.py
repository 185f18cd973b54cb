"""RewardRepository: concrete implementation of RewardRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.

reward_items rows are owned by catalog management; this repository only reads
them (optionally FOR UPDATE) and appends to redemptions.
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.errors import InternalError
from src.sm_rewards.domain.models import (
    CatalogEntry,
    Redemption,
    RedemptionHistoryEntry,
    RewardItem,
)

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_REWARD_ITEM_COLUMNS = """
    id, name, description, point_threshold, business_id, image_url,
    is_active, expiration_date, max_redemptions, created_at, updated_at
"""

_GET_REWARD_ITEM_SQL = text(f"""
    SELECT {_REWARD_ITEM_COLUMNS}
    FROM reward_items
    WHERE id = :reward_item_id
""")

# Row lock serializes every redemption of one item until the caller commits.
_GET_REWARD_ITEM_FOR_UPDATE_SQL = text(f"""
    SELECT {_REWARD_ITEM_COLUMNS}
    FROM reward_items
    WHERE id = :reward_item_id
    FOR UPDATE
""")

_COUNT_REDEMPTIONS_SQL = text("""
    SELECT COUNT(*) FROM redemptions WHERE reward_item_id = :reward_item_id
""")

_INSERT_REDEMPTION_SQL = text("""
    INSERT INTO redemptions (user_id, reward_item_id, business_id, points_redeemed)
    VALUES (:user_id, :reward_item_id, :business_id, :points_redeemed)
    RETURNING id, user_id, reward_item_id, business_id, points_redeemed, created_at
""")

_GET_BUSINESS_NAME_SQL = text("""
    SELECT name FROM businesses WHERE id = :business_id
""")

_LIST_CATALOG_SQL = text("""
    SELECT ri.id, ri.name, ri.description, ri.point_threshold, ri.business_id,
           ri.image_url, ri.is_active, ri.expiration_date, ri.max_redemptions,
           ri.created_at, ri.updated_at,
           b.name AS business_name,
           COALESCE(rc.cnt, 0) AS redemption_count
    FROM reward_items ri
    LEFT JOIN businesses b ON b.id = ri.business_id
    LEFT JOIN (
        SELECT reward_item_id, COUNT(*) AS cnt
        FROM redemptions
        GROUP BY reward_item_id
    ) rc ON rc.reward_item_id = ri.id
    WHERE ri.is_active
      AND (ri.expiration_date IS NULL OR ri.expiration_date >= :now)
      AND (ri.max_redemptions IS NULL OR COALESCE(rc.cnt, 0) < ri.max_redemptions)
      AND (
          CAST(:business_id AS INTEGER) IS NULL
          OR ri.business_id IS NULL
          OR ri.business_id = CAST(:business_id AS INTEGER)
      )
    ORDER BY ri.point_threshold ASC, ri.id ASC
""")

_LIST_REDEMPTIONS_SQL = text("""
    SELECT r.id AS redemption_id, r.reward_item_id, ri.name AS reward_name,
           r.points_redeemed, r.business_id, b.name AS business_name,
           r.created_at AS redeemed_at
    FROM redemptions r
    JOIN reward_items ri ON ri.id = r.reward_item_id
    LEFT JOIN businesses b ON b.id = r.business_id
    WHERE r.user_id = :user_id
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR r.id < CAST(:cursor_id AS BIGINT))
    ORDER BY r.id DESC
    LIMIT :limit
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------

def _row_to_reward_item(row: object) -> RewardItem:
    return RewardItem(
        id=row.id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        point_threshold=row.point_threshold,  # type: ignore[attr-defined]
        business_id=row.business_id,  # type: ignore[attr-defined]
        image_url=row.image_url,  # type: ignore[attr-defined]
        is_active=bool(row.is_active),  # type: ignore[attr-defined]
        expiration_date=row.expiration_date,  # type: ignore[attr-defined]
        max_redemptions=row.max_redemptions,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_redemption(row: object) -> Redemption:
    return Redemption(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        reward_item_id=row.reward_item_id,  # type: ignore[attr-defined]
        business_id=row.business_id,  # type: ignore[attr-defined]
        points_redeemed=row.points_redeemed,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


def _row_to_history(row: object) -> RedemptionHistoryEntry:
    return RedemptionHistoryEntry(
        redemption_id=row.redemption_id,  # type: ignore[attr-defined]
        reward_item_id=row.reward_item_id,  # type: ignore[attr-defined]
        reward_name=row.reward_name,  # type: ignore[attr-defined]
        points_redeemed=row.points_redeemed,  # type: ignore[attr-defined]
        business_id=row.business_id,  # type: ignore[attr-defined]
        business_name=row.business_name,  # type: ignore[attr-defined]
        redeemed_at=row.redeemed_at,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class RewardRepository:
    async def get_reward_item(
        self, db: AsyncSession, reward_item_id: int, for_update: bool = False
    ) -> RewardItem | None:
        sql = _GET_REWARD_ITEM_FOR_UPDATE_SQL if for_update else _GET_REWARD_ITEM_SQL
        result = await db.execute(sql, {"reward_item_id": reward_item_id})
        row = result.fetchone()
        return _row_to_reward_item(row) if row else None

    async def count_redemptions(self, db: AsyncSession, reward_item_id: int) -> int:
        result = await db.execute(_COUNT_REDEMPTIONS_SQL, {"reward_item_id": reward_item_id})
        return int(result.scalar_one())

    async def insert_redemption(
        self,
        db: AsyncSession,
        user_id: str,
        reward_item_id: int,
        business_id: int | None,
        points_redeemed: int,
    ) -> Redemption:
        result = await db.execute(
            _INSERT_REDEMPTION_SQL,
            {
                "user_id": user_id,
                "reward_item_id": reward_item_id,
                "business_id": business_id,
                "points_redeemed": points_redeemed,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Redemption insert returned no rows: this should never happen")
        return _row_to_redemption(row)

    async def get_business_name(
        self, db: AsyncSession, business_id: int | None
    ) -> str | None:
        if business_id is None:
            return None
        result = await db.execute(_GET_BUSINESS_NAME_SQL, {"business_id": business_id})
        return result.scalar_one_or_none()

    async def list_catalog(
        self, db: AsyncSession, now: datetime, business_id: int | None
    ) -> list[CatalogEntry]:
        result = await db.execute(
            _LIST_CATALOG_SQL, {"now": now, "business_id": business_id}
        )
        return [
            CatalogEntry(
                item=_row_to_reward_item(row),
                business_name=row.business_name,
                redemption_count=int(row.redemption_count),
            )
            for row in result.fetchall()
        ]

    async def list_redemptions(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
    ) -> list[RedemptionHistoryEntry]:
        result = await db.execute(
            _LIST_REDEMPTIONS_SQL,
            {"user_id": user_id, "cursor_id": cursor_id, "limit": limit},
        )
        return [_row_to_history(row) for row in result.fetchall()]
