"""Admin application service: read-only ledger integrity audit.

Checks, across all users:
  - no user's ledger sums negative
  - every redemption has exactly one REDEMPTION debit pointing at it
  - every REDEMPTION debit points at an existing redemption
  - no reward item has more redemptions than max_redemptions

Violations are reported and logged, never repaired.
"""

import logging
from typing import Any

from sqlalchemy import String, and_, cast, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.enums import SourceKind
from src.sm_ledger.infrastructure.db_models import LedgerEntryORM
from src.sm_rewards.infrastructure.db_models import RedemptionORM, RewardItemORM

logger = logging.getLogger(__name__)

_balance = func.sum(LedgerEntryORM.amount)

_NEGATIVE_BALANCES = (
    select(LedgerEntryORM.user_id, _balance.label("balance"))
    .group_by(LedgerEntryORM.user_id)
    .having(_balance < 0)
)

_REDEMPTIONS_WITHOUT_DEBIT = (
    select(RedemptionORM.id, RedemptionORM.user_id)
    .outerjoin(
        LedgerEntryORM,
        and_(
            LedgerEntryORM.source_kind == SourceKind.REDEMPTION.value,
            LedgerEntryORM.source_ref == cast(RedemptionORM.id, String),
        ),
    )
    .where(LedgerEntryORM.id.is_(None))
)

_DEBITS_WITHOUT_REDEMPTION = (
    select(LedgerEntryORM.id, LedgerEntryORM.user_id, LedgerEntryORM.source_ref)
    .outerjoin(
        RedemptionORM,
        cast(RedemptionORM.id, String) == LedgerEntryORM.source_ref,
    )
    .where(
        LedgerEntryORM.source_kind == SourceKind.REDEMPTION.value,
        RedemptionORM.id.is_(None),
    )
)

_redemption_count = func.count(RedemptionORM.id)

_OVER_REDEEMED_ITEMS = (
    select(
        RewardItemORM.id,
        RewardItemORM.max_redemptions,
        _redemption_count.label("redemption_count"),
    )
    .join(RedemptionORM, RedemptionORM.reward_item_id == RewardItemORM.id)
    .where(RewardItemORM.max_redemptions.is_not(None))
    .group_by(RewardItemORM.id, RewardItemORM.max_redemptions)
    .having(_redemption_count > RewardItemORM.max_redemptions)
)


class AdminService:
    async def verify_all_invariants(self, db: AsyncSession) -> dict[str, Any]:
        violations: list[str] = []

        for row in (await db.execute(_NEGATIVE_BALANCES)).fetchall():
            violations.append(f"negative balance: user={row.user_id} balance={row.balance}")

        for row in (await db.execute(_REDEMPTIONS_WITHOUT_DEBIT)).fetchall():
            violations.append(
                f"redemption without debit: redemption={row.id} user={row.user_id}"
            )

        for row in (await db.execute(_DEBITS_WITHOUT_REDEMPTION)).fetchall():
            violations.append(
                f"debit without redemption: entry={row.id} user={row.user_id} "
                f"source_ref={row.source_ref}"
            )

        for row in (await db.execute(_OVER_REDEEMED_ITEMS)).fetchall():
            violations.append(
                f"over-redeemed reward: item={row.id} "
                f"count={row.redemption_count} max={row.max_redemptions}"
            )

        for v in violations:
            logger.error("Invariant violated: %s", v)
        return {"ok": len(violations) == 0, "violations": violations}
