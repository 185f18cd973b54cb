"""Domain models for sm_rewards: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class RewardItem:
    id: int
    name: str
    description: str | None
    point_threshold: int             # points required, > 0
    business_id: int | None          # None = redeemable anywhere
    image_url: str | None
    is_active: bool
    expiration_date: datetime | None
    max_redemptions: int | None      # None = uncapped
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class CatalogEntry:
    """A reward item as listed to patrons, with its running redemption count."""

    item: RewardItem
    business_name: str | None
    redemption_count: int

    @property
    def remaining_redemptions(self) -> int | None:
        if self.item.max_redemptions is None:
            return None
        return max(self.item.max_redemptions - self.redemption_count, 0)


@dataclass
class Redemption:
    id: int                          # BIGSERIAL
    user_id: str
    reward_item_id: int
    business_id: int | None
    points_redeemed: int             # threshold snapshot at redemption time
    created_at: datetime | None = None


@dataclass
class RedemptionReceipt:
    """What redeem() hands back: the record plus read-only display joins."""

    redemption: Redemption
    ledger_entry_id: int
    reward_name: str
    business_name: str | None
    remaining_points: int


@dataclass
class RedemptionHistoryEntry:
    redemption_id: int
    reward_item_id: int
    reward_name: str
    points_redeemed: int
    business_id: int | None
    business_name: str | None
    redeemed_at: datetime
