"""Pydantic schemas for sm_rewards API."""

from pydantic import BaseModel, Field

from src.sm_common.points import points_to_display
from src.sm_rewards.domain.models import (
    CatalogEntry,
    RedemptionHistoryEntry,
    RedemptionReceipt,
)


class RedeemRequest(BaseModel):
    reward_item_id: int = Field(..., gt=0)
    business_id: int | None = Field(None, gt=0)


class RedeemResponse(BaseModel):
    redemption_id: int
    ledger_entry_id: int
    reward_item_id: int
    reward_name: str
    points_redeemed: int
    business_id: int | None
    business_name: str | None
    redeemed_at: str  # ISO8601 string
    remaining_points: int
    remaining_points_display: str

    @classmethod
    def from_receipt(cls, r: RedemptionReceipt) -> "RedeemResponse":
        return cls(
            redemption_id=r.redemption.id,
            ledger_entry_id=r.ledger_entry_id,
            reward_item_id=r.redemption.reward_item_id,
            reward_name=r.reward_name,
            points_redeemed=r.redemption.points_redeemed,
            business_id=r.redemption.business_id,
            business_name=r.business_name,
            redeemed_at=r.redemption.created_at.isoformat() if r.redemption.created_at else "",
            remaining_points=r.remaining_points,
            remaining_points_display=points_to_display(r.remaining_points),
        )


class RewardItemResponse(BaseModel):
    id: int
    name: str
    description: str | None
    point_threshold: int
    point_threshold_display: str
    business_id: int | None
    business_name: str | None
    image_url: str | None
    expiration_date: str | None
    max_redemptions: int | None
    remaining_redemptions: int | None

    @classmethod
    def from_domain(cls, c: CatalogEntry) -> "RewardItemResponse":
        item = c.item
        return cls(
            id=item.id,
            name=item.name,
            description=item.description,
            point_threshold=item.point_threshold,
            point_threshold_display=points_to_display(item.point_threshold),
            business_id=item.business_id,
            business_name=c.business_name,
            image_url=item.image_url,
            expiration_date=item.expiration_date.isoformat() if item.expiration_date else None,
            max_redemptions=item.max_redemptions,
            remaining_redemptions=c.remaining_redemptions,
        )


class CatalogResponse(BaseModel):
    items: list[RewardItemResponse]


class RedemptionHistoryItem(BaseModel):
    redemption_id: int
    reward_item_id: int
    reward_name: str
    points_redeemed: int
    business_id: int | None
    business_name: str | None
    redeemed_at: str

    @classmethod
    def from_domain(cls, h: RedemptionHistoryEntry) -> "RedemptionHistoryItem":
        return cls(
            redemption_id=h.redemption_id,
            reward_item_id=h.reward_item_id,
            reward_name=h.reward_name,
            points_redeemed=h.points_redeemed,
            business_id=h.business_id,
            business_name=h.business_name,
            redeemed_at=h.redeemed_at.isoformat(),
        )


class RedemptionHistoryResponse(BaseModel):
    items: list[RedemptionHistoryItem]
    next_cursor: str | None
    has_more: bool
