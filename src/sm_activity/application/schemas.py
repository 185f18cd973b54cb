"""Pydantic schemas for sm_activity API."""

from typing import Any

from pydantic import BaseModel, Field

from src.sm_activity.domain.models import AwardResult, CheckinRecord, RsvpRecord
from src.sm_common.points import points_to_display


class EventActivityRequest(BaseModel):
    event_id: int = Field(..., gt=0)


class SurveyResponseRequest(BaseModel):
    responses: dict[str, Any] = Field(default_factory=dict)


class AwardResponse(BaseModel):
    awarded: bool
    points: int
    points_display: str

    @classmethod
    def from_result(cls, result: AwardResult) -> "AwardResponse":
        return cls(
            awarded=result.awarded,
            points=result.points,
            points_display=points_to_display(result.points),
        )


class RsvpItem(BaseModel):
    id: int
    event_id: int
    event_name: str
    rsvped_at: str

    @classmethod
    def from_domain(cls, r: RsvpRecord) -> "RsvpItem":
        return cls(
            id=r.id,
            event_id=r.event_id,
            event_name=r.event_name,
            rsvped_at=r.created_at.isoformat(),
        )


class RsvpHistoryResponse(BaseModel):
    items: list[RsvpItem]
    next_cursor: str | None
    has_more: bool


class CheckinItem(BaseModel):
    id: int
    event_id: int
    event_name: str
    points_earned: int
    points_display: str
    checked_in_at: str

    @classmethod
    def from_domain(cls, c: CheckinRecord) -> "CheckinItem":
        return cls(
            id=c.id,
            event_id=c.event_id,
            event_name=c.event_name,
            points_earned=c.points_earned,
            points_display=points_to_display(c.points_earned),
            checked_in_at=c.created_at.isoformat(),
        )


class CheckinHistoryResponse(BaseModel):
    items: list[CheckinItem]
    next_cursor: str | None
    has_more: bool
