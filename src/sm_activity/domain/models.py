"""Domain models for sm_activity: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Event:
    id: int
    name: str


@dataclass
class Survey:
    id: int
    title: str
    reward_points: int               # supplied by the survey definition
    is_active: bool


@dataclass(frozen=True)
class AwardResult:
    """Outcome of one award attempt. awarded=False means already credited."""

    awarded: bool
    points: int


@dataclass
class RsvpRecord:
    id: int
    event_id: int
    event_name: str
    created_at: datetime


@dataclass
class CheckinRecord:
    id: int
    event_id: int
    event_name: str
    points_earned: int
    created_at: datetime
