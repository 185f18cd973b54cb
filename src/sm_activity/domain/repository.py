"""Repository Protocol for activity records (RSVPs, check-ins, survey responses)."""

from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_activity.domain.models import CheckinRecord, Event, RsvpRecord, Survey


class ActivityRepositoryProtocol(Protocol):
    async def get_event(self, db: AsyncSession, event_id: int) -> Event | None: ...

    async def has_rsvp(self, db: AsyncSession, user_id: str, event_id: int) -> bool: ...

    async def record_rsvp(self, db: AsyncSession, user_id: str, event_id: int) -> bool: ...

    async def record_checkin(
        self, db: AsyncSession, user_id: str, event_id: int, points_earned: int
    ) -> bool: ...

    async def list_rsvps(
        self, db: AsyncSession, user_id: str, cursor_id: int | None, limit: int
    ) -> list[RsvpRecord]: ...

    async def list_checkins(
        self, db: AsyncSession, user_id: str, cursor_id: int | None, limit: int
    ) -> list[CheckinRecord]: ...

    async def get_survey(self, db: AsyncSession, survey_id: int) -> Survey | None: ...

    async def record_survey_response(
        self,
        db: AsyncSession,
        user_id: str,
        survey_id: int,
        responses: dict[str, Any],
        points_earned: int,
    ) -> bool: ...
