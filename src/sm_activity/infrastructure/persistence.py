"""ActivityRepository: concrete implementation of ActivityRepositoryProtocol.

Activity rows are unique per (user_id, activity id). Every record_* call is an
INSERT ... ON CONFLICT DO NOTHING and reports whether a new row was written;
repeating an activity is harmless. Listings page newest first by id.
"""

import json
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_activity.domain.models import CheckinRecord, Event, RsvpRecord, Survey

_GET_EVENT_SQL = text("""
    SELECT id, name FROM events WHERE id = :event_id
""")

_HAS_RSVP_SQL = text("""
    SELECT 1 FROM event_rsvps WHERE user_id = :user_id AND event_id = :event_id
""")

_INSERT_RSVP_SQL = text("""
    INSERT INTO event_rsvps (user_id, event_id)
    VALUES (:user_id, :event_id)
    ON CONFLICT (user_id, event_id) DO NOTHING
    RETURNING id
""")

_INSERT_CHECKIN_SQL = text("""
    INSERT INTO checkins (user_id, event_id, points_earned)
    VALUES (:user_id, :event_id, :points_earned)
    ON CONFLICT (user_id, event_id) DO NOTHING
    RETURNING id
""")

_LIST_RSVPS_SQL = text("""
    SELECT r.id, r.event_id, e.name AS event_name, r.created_at
    FROM event_rsvps r
    JOIN events e ON e.id = r.event_id
    WHERE r.user_id = :user_id
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR r.id < CAST(:cursor_id AS BIGINT))
    ORDER BY r.id DESC
    LIMIT :limit
""")

_LIST_CHECKINS_SQL = text("""
    SELECT c.id, c.event_id, e.name AS event_name, c.points_earned, c.created_at
    FROM checkins c
    JOIN events e ON e.id = c.event_id
    WHERE c.user_id = :user_id
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR c.id < CAST(:cursor_id AS BIGINT))
    ORDER BY c.id DESC
    LIMIT :limit
""")

_GET_SURVEY_SQL = text("""
    SELECT id, title, reward_points, is_active FROM surveys WHERE id = :survey_id
""")

_INSERT_SURVEY_RESPONSE_SQL = text("""
    INSERT INTO survey_responses (user_id, survey_id, responses, points_earned)
    VALUES (:user_id, :survey_id, CAST(:responses AS JSONB), :points_earned)
    ON CONFLICT (user_id, survey_id) DO NOTHING
    RETURNING id
""")


class ActivityRepository:
    async def get_event(self, db: AsyncSession, event_id: int) -> Event | None:
        result = await db.execute(_GET_EVENT_SQL, {"event_id": event_id})
        row = result.fetchone()
        if row is None:
            return None
        return Event(id=row.id, name=row.name)

    async def has_rsvp(self, db: AsyncSession, user_id: str, event_id: int) -> bool:
        result = await db.execute(_HAS_RSVP_SQL, {"user_id": user_id, "event_id": event_id})
        return result.fetchone() is not None

    async def record_rsvp(self, db: AsyncSession, user_id: str, event_id: int) -> bool:
        result = await db.execute(
            _INSERT_RSVP_SQL, {"user_id": user_id, "event_id": event_id}
        )
        return result.fetchone() is not None

    async def record_checkin(
        self, db: AsyncSession, user_id: str, event_id: int, points_earned: int
    ) -> bool:
        result = await db.execute(
            _INSERT_CHECKIN_SQL,
            {"user_id": user_id, "event_id": event_id, "points_earned": points_earned},
        )
        return result.fetchone() is not None

    async def list_rsvps(
        self, db: AsyncSession, user_id: str, cursor_id: int | None, limit: int
    ) -> list[RsvpRecord]:
        result = await db.execute(
            _LIST_RSVPS_SQL, {"user_id": user_id, "cursor_id": cursor_id, "limit": limit}
        )
        return [
            RsvpRecord(
                id=row.id,
                event_id=row.event_id,
                event_name=row.event_name,
                created_at=row.created_at,
            )
            for row in result.fetchall()
        ]

    async def list_checkins(
        self, db: AsyncSession, user_id: str, cursor_id: int | None, limit: int
    ) -> list[CheckinRecord]:
        result = await db.execute(
            _LIST_CHECKINS_SQL, {"user_id": user_id, "cursor_id": cursor_id, "limit": limit}
        )
        return [
            CheckinRecord(
                id=row.id,
                event_id=row.event_id,
                event_name=row.event_name,
                points_earned=row.points_earned,
                created_at=row.created_at,
            )
            for row in result.fetchall()
        ]

    async def get_survey(self, db: AsyncSession, survey_id: int) -> Survey | None:
        result = await db.execute(_GET_SURVEY_SQL, {"survey_id": survey_id})
        row = result.fetchone()
        if row is None:
            return None
        return Survey(
            id=row.id,
            title=row.title,
            reward_points=row.reward_points,
            is_active=bool(row.is_active),
        )

    async def record_survey_response(
        self,
        db: AsyncSession,
        user_id: str,
        survey_id: int,
        responses: dict[str, Any],
        points_earned: int,
    ) -> bool:
        result = await db.execute(
            _INSERT_SURVEY_RESPONSE_SQL,
            {
                "user_id": user_id,
                "survey_id": survey_id,
                "responses": json.dumps(responses),
                "points_earned": points_earned,
            },
        )
        return result.fetchone() is not None
