"""ActivityApplicationService: records an activity and awards its points.

Each award is one transaction: the activity row and its ledger credit are
committed together, then the display balance cache is invalidated.
The history listings are read-only.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_activity.application.schemas import (
    AwardResponse,
    CheckinHistoryResponse,
    CheckinItem,
    RsvpHistoryResponse,
    RsvpItem,
)
from src.sm_activity.domain.models import AwardResult
from src.sm_activity.domain.policy import CHECKIN_POINTS, AwardPolicy
from src.sm_activity.domain.repository import ActivityRepositoryProtocol
from src.sm_activity.infrastructure.persistence import ActivityRepository
from src.sm_common.database import TRANSIENT_DB_ERRORS
from src.sm_common.errors import (
    EventNotFoundError,
    RsvpRequiredError,
    SurveyInactiveError,
    SurveyNotFoundError,
    TransientFailureError,
)
from src.sm_ledger.application.schemas import cursor_decode, cursor_encode
from src.sm_ledger.infrastructure.cache import BalanceCache

logger = logging.getLogger(__name__)


class ActivityApplicationService:
    def __init__(
        self,
        repo: ActivityRepositoryProtocol | None = None,
        policy: AwardPolicy | None = None,
        cache: BalanceCache | None = None,
    ) -> None:
        self._repo: ActivityRepositoryProtocol = repo or ActivityRepository()
        self._policy = policy or AwardPolicy()
        self._cache = cache or BalanceCache()

    async def rsvp(self, db: AsyncSession, user_id: str, event_id: int) -> AwardResponse:
        async def work() -> AwardResult:
            if await self._repo.get_event(db, event_id) is None:
                raise EventNotFoundError(event_id)
            await self._repo.record_rsvp(db, user_id, event_id)
            return await self._policy.award_for_rsvp(db, user_id, event_id)

        return await self._run(db, user_id, work)

    async def check_in(self, db: AsyncSession, user_id: str, event_id: int) -> AwardResponse:
        async def work() -> AwardResult:
            if await self._repo.get_event(db, event_id) is None:
                raise EventNotFoundError(event_id)
            if not await self._repo.has_rsvp(db, user_id, event_id):
                raise RsvpRequiredError(event_id)
            await self._repo.record_checkin(db, user_id, event_id, CHECKIN_POINTS)
            return await self._policy.award_for_checkin(db, user_id, event_id)

        return await self._run(db, user_id, work)

    async def submit_survey(
        self,
        db: AsyncSession,
        user_id: str,
        survey_id: int,
        responses: dict[str, Any],
    ) -> AwardResponse:
        async def work() -> AwardResult:
            survey = await self._repo.get_survey(db, survey_id)
            if survey is None:
                raise SurveyNotFoundError(survey_id)
            if not survey.is_active:
                raise SurveyInactiveError(survey_id)
            result = await self._policy.award_for_survey(
                db, user_id, survey.id, survey.reward_points
            )
            await self._repo.record_survey_response(
                db, user_id, survey.id, responses, result.points
            )
            return result

        return await self._run(db, user_id, work)

    async def list_rsvps(
        self, db: AsyncSession, user_id: str, cursor: str | None, limit: int
    ) -> RsvpHistoryResponse:
        rows = await self._repo.list_rsvps(db, user_id, cursor_decode(cursor), limit + 1)
        has_more = len(rows) > limit
        page = rows[:limit]
        return RsvpHistoryResponse(
            items=[RsvpItem.from_domain(r) for r in page],
            next_cursor=cursor_encode(page[-1].id) if has_more and page else None,
            has_more=has_more,
        )

    async def list_checkins(
        self, db: AsyncSession, user_id: str, cursor: str | None, limit: int
    ) -> CheckinHistoryResponse:
        rows = await self._repo.list_checkins(db, user_id, cursor_decode(cursor), limit + 1)
        has_more = len(rows) > limit
        page = rows[:limit]
        return CheckinHistoryResponse(
            items=[CheckinItem.from_domain(c) for c in page],
            next_cursor=cursor_encode(page[-1].id) if has_more and page else None,
            has_more=has_more,
        )

    async def _run(
        self,
        db: AsyncSession,
        user_id: str,
        work: Callable[[], Awaitable[AwardResult]],
    ) -> AwardResponse:
        try:
            result = await work()
            await db.commit()
        except TRANSIENT_DB_ERRORS as exc:
            await db.rollback()
            logger.warning("Activity for user=%s rolled back: %s", user_id, exc)
            raise TransientFailureError() from exc
        except Exception:
            await db.rollback()
            raise
        if result.awarded:
            await self._cache.invalidate(user_id)
        return AwardResponse.from_result(result)
