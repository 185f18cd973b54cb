"""AwardPolicy: turns an observed activity into at most one ledger credit.

Every award is keyed (user_id, source_kind, activity id). A second award for
the same key is not an error: it comes back as AwardResult(awarded=False).

The policy never commits. The caller owns the transaction so the activity
record and its credit land together.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_activity.domain.models import AwardResult
from src.sm_common.database import TRANSIENT_DB_ERRORS
from src.sm_common.enums import SourceKind
from src.sm_common.errors import DuplicateActivityError, InvalidPointsError, TransientFailureError
from src.sm_common.points import validate_award_points
from src.sm_ledger.domain.models import NewLedgerEntry
from src.sm_ledger.domain.repository import LedgerRepositoryProtocol
from src.sm_ledger.infrastructure.persistence import LedgerRepository

logger = logging.getLogger(__name__)

CHECKIN_POINTS = 5
RSVP_POINTS = 2


class AwardPolicy:
    def __init__(self, ledger_repo: LedgerRepositoryProtocol | None = None) -> None:
        self._ledger: LedgerRepositoryProtocol = ledger_repo or LedgerRepository()

    async def award_for_checkin(
        self, db: AsyncSession, user_id: str, event_id: int
    ) -> AwardResult:
        return await self._award(
            db, user_id, SourceKind.CHECKIN, str(event_id), CHECKIN_POINTS,
            "Event check-in",
        )

    async def award_for_rsvp(
        self, db: AsyncSession, user_id: str, event_id: int
    ) -> AwardResult:
        return await self._award(
            db, user_id, SourceKind.RSVP, str(event_id), RSVP_POINTS,
            "Event RSVP",
        )

    async def award_for_survey(
        self, db: AsyncSession, user_id: str, survey_id: int, reward_points: object
    ) -> AwardResult:
        try:
            points = validate_award_points(reward_points)
        except ValueError as exc:
            raise InvalidPointsError(reward_points) from exc
        return await self._award(
            db, user_id, SourceKind.SURVEY, str(survey_id), points,
            "Survey completed",
        )

    async def _award(
        self,
        db: AsyncSession,
        user_id: str,
        kind: SourceKind,
        source_ref: str,
        points: int,
        description: str,
    ) -> AwardResult:
        entry = NewLedgerEntry(
            user_id=user_id,
            amount=points,
            source_kind=kind,
            source_ref=source_ref,
            description=description,
        )
        try:
            await self._ledger.append(db, entry)
        except DuplicateActivityError:
            logger.info("Already awarded: user=%s %s %s", user_id, kind.value, source_ref)
            return AwardResult(awarded=False, points=0)
        except TRANSIENT_DB_ERRORS as exc:
            raise TransientFailureError() from exc
        logger.info("Awarded %d points: user=%s %s %s", points, user_id, kind.value, source_ref)
        return AwardResult(awarded=True, points=points)
