"""sm_activity REST API: RSVP, check-in, survey submission, and the caller's history."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_activity.application.schemas import EventActivityRequest, SurveyResponseRequest
from src.sm_activity.application.service import ActivityApplicationService
from src.sm_common.database import get_db_session
from src.sm_common.response import ApiResponse, success_response
from src.sm_gateway.auth.dependencies import get_current_user_id

router = APIRouter(prefix="/activity", tags=["activity"])

_service = ActivityApplicationService()


@router.post("/rsvps")
async def rsvp(
    body: EventActivityRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.rsvp(db, user_id, body.event_id)
    return success_response(data.model_dump(), request)


@router.get("/rsvps")
async def list_rsvps(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
) -> ApiResponse:
    data = await _service.list_rsvps(db, user_id, cursor, limit)
    return success_response(data.model_dump(), request)


@router.post("/checkins")
async def check_in(
    body: EventActivityRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.check_in(db, user_id, body.event_id)
    return success_response(data.model_dump(), request)


@router.get("/checkins")
async def list_checkins(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
) -> ApiResponse:
    data = await _service.list_checkins(db, user_id, cursor, limit)
    return success_response(data.model_dump(), request)


@router.post("/surveys/{survey_id}/responses")
async def submit_survey(
    body: SurveyResponseRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    survey_id: int = Path(..., gt=0),
) -> ApiResponse:
    data = await _service.submit_survey(db, user_id, survey_id, body.responses)
    return success_response(data.model_dump(), request)
