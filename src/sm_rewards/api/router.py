"""sm_rewards REST API: catalog, redeem, redemption history."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.database import get_db_session
from src.sm_common.response import ApiResponse, success_response
from src.sm_gateway.auth.dependencies import get_current_user_id
from src.sm_rewards.application.schemas import RedeemRequest
from src.sm_rewards.application.service import RewardApplicationService

router = APIRouter(prefix="/rewards", tags=["rewards"])

_service = RewardApplicationService()


@router.get("/items")
async def list_reward_items(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    business_id: int | None = Query(None, gt=0, description="Only items redeemable here"),
) -> ApiResponse:
    data = await _service.list_catalog(db, business_id)
    return success_response(data.model_dump(), request)


@router.post("/redeem", status_code=201)
async def redeem(
    body: RedeemRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.redeem(db, user_id, body.reward_item_id, body.business_id)
    return success_response(data.model_dump(), request)


@router.get("/redemptions")
async def list_redemptions(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
) -> ApiResponse:
    data = await _service.list_redemptions(db, user_id, cursor, limit)
    return success_response(data.model_dump(), request)
