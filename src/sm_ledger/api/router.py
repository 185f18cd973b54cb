"""sm_ledger REST API: read-only views of the caller's points."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.database import get_db_session
from src.sm_common.enums import SourceKind
from src.sm_common.response import ApiResponse, success_response
from src.sm_gateway.auth.dependencies import get_current_user_id
from src.sm_ledger.application.service import PointsApplicationService

router = APIRouter(prefix="/points", tags=["points"])

_service = PointsApplicationService()


@router.get("/balance")
async def get_balance(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_balance(db, user_id)
    return success_response(data.model_dump(), request)


@router.get("/ledger")
async def list_ledger(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    source_kind: SourceKind | None = Query(None, description="Filter by SourceKind"),
) -> ApiResponse:
    data = await _service.list_ledger(
        db, user_id, cursor, limit, source_kind.value if source_kind else None
    )
    return success_response(data.model_dump(), request)
