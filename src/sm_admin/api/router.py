"""Admin REST API: operator-only."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_admin.application.service import AdminService
from src.sm_common.database import get_db_session
from src.sm_common.response import ApiResponse, success_response
from src.sm_gateway.auth.dependencies import Principal, require_service_role

router = APIRouter(prefix="/admin", tags=["admin"])
_service = AdminService()


@router.get("/invariants")
async def verify_invariants(
    principal: Annotated[Principal, Depends(require_service_role)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await _service.verify_all_invariants(db)
    return success_response(result, request)
