"""Admin REST API (system accounts only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from src.am_admin.application.service import AdminService
from src.am_common.database import get_db_session
from src.am_common.response import ApiResponse, success_response, with_request_id
from src.am_gateway.auth.dependencies import require_system_user
from src.am_gateway.user.db_models import UserModel

router = APIRouter(prefix="/admin", tags=["admin"])
_service = AdminService()


class SweepRequest(BaseModel):
    older_than_seconds: int | None = Field(None, ge=0)


@router.post("/verifications/sweep")
async def sweep_stale_verifications(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_system_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    body: SweepRequest | None = None,
) -> ApiResponse:
    older_than = body.older_than_seconds if body is not None else None
    result = await _service.sweep_stale_verifications(db, older_than)
    return with_request_id(success_response(result), request)


@router.get("/invariants")
async def verify_invariants(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_system_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.verify_all_invariants(db)
    return with_request_id(success_response(result), request)
