"""am_wallet REST API. All endpoints require a provider-issued token."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.am_common.database import get_db_session
from src.am_common.enums import TransactionType
from src.am_common.response import ApiResponse, success_response, with_request_id
from src.am_gateway.auth.dependencies import get_current_user
from src.am_gateway.user.db_models import UserModel
from src.am_wallet.application.schemas import DepositRequest
from src.am_wallet.application.service import WalletService

router = APIRouter(prefix="/wallet", tags=["wallet"])

_service = WalletService()


@router.get("/balance")
async def get_balance(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_balance(db, current_user.id)
    return with_request_id(success_response(data.model_dump()), request)


@router.post("/deposit")
async def deposit(
    body: DepositRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.deposit(db, current_user.id, body.amount_cents)
    return with_request_id(success_response(data.model_dump(), data.message), request)


@router.get("/transactions")
async def list_transactions(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    type: TransactionType | None = Query(None, description="Filter by transaction type"),  # noqa: A002
) -> ApiResponse:
    data = await _service.list_transactions(
        db, current_user.id, cursor, limit, type.value if type else None
    )
    return with_request_id(success_response(data.model_dump(mode="json")), request)
