"""am_auction REST endpoints.

POST /bids         place a bid (the auction state machine)
GET  /bids/mine    bids placed by the caller, newest first
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.am_auction.application import service
from src.am_auction.application.schemas import PlaceBidRequest
from src.am_common.database import get_db_session
from src.am_common.response import ApiResponse, success_response, with_request_id
from src.am_gateway.auth.dependencies import get_current_user
from src.am_gateway.user.db_models import UserModel

router = APIRouter(prefix="/bids", tags=["bids"])


@router.post("")
async def place_bid(
    body: PlaceBidRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await service.place_bid(body, current_user.id, db)
    return with_request_id(
        success_response(result.model_dump(), "Bid placed successfully"), request
    )


@router.get("/mine")
async def list_my_bids(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await service.list_my_bids(current_user.id, db)
    return with_request_id(success_response(result.model_dump()), request)
