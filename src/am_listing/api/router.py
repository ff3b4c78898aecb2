"""am_listing REST endpoints.

POST /listings                        create a listing (starts pending)
GET  /listings                        active, AI-accepted listings with filters
GET  /listings/mine                   caller's own listings
GET  /listings/{listing_id}           detail with bids (amount descending)
GET  /listings/{listing_id}/outcome   winner once the auction has closed
PUT  /listings/{listing_id}/ai-status  verdict write by the trusted relay
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.am_common.database import get_db_session
from src.am_common.response import ApiResponse, success_response, with_request_id
from src.am_gateway.auth.dependencies import get_current_user, require_system_user
from src.am_gateway.user.db_models import UserModel
from src.am_listing.application.schemas import (
    CreateListingRequest,
    ProductStatusResponse,
    SetStatusRequest,
)
from src.am_listing.application.service import ListingService
from src.am_listing.application.status_service import VerificationStatusStore

router = APIRouter(prefix="/listings", tags=["listings"])

_service = ListingService()
_status_store = VerificationStatusStore()


@router.post("")
async def create_listing(
    body: CreateListingRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.create_listing(db, current_user.id, body)
    return with_request_id(
        success_response(result.model_dump(mode="json"), "Product created successfully"),
        request,
    )


@router.get("")
async def list_listings(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    category: str | None = Query(None, description="Category filter; 'all' for none"),
    search: str | None = Query(None, max_length=200),
    min_price: int | None = Query(None, ge=0, description="Minimum current price in cents"),
    max_price: int | None = Query(None, ge=0, description="Maximum current price in cents"),
    limit: int = Query(50, ge=1, le=200),
) -> ApiResponse:
    result = await _service.list_active(db, category, search, min_price, max_price, limit)
    return with_request_id(success_response(result.model_dump(mode="json")), request)


@router.get("/mine")
async def list_my_listings(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.list_mine(db, current_user.id)
    return with_request_id(success_response(result.model_dump(mode="json")), request)


@router.get("/{listing_id}")
async def get_listing(
    listing_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_listing(db, listing_id)
    return with_request_id(success_response(result.model_dump(mode="json")), request)


@router.get("/{listing_id}/outcome")
async def get_outcome(
    listing_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_outcome(db, listing_id)
    return with_request_id(success_response(result.model_dump(mode="json")), request)


@router.put("/{listing_id}/ai-status")
async def set_ai_status(
    listing_id: str,
    body: SetStatusRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_system_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    snapshot = await _status_store.set_status(db, listing_id, body.status, body.message)
    data = ProductStatusResponse.from_snapshot(snapshot)
    return with_request_id(success_response(data.model_dump(mode="json")), request)
