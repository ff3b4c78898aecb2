"""Product verification status: the endpoint the status poller consumes.

GET /api/product-status/{id}        → {status, message, timestamp, productId}
GET /api/product-status/{id}/wait   → same body, once terminal or on timeout

Mounted without the /api/v1 prefix and without the ApiResponse envelope so
existing pollers keep working. Errors still use the envelope (404/400).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.am_common.database import get_db_session
from src.am_listing.application.schemas import ProductStatusResponse
from src.am_listing.application.status_service import MAX_WAIT_SECONDS, VerificationStatusStore

router = APIRouter(prefix="/api/product-status", tags=["product-status"])

_status_store = VerificationStatusStore()


@router.get("/{product_id}", response_model=ProductStatusResponse)
async def get_product_status(
    product_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ProductStatusResponse:
    snapshot = await _status_store.get_status(db, product_id)
    return ProductStatusResponse.from_snapshot(snapshot)


@router.get("/{product_id}/wait", response_model=ProductStatusResponse)
async def wait_product_status(
    product_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    timeout: float = Query(30.0, ge=0, le=MAX_WAIT_SECONDS),
) -> ProductStatusResponse:
    snapshot = await _status_store.wait_for_terminal(db, product_id, timeout)
    return ProductStatusResponse.from_snapshot(snapshot)
