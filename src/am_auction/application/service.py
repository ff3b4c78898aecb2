# src/am_auction/application/service.py
from sqlalchemy.ext.asyncio import AsyncSession

from src.am_auction.application.schemas import (
    BidItem,
    BidListResponse,
    PlaceBidRequest,
    PlaceBidResponse,
)
from src.am_auction.engine.engine import get_auction_engine
from src.am_auction.infrastructure.persistence import BidRepository

_repo = BidRepository()


async def place_bid(
    req: PlaceBidRequest, bidder_id: str, db: AsyncSession
) -> PlaceBidResponse:
    engine = get_auction_engine()
    receipt = await engine.place_bid(db, req.listing_id, bidder_id, req.amount_cents)
    return PlaceBidResponse.from_receipt(receipt)


async def list_my_bids(bidder_id: str, db: AsyncSession) -> BidListResponse:
    bids = await _repo.list_by_bidder(db, bidder_id)
    return BidListResponse(items=[BidItem.from_domain(b) for b in bids])
