"""ListingService: listing creation and catalogue reads.

New listings always start with ai_status "pending"; only the verification
relay (through VerificationStatusStore) can make a listing biddable.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.am_auction.application.schemas import BidItem
from src.am_auction.domain.repository import BidRepositoryProtocol
from src.am_auction.infrastructure.persistence import BidRepository
from src.am_common.database import unit_of_work
from src.am_common.datetime_utils import end_time_after_days, utc_now
from src.am_common.enums import AuctionPhase
from src.am_common.errors import InvalidInputError, ListingNotFoundError
from src.am_listing.application.schemas import (
    AuctionOutcomeResponse,
    CreateListingRequest,
    ListingDetailResponse,
    ListingItem,
    ListingListResponse,
)
from src.am_listing.domain.models import NewListing
from src.am_listing.domain.repository import ListingRepositoryProtocol
from src.am_listing.infrastructure.persistence import ListingRepository

logger = logging.getLogger(__name__)


class ListingService:
    def __init__(
        self,
        repo: ListingRepositoryProtocol | None = None,
        bids: BidRepositoryProtocol | None = None,
    ) -> None:
        self._repo: ListingRepositoryProtocol = repo or ListingRepository()
        self._bids: BidRepositoryProtocol = bids or BidRepository()

    async def create_listing(
        self, db: AsyncSession, seller_id: str, req: CreateListingRequest
    ) -> ListingItem:
        new = NewListing(
            seller_id=seller_id,
            title=req.title,
            description=req.description,
            category=req.category,
            condition=req.condition,
            starting_price=req.starting_price_cents,
            end_time=end_time_after_days(req.duration_days),
            video_urls=list(req.video_urls),
        )
        async with unit_of_work(db):
            listing = await self._repo.create(db, new)
        logger.info("Listing created id=%s seller=%s", listing.id, seller_id)
        return ListingItem.from_domain(listing)

    async def get_listing(self, db: AsyncSession, listing_id: str) -> ListingDetailResponse:
        listing = await self._repo.get_by_id(db, listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        bids = [BidItem.from_domain(b) for b in await self._bids.list_for_product(db, listing_id)]
        return ListingDetailResponse(
            listing=ListingItem.from_domain(listing),
            bids=bids,
            bid_count=len(bids),
            leader=bids[0] if bids else None,
        )

    async def list_active(
        self,
        db: AsyncSession,
        category: str | None,
        search: str | None,
        min_price: int | None,
        max_price: int | None,
        limit: int,
    ) -> ListingListResponse:
        if min_price is not None and max_price is not None and min_price > max_price:
            raise InvalidInputError("min_price must not exceed max_price")
        sql_category = None if category in (None, "", "all") else category
        sql_search = (search or "").strip() or None
        listings = await self._repo.list_active(
            db, sql_category, sql_search, min_price, max_price, limit
        )
        now = utc_now()
        return ListingListResponse(items=[ListingItem.from_domain(x, now) for x in listings])

    async def list_mine(self, db: AsyncSession, seller_id: str) -> ListingListResponse:
        listings = await self._repo.list_by_seller(db, seller_id)
        now = utc_now()
        return ListingListResponse(items=[ListingItem.from_domain(x, now) for x in listings])

    async def get_outcome(self, db: AsyncSession, listing_id: str) -> AuctionOutcomeResponse:
        listing = await self._repo.get_by_id(db, listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        phase = listing.phase()
        winner = None
        if phase == AuctionPhase.CLOSED:
            highest = await self._bids.get_highest(db, listing_id)
            winner = BidItem.from_domain(highest) if highest else None
        return AuctionOutcomeResponse(product_id=listing.id, phase=phase, winner=winner)
