"""Pydantic request/response schemas for am_listing.

All /api/v1 responses are wrapped in ApiResponse at the router layer; the
product-status body is returned bare.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.am_auction.application.schemas import BidItem
from src.am_common.cents import cents_to_display
from src.am_common.enums import AIStatus, AuctionPhase
from src.am_listing.domain.models import Listing, StatusSnapshot

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateListingRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    starting_price_cents: int = Field(..., gt=0)
    duration_days: int = Field(..., gt=0, le=365)
    category: str = Field(..., min_length=1, max_length=64)
    condition: str = Field(..., min_length=1, max_length=64)
    video_urls: list[str] = Field(default_factory=list)


class SetStatusRequest(BaseModel):
    status: AIStatus
    message: str | None = Field(None, max_length=1000)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ProductStatusResponse(BaseModel):
    """Flat body of GET /api/product-status/{id} (consumed by the status poller)."""

    status: AIStatus
    message: str
    timestamp: datetime | None
    productId: str  # noqa: N815  (wire name)

    @classmethod
    def from_snapshot(cls, snapshot: StatusSnapshot) -> "ProductStatusResponse":
        return cls(
            status=snapshot.status,
            message=snapshot.message,
            timestamp=snapshot.timestamp,
            productId=snapshot.listing_id,
        )


class ListingItem(BaseModel):
    id: str
    seller_id: str
    title: str
    description: str
    category: str
    condition: str
    starting_price_cents: int
    current_price_cents: int
    current_price_display: str
    end_time: str
    phase: AuctionPhase
    ai_status: str
    ai_message: str | None
    ai_verified_at: str | None
    video_urls: list[str]
    created_at: str

    @classmethod
    def from_domain(cls, listing: Listing, now: datetime | None = None) -> "ListingItem":
        return cls(
            id=listing.id,
            seller_id=listing.seller_id,
            title=listing.title,
            description=listing.description,
            category=listing.category,
            condition=listing.condition,
            starting_price_cents=listing.starting_price,
            current_price_cents=listing.current_price,
            current_price_display=cents_to_display(listing.current_price),
            end_time=listing.end_time.isoformat(),
            phase=listing.phase(now),
            ai_status=listing.ai_status,
            ai_message=listing.ai_message,
            ai_verified_at=listing.ai_verified_at.isoformat() if listing.ai_verified_at else None,
            video_urls=listing.video_urls,
            created_at=listing.created_at.isoformat() if listing.created_at else "",
        )


class ListingDetailResponse(BaseModel):
    listing: ListingItem
    bids: list[BidItem]          # amount descending
    bid_count: int
    leader: BidItem | None


class ListingListResponse(BaseModel):
    items: list[ListingItem]


class AuctionOutcomeResponse(BaseModel):
    product_id: str
    phase: AuctionPhase
    winner: BidItem | None       # set only when phase is CLOSED and a bid exists
