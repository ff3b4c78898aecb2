"""Domain models for am_listing: pure dataclasses."""

from dataclasses import dataclass, field
from datetime import datetime

from src.am_common.datetime_utils import is_past, utc_now
from src.am_common.enums import AIStatus, AuctionPhase


@dataclass
class Listing:
    id: str
    seller_id: str
    title: str
    description: str
    category: str
    condition: str
    starting_price: int      # cents
    current_price: int       # cents, >= starting_price, never decreases
    end_time: datetime
    ai_status: str           # AIStatus value
    ai_message: str | None = None
    ai_verified: bool = False
    ai_verified_at: datetime | None = None
    ai_status_updated_at: datetime | None = None
    video_urls: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def phase(self, now: datetime | None = None) -> AuctionPhase:
        now = now or utc_now()
        if self.ai_status in (AIStatus.REJECTED, AIStatus.ERROR):
            return AuctionPhase.REJECTED
        if self.ai_status != AIStatus.ACCEPTED:
            return AuctionPhase.AWAITING_VERIFICATION
        if is_past(self.end_time, now):
            return AuctionPhase.CLOSED
        return AuctionPhase.OPEN

    def is_biddable_by(self, bidder_id: str, now: datetime | None = None) -> bool:
        return self.phase(now) == AuctionPhase.OPEN and bidder_id != self.seller_id


@dataclass
class NewListing:
    seller_id: str
    title: str
    description: str
    category: str
    condition: str
    starting_price: int
    end_time: datetime
    video_urls: list[str] = field(default_factory=list)


@dataclass
class StatusSnapshot:
    """What the status endpoint and the poller see for one listing."""

    listing_id: str
    status: AIStatus
    message: str
    timestamp: datetime | None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal
