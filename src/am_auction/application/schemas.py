"""Pydantic schemas for am_auction API."""

from pydantic import BaseModel, ConfigDict, Field

from src.am_auction.domain.models import Bid, BidReceipt
from src.am_common.cents import cents_to_display

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PlaceBidRequest(BaseModel):
    """Validated once at the HTTP boundary; the bidder comes from the token."""

    model_config = ConfigDict(str_strip_whitespace=True)

    listing_id: str = Field(..., min_length=1, max_length=64)
    amount_cents: int = Field(..., gt=0, description="Bid amount in cents")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BidItem(BaseModel):
    id: str
    product_id: str
    bidder_id: str
    amount_cents: int
    amount_display: str
    created_at: str

    @classmethod
    def from_domain(cls, bid: Bid) -> "BidItem":
        return cls(
            id=bid.id,
            product_id=bid.product_id,
            bidder_id=bid.bidder_id,
            amount_cents=bid.amount,
            amount_display=cents_to_display(bid.amount),
            created_at=bid.created_at.isoformat() if bid.created_at else "",
        )


class PlaceBidResponse(BaseModel):
    bid: BidItem
    previous_price_cents: int
    current_price_cents: int
    reserved_cents: int
    reserved_display: str
    balance_after_cents: int
    balance_after_display: str
    transaction_id: int

    @classmethod
    def from_receipt(cls, receipt: BidReceipt) -> "PlaceBidResponse":
        return cls(
            bid=BidItem.from_domain(receipt.bid),
            previous_price_cents=receipt.previous_price,
            current_price_cents=receipt.bid.amount,
            reserved_cents=receipt.reserved,
            reserved_display=cents_to_display(receipt.reserved),
            balance_after_cents=receipt.balance_after,
            balance_after_display=cents_to_display(receipt.balance_after),
            transaction_id=receipt.transaction_id,
        )


class BidListResponse(BaseModel):
    items: list[BidItem]
