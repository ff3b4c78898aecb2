"""Domain models for am_auction: pure dataclasses."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Bid:
    """Immutable once written; bids are never updated or deleted."""

    id: str
    product_id: str
    bidder_id: str
    amount: int              # cents
    created_at: datetime | None = None


@dataclass
class BidReceipt:
    """Everything one accepted bid changed."""

    bid: Bid
    previous_price: int
    reserved: int            # cents debited from the bidder
    balance_after: int
    transaction_id: int
