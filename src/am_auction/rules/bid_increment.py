from src.am_common.errors import BidTooLowError
from src.am_listing.domain.models import Listing

MIN_INCREMENT_CENTS: int = 1


def check_bid_increment(listing: Listing, amount: int) -> None:
    """Raise BidTooLowError(4004) unless amount beats the current price by a cent or more."""
    if amount < listing.current_price + MIN_INCREMENT_CENTS:
        raise BidTooLowError(amount, listing.current_price)
