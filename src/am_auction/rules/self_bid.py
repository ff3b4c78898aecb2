"""Self-bid prevention: a seller may never bid on their own listing, system accounts included."""

from src.am_common.errors import SelfBidError
from src.am_listing.domain.models import Listing


def is_self_bid(bidder_id: str, seller_id: str) -> bool:
    return str(bidder_id) == str(seller_id)


def check_not_self_bid(listing: Listing, bidder_id: str) -> None:
    if is_self_bid(bidder_id, listing.seller_id):
        raise SelfBidError()
