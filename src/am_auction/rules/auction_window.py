from datetime import datetime

from src.am_common.datetime_utils import is_past
from src.am_common.errors import AuctionEndedError
from src.am_listing.domain.models import Listing


def check_auction_open(listing: Listing, now: datetime) -> None:
    """Raise AuctionEndedError(4001) once end_time lies before `now`."""
    if is_past(listing.end_time, now):
        raise AuctionEndedError(listing.id)
