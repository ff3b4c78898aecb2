from src.am_common.enums import AIStatus
from src.am_common.errors import NotVerifiedError
from src.am_listing.domain.models import Listing


def check_verified(listing: Listing) -> None:
    """Raise NotVerifiedError(4002) unless the AI verdict is accepted."""
    if listing.ai_status != AIStatus.ACCEPTED:
        raise NotVerifiedError(listing.id)
