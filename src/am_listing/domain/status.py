"""Reading rule for a listing's AI verdict.

Missing or partial AI fields read as pending, never as an error. Pending
always reports PENDING_MESSAGE, whatever message was stored with it. An
"accepted" status only counts when the verified flag was stamped with it.
"""

from src.am_common.enums import AIStatus
from src.am_listing.domain.models import Listing, StatusSnapshot

PENDING_MESSAGE = "Verification pending"

DEFAULT_MESSAGES: dict[AIStatus, str] = {
    AIStatus.ACCEPTED: "Product verified successfully!",
    AIStatus.REJECTED: "Product does not match the description.",
    AIStatus.ERROR: "An error occurred during verification.",
    AIStatus.PROCESSING: "AI is analyzing your product...",
}


def resolve_status(listing: Listing) -> StatusSnapshot:
    try:
        stored = AIStatus(listing.ai_status) if listing.ai_status else AIStatus.PENDING
    except ValueError:
        stored = AIStatus.PENDING

    if stored == AIStatus.ACCEPTED and not listing.ai_verified:
        stored = AIStatus.PENDING

    if stored == AIStatus.PENDING:
        return StatusSnapshot(
            listing_id=listing.id,
            status=AIStatus.PENDING,
            message=PENDING_MESSAGE,
            timestamp=listing.ai_verified_at,
        )
    return StatusSnapshot(
        listing_id=listing.id,
        status=stored,
        message=listing.ai_message or DEFAULT_MESSAGES[stored],
        timestamp=listing.ai_verified_at,
    )
