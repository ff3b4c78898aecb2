"""VerificationRelayService: sends a seller's video to the AI service and
records the verdict.

Flow per request:
  1. Validate upload (InvalidVideoError before any state change)
  2. Load listing, check caller is the seller and verdict is not terminal
  3. Store `processing`
  4. POST to the AI service (explicit timeout)
  5. Store the terminal verdict; upstream failures become `error`
  6. On `accepted`, best-effort add to the external auction service
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.am_common.enums import AIStatus
from src.am_common.errors import (
    ListingNotFoundError,
    NotListingOwnerError,
    UpstreamUnavailableError,
    UpstreamUnexpectedResponseError,
    VerificationClosedError,
)
from src.am_listing.application.status_service import VerificationStatusStore
from src.am_listing.domain.repository import ListingRepositoryProtocol
from src.am_listing.domain.status import resolve_status
from src.am_listing.infrastructure.persistence import ListingRepository
from src.am_verification.application.schemas import VerificationResult
from src.am_verification.domain.upload import VideoUpload, validate_submission
from src.am_verification.infrastructure.ai_client import VerificationClient

logger = logging.getLogger(__name__)

PROCESSING_MESSAGE = "AI is analyzing your product..."
ACCEPTED_MESSAGE = "Product verified successfully! Your product matches the description."
REJECTED_MESSAGE = "Product does not match the description. Please try again."
UNEXPECTED_FAILURE_MESSAGE = "An unexpected error occurred during verification. Please try again."

_VERDICT_MESSAGES = {
    AIStatus.ACCEPTED: ACCEPTED_MESSAGE,
    AIStatus.REJECTED: REJECTED_MESSAGE,
}


class VerificationRelayService:
    def __init__(
        self,
        listings: ListingRepositoryProtocol | None = None,
        status_store: VerificationStatusStore | None = None,
        client: VerificationClient | None = None,
        max_video_bytes: int | None = None,
    ) -> None:
        self._listings: ListingRepositoryProtocol = listings or ListingRepository()
        self._status_store = status_store or VerificationStatusStore(repo=self._listings)
        self._client = client or VerificationClient()
        self._max_video_bytes = (
            max_video_bytes if max_video_bytes is not None else settings.MAX_VIDEO_BYTES
        )

    async def verify_listing(
        self,
        db: AsyncSession,
        listing_id: str,
        seller_id: str,
        video: VideoUpload | None,
        description: str,
    ) -> VerificationResult:
        description = validate_submission(video, description, self._max_video_bytes)

        listing = await self._listings.get_by_id(db, listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        if listing.seller_id != seller_id:
            raise NotListingOwnerError(listing_id)
        current = resolve_status(listing)
        if current.is_terminal:
            raise VerificationClosedError(listing_id, current.status.value)

        await self._status_store.set_status(
            db, listing_id, AIStatus.PROCESSING, PROCESSING_MESSAGE
        )

        error: str | None = None
        try:
            verdict = await self._client.predict(video, description)
            message = _VERDICT_MESSAGES[verdict]
        except UpstreamUnexpectedResponseError as exc:
            logger.warning("Unexpected AI response for %s: %r", listing_id, exc.body[:200])
            verdict, message, error = AIStatus.ERROR, exc.message, exc.body[:200]
        except UpstreamUnavailableError as exc:
            verdict, message, error = AIStatus.ERROR, exc.message, exc.message
        except Exception:
            logger.exception("Verification relay failed for %s", listing_id)
            await self._status_store.set_status(
                db, listing_id, AIStatus.ERROR, UNEXPECTED_FAILURE_MESSAGE
            )
            raise

        snapshot = await self._status_store.set_status(db, listing_id, verdict, message)
        logger.info("Verification %s: %s", listing_id, verdict.value)

        auction_added = False
        if verdict == AIStatus.ACCEPTED:
            auction_added = await self._client.add_to_auction(video, description)

        return VerificationResult(
            product_id=listing_id,
            status=snapshot.status,
            message=snapshot.message,
            is_approved=snapshot.status == AIStatus.ACCEPTED,
            auction_added=auction_added,
            error=error,
        )
