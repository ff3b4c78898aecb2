"""VerificationStatusStore: holds and transitions a listing's AI verdict.

set_status trusts its caller (the AI relay): any status may be written over
any other. Each write is its own unit of work and is published on the
listing's event channel after commit.
"""

import asyncio
import logging
from datetime import timedelta

from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.am_common.database import unit_of_work
from src.am_common.datetime_utils import utc_now
from src.am_common.enums import AIStatus
from src.am_common.errors import InvalidInputError, ListingNotFoundError
from src.am_listing.domain.models import StatusSnapshot
from src.am_listing.domain.repository import ListingRepositoryProtocol
from src.am_listing.domain.status import resolve_status
from src.am_listing.infrastructure.persistence import ListingRepository
from src.am_listing.infrastructure.status_events import StatusEventBus

logger = logging.getLogger(__name__)

STALE_MESSAGE = "Verification did not complete in time. Please list the product again."
MAX_WAIT_SECONDS = 60.0


def _require_id(listing_id: str) -> str:
    listing_id = (listing_id or "").strip()
    if not listing_id:
        raise InvalidInputError("Product ID is required")
    return listing_id


class VerificationStatusStore:
    def __init__(
        self,
        repo: ListingRepositoryProtocol | None = None,
        events: StatusEventBus | None = None,
    ) -> None:
        self._repo: ListingRepositoryProtocol = repo or ListingRepository()
        self._events = events or StatusEventBus()

    async def set_status(
        self,
        db: AsyncSession,
        listing_id: str,
        status: AIStatus,
        message: str | None = None,
    ) -> StatusSnapshot:
        listing_id = _require_id(listing_id)
        async with unit_of_work(db):
            listing = await self._repo.set_ai_status(db, listing_id, status, message)
            if listing is None:
                raise ListingNotFoundError(listing_id)
        snapshot = resolve_status(listing)
        logger.info("AI status %s → %s (%s)", listing_id, status.value, message or "-")
        await self._events.publish(snapshot)
        return snapshot

    async def get_status(self, db: AsyncSession, listing_id: str) -> StatusSnapshot:
        listing_id = _require_id(listing_id)
        listing = await self._repo.get_by_id(db, listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        return resolve_status(listing)

    async def wait_for_terminal(
        self, db: AsyncSession, listing_id: str, timeout: float
    ) -> StatusSnapshot:
        """Block until a terminal verdict is published or `timeout` elapses.

        Subscribes before reading the stored status so a verdict written in
        between is never missed. Returns the latest snapshot either way.
        """
        listing_id = _require_id(listing_id)
        timeout = max(0.0, min(timeout, MAX_WAIT_SECONDS))
        loop = asyncio.get_running_loop()
        try:
            async with self._events.subscribe(listing_id) as subscription:
                snapshot = await self.get_status(db, listing_id)
                # Hand the pooled connection back for the duration of the wait
                await db.close()
                deadline = loop.time() + timeout
                while not snapshot.is_terminal:
                    remaining = deadline - loop.time()
                    if remaining <= 0:
                        break
                    event = await subscription.next_snapshot(remaining)
                    if event is not None:
                        snapshot = event
        except RedisError as exc:
            logger.warning("Status wait for %s fell back to a plain read: %s", listing_id, exc)
            return await self.get_status(db, listing_id)
        return snapshot

    async def sweep_stale(
        self, db: AsyncSession, older_than_seconds: int | None = None
    ) -> list[str]:
        """Move verifications stuck in pending/processing to error."""
        age = older_than_seconds if older_than_seconds is not None else settings.VERIFICATION_STALE_SECONDS
        cutoff = utc_now() - timedelta(seconds=age)
        async with unit_of_work(db):
            expired = await self._repo.expire_stale_verifications(db, cutoff, STALE_MESSAGE)
        for listing in expired:
            await self._events.publish(resolve_status(listing))
        if expired:
            logger.info("Swept %d stale verifications older than %ss", len(expired), age)
        return [listing.id for listing in expired]
