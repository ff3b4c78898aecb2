"""StatusPoller: client that polls GET /api/product-status/{id} until the
verdict is terminal.

Polls at a flat cadence, only while the status is pending/processing, and
stops on the first terminal status. Fetch failures and non-200 responses
are logged and skipped; the next tick tries again.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

import httpx

from config.settings import settings
from src.am_listing.application.schemas import ProductStatusResponse

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[ProductStatusResponse], Awaitable[None] | None]


class StatusPoller:
    def __init__(
        self,
        base_url: str,
        interval: float | None = None,
        request_timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._interval = (
            interval if interval is not None else settings.STATUS_POLL_INTERVAL_SECONDS
        )
        self._request_timeout = request_timeout
        self._transport = transport
        self._sleep = sleep

    async def fetch(self, client: httpx.AsyncClient, listing_id: str) -> ProductStatusResponse | None:
        """One GET; None when the request fails or the response is not usable."""
        try:
            resp = await client.get(f"/api/product-status/{listing_id}")
        except httpx.HTTPError as exc:
            logger.debug("Status fetch failed for %s: %s", listing_id, exc)
            return None
        if resp.status_code != 200:
            logger.debug("Status fetch for %s returned %d", listing_id, resp.status_code)
            return None
        try:
            return ProductStatusResponse.model_validate(resp.json())
        except ValueError as exc:
            logger.debug("Unreadable status body for %s: %s", listing_id, exc)
            return None

    async def poll(
        self,
        listing_id: str,
        on_update: UpdateCallback | None = None,
        max_attempts: int | None = None,
    ) -> ProductStatusResponse | None:
        """Poll until a terminal status is observed.

        Returns the terminal status, or the last one seen (None if nothing
        was ever read) when `max_attempts` runs out.
        """
        latest: ProductStatusResponse | None = None
        attempts = 0
        async with httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._request_timeout,
            transport=self._transport,
        ) as client:
            while max_attempts is None or attempts < max_attempts:
                if attempts:
                    await self._sleep(self._interval)
                attempts += 1
                status = await self.fetch(client, listing_id)
                if status is None:
                    continue
                latest = status
                if on_update is not None:
                    result = on_update(status)
                    if asyncio.iscoroutine(result):
                        await result
                if status.status.is_terminal:
                    logger.info("Polling stopped for %s: %s", listing_id, status.status.value)
                    return status
        return latest
