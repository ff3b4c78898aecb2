"""Verification status events over Redis pub/sub.

One channel per listing: "listing-status:{listing_id}". Every verdict write
publishes the new snapshot after its transaction commits; long-poll readers
subscribe and stop at the first terminal snapshot.
"""

import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

import redis.asyncio as aioredis
from redis.asyncio.client import PubSub
from redis.exceptions import RedisError

from src.am_common.enums import AIStatus
from src.am_common.redis_client import get_redis
from src.am_listing.domain.models import StatusSnapshot

logger = logging.getLogger(__name__)

CHANNEL_PREFIX = "listing-status:"


def channel_for(listing_id: str) -> str:
    return f"{CHANNEL_PREFIX}{listing_id}"


def snapshot_to_payload(snapshot: StatusSnapshot) -> dict[str, Any]:
    """Wire shape shared by the status endpoint, the event channel and the poller."""
    return {
        "status": snapshot.status.value,
        "message": snapshot.message,
        "timestamp": snapshot.timestamp.isoformat() if snapshot.timestamp else None,
        "productId": snapshot.listing_id,
    }


def snapshot_from_payload(payload: dict[str, Any]) -> StatusSnapshot:
    raw_ts = payload.get("timestamp")
    return StatusSnapshot(
        listing_id=str(payload["productId"]),
        status=AIStatus(payload["status"]),
        message=str(payload.get("message") or ""),
        timestamp=datetime.fromisoformat(raw_ts) if raw_ts else None,
    )


class StatusSubscription:
    def __init__(self, pubsub: PubSub) -> None:
        self._pubsub = pubsub

    async def next_snapshot(self, timeout: float) -> StatusSnapshot | None:
        """Next published snapshot, or None if nothing arrives within `timeout` seconds."""
        message = await self._pubsub.get_message(ignore_subscribe_messages=True, timeout=timeout)
        if message is None or message.get("type") != "message":
            return None
        try:
            return snapshot_from_payload(json.loads(message["data"]))
        except (ValueError, KeyError, TypeError):
            logger.warning("Dropping malformed status event: %r", message.get("data"))
            return None


class StatusEventBus:
    def __init__(
        self, redis_factory: Callable[[], Awaitable[aioredis.Redis]] = get_redis
    ) -> None:
        self._redis_factory = redis_factory

    async def publish(self, snapshot: StatusSnapshot) -> None:
        """Best effort: the verdict is already committed, pollers still see it."""
        try:
            redis = await self._redis_factory()
            await redis.publish(
                channel_for(snapshot.listing_id), json.dumps(snapshot_to_payload(snapshot))
            )
        except RedisError as exc:
            logger.warning(
                "Status event for %s not published: %s", snapshot.listing_id, exc
            )

    @asynccontextmanager
    async def subscribe(self, listing_id: str) -> AsyncIterator[StatusSubscription]:
        redis = await self._redis_factory()
        pubsub = redis.pubsub()
        await pubsub.subscribe(channel_for(listing_id))
        try:
            yield StatusSubscription(pubsub)
        finally:
            await pubsub.unsubscribe(channel_for(listing_id))
            await pubsub.aclose()
