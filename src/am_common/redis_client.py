"""Shared Redis connection for verification status events.

Balances and prices never touch Redis; PostgreSQL is their only store.
Losing Redis only downgrades status push to polling.
"""

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from config.settings import settings

logger = logging.getLogger(__name__)

_client: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    """Return the process-wide client, creating its pool on first use."""
    global _client  # noqa: PLW0603
    if _client is None:
        _client = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            # pub/sub connections sit idle between verdicts
            health_check_interval=30,
        )
    return _client


async def redis_available() -> bool:
    try:
        client = await get_redis()
        return bool(await client.ping())
    except RedisError as exc:
        logger.warning("Redis ping failed: %s", exc)
        return False


async def close_redis() -> None:
    global _client  # noqa: PLW0603
    if _client is not None:
        await _client.aclose()
        _client = None
