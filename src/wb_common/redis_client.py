"""Redis client factory — used for pool/settlement event fan-out only.

Pools, stakes and payouts are never read from Redis; PostgreSQL is the
source of truth and Redis only carries notifications to realtime clients.
"""

import redis.asyncio as aioredis

from config.settings import settings

_redis_pool: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    """Get or create the Redis connection pool."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is None:
        _redis_pool = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
        )
    return _redis_pool


async def close_redis() -> None:
    """Close the Redis connection pool."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None


def market_channel(market_id: str) -> str:
    """Pub/sub channel carrying events for one market."""
    return f"{settings.POOL_EVENTS_CHANNEL_PREFIX}:{market_id}"
