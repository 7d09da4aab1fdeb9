"""Redis connection lifecycle.

Learn: Redis is optional. When GROVE_REDIS_URL is set, the lifespan opens
one connection pool and stores it on app.state.redis; the rate limiter and
health check read it from there. When it is unset or unreachable the app
runs without rate limiting.
"""

from typing import Optional

import redis.asyncio as aioredis


async def connect_redis(url: Optional[str]) -> Optional[aioredis.Redis]:
    """Open a pool and verify it with PING. None when no URL is configured."""
    if not url:
        return None
    client = aioredis.from_url(url, encoding="utf-8", decode_responses=True)
    try:
        await client.ping()
    except Exception:
        await client.aclose()
        raise
    return client


async def close_redis(client: Optional[aioredis.Redis]) -> None:
    if client is not None:
        await client.aclose()
