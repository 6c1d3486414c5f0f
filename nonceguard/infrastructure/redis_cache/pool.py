from __future__ import annotations

from redis.asyncio import Redis

from nonceguard.settings import get_settings

_client: Redis | None = None


def get_redis() -> Redis:
    """Process-wide client for the Redis nonce store, created on first use."""
    global _client
    if _client is None:
        # str in, str out: stored fingerprints are compared as text
        _client = Redis.from_url(
            get_settings().redis_url, encoding="utf-8", decode_responses=True
        )
    return _client


async def close_redis() -> None:
    """Release the shared client; the next get_redis() opens a fresh one."""
    global _client
    client, _client = _client, None
    if client is not None:
        await client.aclose()
