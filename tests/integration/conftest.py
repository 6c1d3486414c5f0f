# tests/integration/conftest.py
import os

import pytest
import pytest_asyncio
from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError


@pytest_asyncio.fixture
async def redis_client():
    url = os.environ.get("REDIS_URL", "redis://redis:6379/0")
    r = Redis.from_url(url, encoding="utf-8", decode_responses=True)
    try:
        await r.ping()
    except (RedisConnectionError, OSError):
        await r.aclose()
        pytest.skip(f"redis not reachable at {url}")
    try:
        yield r
    finally:
        await r.aclose()
