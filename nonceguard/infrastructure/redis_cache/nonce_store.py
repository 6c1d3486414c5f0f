from __future__ import annotations

from redis.asyncio import Redis
from redis.exceptions import RedisError

from nonceguard.domain.errors import StoreUnavailable
from nonceguard.domain.ports.nonce_store import NonceStorePort


_LUA_CONSUME = """
-- KEYS[1]: nonce key
-- ARGV[1]: expected fingerprint
local cur = redis.call('GET', KEYS[1])
if not cur then
  return 0
end
if cur ~= ARGV[1] then
  return 0
end
redis.call('DEL', KEYS[1])
return 1
"""


class RedisNonceStore(NonceStorePort):
    def __init__(
        self, redis: Redis, *, session_id: str, key_prefix: str = "nonce:"
    ) -> None:
        self._redis = redis
        self._prefix = f"{key_prefix}{session_id}:"

    def _key(self, name: str) -> str:
        return f"{self._prefix}{name}"

    async def set_key(self, name: str, value: str, ttl_seconds: int = 0) -> bool:
        try:
            res = await self._redis.set(
                self._key(name), value, ex=ttl_seconds if ttl_seconds > 0 else None
            )
        except RedisError as exc:
            raise StoreUnavailable("nonce store write failed") from exc
        return bool(res)

    async def get_key(self, name: str) -> str | None:
        try:
            return await self._redis.get(self._key(name))
        except RedisError as exc:
            raise StoreUnavailable("nonce store read failed") from exc

    async def delete_key(self, name: str) -> bool:
        try:
            return int(await self._redis.delete(self._key(name))) == 1
        except RedisError as exc:
            raise StoreUnavailable("nonce store delete failed") from exc

    async def consume_key(self, name: str, expected: str) -> bool:
        try:
            res = await self._redis.eval(_LUA_CONSUME, 1, self._key(name), expected)
        except RedisError as exc:
            raise StoreUnavailable("nonce store consume failed") from exc
        return int(res) == 1
