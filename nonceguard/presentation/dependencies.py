from fastapi import Depends, HTTPException, Request, status

from nonceguard.application.nonce_engine import NonceEngine
from nonceguard.domain.config import NonceConfig
from nonceguard.domain.ports.nonce_store import NonceStorePort
from nonceguard.infrastructure.memory.session_store import InMemorySessionRegistry
from nonceguard.infrastructure.redis_cache.nonce_store import RedisNonceStore
from nonceguard.infrastructure.redis_cache.pool import get_redis
from nonceguard.settings import get_settings

# Shared by every request of this process when the memory backend is used
memory_registry = InMemorySessionRegistry()


def get_session_id(request: Request) -> str:
    session_id = request.cookies.get(get_settings().session_cookie_name)
    if not session_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="missing session"
        )
    return session_id


def get_nonce_store(session_id: str = Depends(get_session_id)) -> NonceStorePort:
    settings = get_settings()
    if settings.nonce_store_backend == "redis":
        return RedisNonceStore(
            get_redis(), session_id=session_id, key_prefix=settings.nonce_key_prefix
        )
    return memory_registry.session(session_id)


def get_nonce_config() -> NonceConfig:
    return NonceConfig.from_settings(get_settings())


def get_nonce_engine(
    config: NonceConfig = Depends(get_nonce_config),
    store: NonceStorePort = Depends(get_nonce_store),
) -> NonceEngine:
    settings = get_settings()
    return NonceEngine(
        config,
        store,
        salt_length=settings.nonce_salt_length,
        ttl_seconds=settings.nonce_ttl_seconds,
    )
