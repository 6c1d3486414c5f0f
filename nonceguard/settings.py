from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    log_level: str = "INFO"

    # Infra
    redis_url: str = "redis://redis:6379/0"

    # Nonce engine (None -> built-in defaults of NonceConfig)
    random_salt: str | None = None
    token_hasher_algo: str | None = None
    nonce_salt_length: int = 16
    nonce_ttl_seconds: int = 600

    # Store
    nonce_store_backend: Literal["memory", "redis"] = "memory"
    nonce_key_prefix: str = "nonce:"

    # HTTP
    session_cookie_name: str = "session_id"
    nonce_header_name: str = "X-Nonce"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
