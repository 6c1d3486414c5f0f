from __future__ import annotations

from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from nonceguard.settings import Settings


RANDOM_SALT = "RANDOM_SALT"
TOKEN_HASHER_ALGO = "TOKEN_HASHER_ALGO"

DEFAULTS: dict[str, Any] = {
    # shared fallback secret; deployments are expected to override it
    RANDOM_SALT: "HI5CTp$94deNÊBCUqùI£Qx63Z8P$T&^_z`dy",
    TOKEN_HASHER_ALGO: "sha512",
}


class NonceConfig:
    """
    Named configuration values for the nonce engine.

    Overrides set with set_config() win over the built-in DEFAULTS; unknown
    names resolve to None. Values are not validated here, the engine checks
    them when it uses them.
    """

    def __init__(self, overrides: dict[str, Any] | None = None) -> None:
        self._overrides: dict[str, Any] = dict(overrides or {})

    @classmethod
    def from_settings(cls, settings: "Settings") -> "NonceConfig":
        config = cls()
        if settings.random_salt is not None:
            config.set_config(RANDOM_SALT, settings.random_salt)
        if settings.token_hasher_algo is not None:
            config.set_config(TOKEN_HASHER_ALGO, settings.token_hasher_algo)
        return config

    def set_config(self, name: str, value: Any) -> "NonceConfig":
        self._overrides[name] = value
        return self

    def get_config(self, name: str) -> Any:
        if name in self._overrides:
            return self._overrides[name]
        return DEFAULTS.get(name)

    def is_default(self, name: str) -> bool:
        return name not in self._overrides and name in DEFAULTS
