from typing import Protocol


class NonceStorePort(Protocol):
    """
    Ephemeral key/value store holding one fingerprint per action name.

    Keys are scoped to a single session. ttl_seconds=0 means the backend's
    default lifetime. Backends raise StoreUnavailable on I/O failure.
    """

    async def set_key(self, name: str, value: str, ttl_seconds: int = 0) -> bool:
        """Store/replace the value for name."""

    async def get_key(self, name: str) -> str | None:
        """Current value, or None if absent or expired."""

    async def delete_key(self, name: str) -> bool:
        """Remove name; False if there was nothing to remove."""

    async def consume_key(self, name: str, expected: str) -> bool:
        """Atomically delete name only if its value equals expected."""
