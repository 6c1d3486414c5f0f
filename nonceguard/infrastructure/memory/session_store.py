from __future__ import annotations

import threading
import time
from typing import Callable

from nonceguard.domain.ports.nonce_store import NonceStorePort

DEFAULT_SESSION = "default"

# (value, expires_at) where expires_at is a monotonic deadline or None
_Entry = tuple[str, float | None]


class InMemorySessionRegistry:
    """
    Process-local nonce records, one mapping per session id.

    All reads and writes go through a single lock so consume() is a true
    compare-and-delete across threads. Empty sessions are dropped as soon as
    their last record goes; expired records are swept on write once the
    session count outgrows the last sweep.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._sessions: dict[str, dict[str, _Entry]] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self._sweep_threshold = 1

    def __len__(self) -> int:
        return len(self._sessions)

    def session(self, session_id: str) -> "InMemorySessionStore":
        return InMemorySessionStore(self, session_id)

    def clear(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def _drop(self, session_id: str, name: str) -> None:
        # caller holds the lock
        bucket = self._sessions[session_id]
        del bucket[name]
        if not bucket:
            del self._sessions[session_id]

    def _live(self, session_id: str, name: str) -> str | None:
        # caller holds the lock
        bucket = self._sessions.get(session_id)
        if not bucket or name not in bucket:
            return None
        value, expires_at = bucket[name]
        if expires_at is not None and self._clock() >= expires_at:
            self._drop(session_id, name)
            return None
        return value

    def _sweep(self) -> None:
        # caller holds the lock
        now = self._clock()
        for session_id in list(self._sessions):
            bucket = {
                name: entry
                for name, entry in self._sessions[session_id].items()
                if entry[1] is None or entry[1] > now
            }
            if bucket:
                self._sessions[session_id] = bucket
            else:
                del self._sessions[session_id]
        self._sweep_threshold = len(self._sessions) * 3 // 2 + 1

    def set(self, session_id: str, name: str, value: str, ttl_seconds: int) -> None:
        expires_at = self._clock() + ttl_seconds if ttl_seconds > 0 else None
        with self._lock:
            if len(self._sessions) >= self._sweep_threshold:
                self._sweep()
            self._sessions.setdefault(session_id, {})[name] = (value, expires_at)

    def get(self, session_id: str, name: str) -> str | None:
        with self._lock:
            return self._live(session_id, name)

    def delete(self, session_id: str, name: str) -> bool:
        with self._lock:
            if self._live(session_id, name) is None:
                return False
            self._drop(session_id, name)
            return True

    def consume(self, session_id: str, name: str, expected: str) -> bool:
        with self._lock:
            if self._live(session_id, name) != expected:
                return False
            self._drop(session_id, name)
            return True


class InMemorySessionStore(NonceStorePort):
    """NonceStorePort bound to one session of an InMemorySessionRegistry."""

    def __init__(
        self,
        registry: InMemorySessionRegistry | None = None,
        session_id: str = DEFAULT_SESSION,
    ) -> None:
        self._registry = registry or InMemorySessionRegistry()
        self.session_id = session_id

    async def set_key(self, name: str, value: str, ttl_seconds: int = 0) -> bool:
        self._registry.set(self.session_id, name, value, ttl_seconds)
        return True

    async def get_key(self, name: str) -> str | None:
        return self._registry.get(self.session_id, name)

    async def delete_key(self, name: str) -> bool:
        return self._registry.delete(self.session_id, name)

    async def consume_key(self, name: str, expected: str) -> bool:
        return self._registry.consume(self.session_id, name, expected)
