from __future__ import annotations

import logging
import time
from typing import Callable

import nonceguard.domain.services as domain_services
from nonceguard.domain.config import RANDOM_SALT, TOKEN_HASHER_ALGO, NonceConfig
from nonceguard.domain.entities import DELIMITER, NonceToken
from nonceguard.domain.errors import InvalidAction
from nonceguard.domain.ports.nonce_store import NonceStorePort

logger = logging.getLogger(__name__)


class NonceEngine:
    """
    Issues and verifies single-use nonces bound to an action name.

    A nonce is `salt:action:expiry:digest` where digest = H(secret || salt ||
    expiry). The store keeps one fingerprint per action, so issuing a new
    nonce for an action invalidates the previous one, and a successful
    verify consumes it.
    """

    def __init__(
        self,
        config: NonceConfig,
        store: NonceStorePort | None = None,
        *,
        salt_length: int = 16,
        ttl_seconds: int = 600,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if store is None:
            from nonceguard.infrastructure.memory.session_store import (
                InMemorySessionStore,
            )

            store = InMemorySessionStore()
        self.config = config
        self.store = store
        self.salt_length = salt_length
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def _now(self) -> int:
        return int(self._clock())

    def _secret(self) -> str:
        secret = domain_services.validate_secret(self.config.get_config(RANDOM_SALT))
        if self.config.is_default(RANDOM_SALT):
            logger.warning("nonce secret is the built-in default; set RANDOM_SALT")
        return secret

    def _digest(self, secret: str, salt: str, expiry: int) -> str:
        return domain_services.compute_digest(
            self.config.get_config(TOKEN_HASHER_ALGO), secret, salt, expiry
        )

    async def create(
        self,
        action: str,
        salt_length: int | None = None,
        ttl_seconds: int | None = None,
    ) -> str:
        """
        Issue a nonce for action, replacing any outstanding one.

        salt_length and ttl_seconds default to the engine's own settings.
        Raises InvalidAction, InvalidConfiguration or StoreUnavailable.
        """
        if salt_length is None:
            salt_length = self.salt_length
        if ttl_seconds is None:
            ttl_seconds = self.ttl_seconds
        if not action:
            raise InvalidAction("A non-empty action is required")
        if DELIMITER in action:
            raise InvalidAction(f"Action may not contain {DELIMITER!r}")
        # fail on bad config before generating anything
        secret = self._secret()

        salt = self.generate_salt(salt_length)
        expiry = self._now() + int(ttl_seconds)
        digest = self._digest(secret, salt, expiry)
        token = NonceToken(
            salt=salt, action=action, expiry=expiry, digest=digest
        ).serialize()

        await self.store.set_key(
            action, domain_services.fingerprint(token), max(int(ttl_seconds), 0)
        )
        logger.debug("nonce issued", extra={"action": action, "expiry": expiry})
        return token

    async def verify(self, token: str, action: str) -> bool:
        """
        True if token was issued for action, is unexpired and unused; the
        record is consumed on success. Every rejection is a plain False.

        Raises InvalidConfiguration if the secret or hash algorithm has become
        unusable since issue, and StoreUnavailable if the store fails, so
        infrastructure problems are never reported as a bad token.
        """
        parsed = NonceToken.parse(token)
        if parsed is None:
            return self._reject(action, "malformed")
        if parsed.action != action:
            return self._reject(action, "action mismatch")
        if parsed.is_expired(self._now()):
            return self._reject(action, "expired")

        stored = await self.store.get_key(action)
        if not stored:
            return self._reject(action, "not issued or already consumed")

        expected_fp = domain_services.fingerprint(token)
        if not domain_services.secure_compare(stored, expected_fp):
            return self._reject(action, "superseded")

        expected_digest = self._digest(self._secret(), parsed.salt, parsed.expiry)
        if not domain_services.secure_compare(expected_digest, parsed.digest):
            return self._reject(action, "digest mismatch")

        # compare-and-delete: a concurrent verify of the same nonce loses here
        if not await self.store.consume_key(action, expected_fp):
            return self._reject(action, "consumed concurrently")
        logger.debug("nonce verified", extra={"action": action})
        return True

    async def delete(self, action: str) -> bool:
        return await self.store.delete_key(action)

    @staticmethod
    def generate_salt(length: int = 16) -> str:
        return domain_services.generate_salt(length)

    @staticmethod
    def _reject(action: str, reason: str) -> bool:
        logger.debug("nonce rejected", extra={"action": action, "reason": reason})
        return False
