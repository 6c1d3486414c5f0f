from __future__ import annotations

import hashlib
import hmac
import secrets
import string

from nonceguard.domain.entities import DELIMITER
from nonceguard.domain.errors import InvalidConfiguration

# printable, no whitespace, never the token delimiter
SALT_ALPHABET = "".join(
    c
    for c in string.ascii_letters + string.digits + string.punctuation
    if c != DELIMITER
)

MIN_SECRET_LENGTH = 10


def generate_salt(length: int = 16) -> str:
    """Random salt from a CSPRNG, safe to embed in a token."""
    return "".join(secrets.choice(SALT_ALPHABET) for _ in range(length))


def validate_secret(secret: object) -> str:
    if not isinstance(secret, str) or len(secret) < MIN_SECRET_LENGTH:
        raise InvalidConfiguration("A valid nonce secret is required")
    return secret


def compute_digest(algorithm: str, secret: str, salt: str, expiry: int) -> str:
    """
    Hex digest of secret || salt || expiry with the configured algorithm.
    """
    try:
        h = hashlib.new(algorithm)
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"Unsupported hash algorithm: {algorithm!r}") from exc
    h.update(f"{secret}{salt}{expiry}".encode("utf-8"))
    try:
        return h.hexdigest()
    except TypeError as exc:
        # variable-length digests (shake_*) need an explicit size
        raise InvalidConfiguration(f"Unsupported hash algorithm: {algorithm!r}") from exc


def fingerprint(token: str) -> str:
    """Fast checksum of a full token, stored in place of the token itself."""
    return hashlib.md5(token.encode("utf-8"), usedforsecurity=False).hexdigest()


def secure_compare(a: str, b: str) -> bool:
    """Constant-time equality of two strings, including non-ASCII ones."""
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))
