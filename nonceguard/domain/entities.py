from __future__ import annotations

from dataclasses import dataclass

DELIMITER = ":"


@dataclass(frozen=True)
class NonceToken:
    salt: str
    action: str
    expiry: int
    digest: str

    def serialize(self) -> str:
        return DELIMITER.join((self.salt, self.action, str(self.expiry), self.digest))

    @classmethod
    def parse(cls, raw: str) -> NonceToken | None:
        """
        Split a wire token into its four fields.

        Returns None when the field count is not exactly 4. A non-numeric
        expiry becomes 0, which any expiry check rejects.
        """
        parts = raw.split(DELIMITER)
        if len(parts) != 4:
            return None
        salt, action, expiry_raw, digest = parts
        try:
            expiry = int(expiry_raw)
        except ValueError:
            expiry = 0
        return cls(salt=salt, action=action, expiry=expiry, digest=digest)

    def is_expired(self, now: int) -> bool:
        # the expiry second itself is still valid
        return now > self.expiry
