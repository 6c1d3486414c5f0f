class DomainError(Exception):
    """Base class for all domain-level errors."""

    pass


class InvalidConfiguration(DomainError):
    """Secret or hash algorithm cannot be used to build or check a nonce."""

    pass


class InvalidAction(DomainError, ValueError):
    """A nonce was requested for an empty action name."""

    pass


class StoreUnavailable(DomainError):
    """The nonce store backend failed (connection lost, timeout, ...)."""

    pass
