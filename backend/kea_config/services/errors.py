"""Errors raised by the configuration store and writer."""


class KeaConfigError(Exception):
    """Base class for configuration store errors."""


class NotFound(KeaConfigError):
    """A record required by the operation does not exist."""

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} not found: {key}")


class DuplicateEntity(KeaConfigError):
    """A unique name, tag, prefix or id is already taken."""


class StorageUnavailable(KeaConfigError):
    """The store could not be reached or dropped the connection."""


class TransactionFailed(KeaConfigError):
    """Any other store error inside a transaction; the transaction was rolled back."""
