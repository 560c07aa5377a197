"""Exceptions raised by swcache."""


class SwCacheError(Exception):
    """Base class for all swcache errors."""


class StorageError(SwCacheError):
    """The cache backend failed to read or write."""


class StorageQuotaExceeded(StorageError):
    """The cache backend has no room for another entry."""


class ProvisioningError(SwCacheError):
    """A shell asset could not be fetched during install."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to provision {path!r}: {reason}")
        self.path = path
        self.reason = reason


class LifecycleError(SwCacheError):
    """A lifecycle phase was invoked from the wrong state."""
