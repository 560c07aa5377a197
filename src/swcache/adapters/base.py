"""Base adapter protocol for cache storage backends."""

from typing import Protocol, runtime_checkable

from swcache.types import CacheEntry


@runtime_checkable
class AsyncCacheStorage(Protocol):
    """Async storage adapter interface.

    Entries are grouped into named generations. Every method is idempotent:
    writing a fingerprint twice keeps the last write, and deleting a
    generation that does not exist is a no-op.
    """

    async def open(self, generation: str) -> None:
        """Make sure a generation exists."""
        ...

    async def get(self, generation: str, fingerprint: str) -> CacheEntry | None:
        """Get an entry from a generation."""
        ...

    async def put(self, generation: str, fingerprint: str, entry: CacheEntry) -> None:
        """Store an entry, creating the generation if needed."""
        ...

    async def delete_generation(self, generation: str) -> bool:
        """Delete a generation and all of its entries."""
        ...

    async def list_generations(self) -> set[str]:
        """Names of every stored generation."""
        ...

    async def disconnect(self) -> None:
        """Disconnect from the storage backend."""
        ...
