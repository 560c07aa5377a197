"""In-memory storage adapter."""

import asyncio

from swcache.errors import StorageQuotaExceeded
from swcache.types import CacheEntry


class AsyncMemoryStorage:
    """Async in-memory storage adapter with an optional entry quota."""

    def __init__(self, max_entries: int | None = None) -> None:
        self._generations: dict[str, dict[str, CacheEntry]] = {}
        self._max_entries = max_entries
        self._lock = asyncio.Lock()

    def _entry_count(self) -> int:
        return sum(len(entries) for entries in self._generations.values())

    async def open(self, generation: str) -> None:
        """Make sure a generation exists."""
        async with self._lock:
            self._generations.setdefault(generation, {})

    async def get(self, generation: str, fingerprint: str) -> CacheEntry | None:
        """Get an entry from a generation."""
        async with self._lock:
            entries = self._generations.get(generation)
            if entries is None:
                return None
            return entries.get(fingerprint)

    async def put(self, generation: str, fingerprint: str, entry: CacheEntry) -> None:
        """Store an entry, creating the generation if needed."""
        async with self._lock:
            entries = self._generations.get(generation, {})
            if (
                self._max_entries is not None
                and fingerprint not in entries
                and self._entry_count() >= self._max_entries
            ):
                raise StorageQuotaExceeded(
                    f"Quota of {self._max_entries} entries exceeded"
                )
            self._generations.setdefault(generation, entries)[fingerprint] = entry

    async def delete_generation(self, generation: str) -> bool:
        """Delete a generation and all of its entries."""
        async with self._lock:
            return self._generations.pop(generation, None) is not None

    async def list_generations(self) -> set[str]:
        """Names of every stored generation."""
        async with self._lock:
            return set(self._generations)

    async def disconnect(self) -> None:
        """Disconnect from the storage backend (no-op for memory)."""
        pass
