"""Generation-aware cache store on top of a storage adapter."""

from __future__ import annotations

import logging

import httpx

from swcache.adapters.base import AsyncCacheStorage
from swcache.fingerprint import fingerprint
from swcache.types import CacheEntry

logger = logging.getLogger(__name__)


class GenerationHandle:
    """An opened generation."""

    __slots__ = ("_store", "name")

    def __init__(self, store: CacheStore, name: str) -> None:
        self._store = store
        self.name = name

    async def match(self, request: httpx.Request) -> httpx.Response | None:
        """Return a cached response for ``request``, if any."""
        entry = await self._store.get(self, fingerprint(request))
        if entry is None:
            return None
        return entry.to_response(request)

    async def put(self, request: httpx.Request, response: httpx.Response) -> None:
        """Store a snapshot of an already-read response under ``request``."""
        entry = CacheEntry.from_response(response, request)
        await self._store.put(self, fingerprint(request), entry)

    def __repr__(self) -> str:
        return f"GenerationHandle({self.name!r})"


class CacheStore:
    """Key-value cache grouped into named generations."""

    def __init__(self, adapter: AsyncCacheStorage) -> None:
        self._adapter = adapter

    @property
    def adapter(self) -> AsyncCacheStorage:
        return self._adapter

    def handle(self, name: str) -> GenerationHandle:
        """Handle on a generation without creating it."""
        return GenerationHandle(self, name)

    async def open(self, name: str) -> GenerationHandle:
        """Open a generation, creating it if it does not exist."""
        await self._adapter.open(name)
        return GenerationHandle(self, name)

    async def get(self, handle: GenerationHandle, key: str) -> CacheEntry | None:
        """Look up an entry by fingerprint."""
        return await self._adapter.get(handle.name, key)

    async def put(self, handle: GenerationHandle, key: str, entry: CacheEntry) -> None:
        """Store an entry, replacing any previous one for the same fingerprint."""
        await self._adapter.put(handle.name, key, entry)

    async def delete_generation(self, name: str) -> bool:
        """Delete a generation. Missing generations are a no-op."""
        deleted = await self._adapter.delete_generation(name)
        if deleted:
            logger.info("Deleted cache generation %s", name)
        return deleted

    async def list_generations(self) -> set[str]:
        """Names of every stored generation."""
        return await self._adapter.list_generations()

    async def disconnect(self) -> None:
        await self._adapter.disconnect()
