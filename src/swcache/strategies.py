"""Network-first and cache-first resolution.

Provides:
- FallbackPolicy: which failures make network-first fall back to cache
- StrategyExecutor: runs a strategy for a classified request
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import httpx

from swcache.errors import StorageError
from swcache.fingerprint import fingerprint
from swcache.registry import GenerationRegistry
from swcache.store import CacheStore
from swcache.types import (
    SOURCE_EXTENSION,
    CacheEntry,
    Classification,
    GenerationKind,
    Strategy,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FallbackPolicy:
    """When network-first serves from cache instead of the network.

    By default only transport failures fall back. With
    ``fallback_on_http_error`` a non-2xx response is also replaced by a
    cached copy when one exists.
    """

    transport_errors: tuple[type[BaseException], ...] = (httpx.TransportError,)
    fallback_on_http_error: bool = False


class StrategyExecutor:
    """Resolves requests against the network and the cache store."""

    def __init__(
        self,
        store: CacheStore,
        registry: GenerationRegistry,
        client: httpx.AsyncClient,
        *,
        policy: FallbackPolicy | None = None,
    ) -> None:
        self._store = store
        self._registry = registry
        self._client = client
        self._policy = policy or FallbackPolicy()
        self._background_tasks: set[asyncio.Task[None]] = set()

    @property
    def policy(self) -> FallbackPolicy:
        return self._policy

    @property
    def pending_writes(self) -> int:
        """Number of cache writes that have not finished yet."""
        return len(self._background_tasks)

    async def _send(self, request: httpx.Request) -> httpx.Response:
        """Make exactly one network attempt and read the whole body."""
        response = await self._client.send(request)
        await response.aread()
        response.extensions[SOURCE_EXTENSION] = "network"
        return response

    async def _lookup(
        self, kind: GenerationKind, request: httpx.Request
    ) -> httpx.Response | None:
        """Cached response for ``request``; storage failures count as a miss."""
        handle = self._store.handle(self._registry.name_for(kind))
        try:
            return await handle.match(request)
        except StorageError:
            logger.warning(
                "Cache lookup failed in %s for %s, treating as miss",
                handle.name,
                fingerprint(request),
                exc_info=True,
            )
            return None

    def _write_through(
        self,
        kind: GenerationKind,
        request: httpx.Request,
        response: httpx.Response,
    ) -> None:
        """Store a copy of a successful response in a background task."""
        if not response.is_success:
            return
        # Snapshot now so the caller-facing response stays untouched
        entry = CacheEntry.from_response(response, request)
        handle = self._store.handle(self._registry.name_for(kind))
        key = fingerprint(request)

        async def write() -> None:
            try:
                await self._store.put(handle, key, entry)
            except StorageError:
                logger.warning(
                    "Cache write failed in %s for %s", handle.name, key, exc_info=True
                )

        task = asyncio.create_task(write())
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def network_first(self, request: httpx.Request) -> httpx.Response:
        """Try the network, fall back to the dynamic generation on failure."""
        try:
            response = await self._send(request)
        except self._policy.transport_errors:
            cached = await self._lookup(GenerationKind.DYNAMIC, request)
            if cached is None:
                raise
            logger.warning(
                "Network failed for %s, serving cached response", fingerprint(request)
            )
            return cached

        if self._policy.fallback_on_http_error and not response.is_success:
            cached = await self._lookup(GenerationKind.DYNAMIC, request)
            if cached is not None:
                logger.warning(
                    "Network returned %s for %s, serving cached response",
                    response.status_code,
                    fingerprint(request),
                )
                return cached
            return response

        self._write_through(GenerationKind.DYNAMIC, request, response)
        return response

    async def cache_first(self, request: httpx.Request) -> httpx.Response:
        """Serve from the static generation, hitting the network only on a miss."""
        cached = await self._lookup(GenerationKind.STATIC, request)
        if cached is not None:
            logger.debug("Cache hit for %s", fingerprint(request))
            return cached

        try:
            response = await self._send(request)
        except self._policy.transport_errors:
            logger.error("Fetch failed for %s", fingerprint(request))
            raise
        self._write_through(GenerationKind.STATIC, request, response)
        return response

    async def passthrough(self, request: httpx.Request) -> httpx.Response:
        """Send straight to the network with no caching."""
        return await self._send(request)

    async def execute(
        self, request: httpx.Request, classification: Classification
    ) -> httpx.Response:
        """Run the strategy a request was classified with."""
        logger.debug(
            "%s via %s", fingerprint(request), classification.strategy.value
        )
        if classification.strategy is Strategy.NETWORK_FIRST:
            return await self.network_first(request)
        if classification.strategy is Strategy.CACHE_FIRST:
            return await self.cache_first(request)
        return await self.passthrough(request)

    async def drain(self) -> None:
        """Wait for every pending cache write to finish."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks))
