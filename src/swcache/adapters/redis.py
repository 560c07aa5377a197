"""Redis storage adapter."""

from __future__ import annotations

import base64
import json
from typing import Any

import redis.exceptions

from swcache.errors import StorageError
from swcache.types import CacheEntry


def _serialize_entry(entry: CacheEntry) -> str:
    """Serialize a cache entry to JSON."""
    return json.dumps(
        {
            "method": entry.method,
            "url": entry.url,
            "status_code": entry.status_code,
            "headers": [list(header) for header in entry.headers],
            "content": base64.b64encode(entry.content).decode("ascii"),
            "stored_at": entry.stored_at,
        }
    )


def _deserialize_entry(data: bytes | str) -> CacheEntry:
    """Deserialize JSON to a cache entry."""
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    obj = json.loads(data)
    return CacheEntry(
        method=obj["method"],
        url=obj["url"],
        status_code=obj["status_code"],
        headers=[(name, value) for name, value in obj["headers"]],
        content=base64.b64decode(obj["content"]),
        stored_at=obj["stored_at"],
    )


class AsyncRedisStorage:
    """Async Redis storage adapter.

    Each generation is a hash keyed by fingerprint; the names of all
    generations are kept in a separate set so they can be listed without
    scanning the keyspace.
    """

    def __init__(
        self,
        client: Any,  # redis.asyncio.Redis
        *,
        prefix: str = "swcache",
    ) -> None:
        self._client = client
        self._prefix = prefix

    def _generations_key(self) -> str:
        """Redis key of the set of generation names."""
        return f"{self._prefix}:generations"

    def _generation_key(self, generation: str) -> str:
        """Redis key of the hash holding a generation's entries."""
        return f"{self._prefix}:gen:{generation}"

    async def open(self, generation: str) -> None:
        """Make sure a generation exists."""
        try:
            await self._client.sadd(self._generations_key(), generation)
        except redis.exceptions.RedisError as e:
            raise StorageError(f"Failed to open generation {generation!r}") from e

    async def get(self, generation: str, fingerprint: str) -> CacheEntry | None:
        """Get an entry from a generation."""
        try:
            data = await self._client.hget(
                self._generation_key(generation), fingerprint
            )
        except redis.exceptions.RedisError as e:
            raise StorageError(f"Failed to read {fingerprint!r}") from e
        if data is None:
            return None
        try:
            return _deserialize_entry(data)
        except (ValueError, KeyError) as e:
            raise StorageError(f"Corrupt entry for {fingerprint!r}") from e

    async def put(self, generation: str, fingerprint: str, entry: CacheEntry) -> None:
        """Store an entry, creating the generation if needed."""
        try:
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.sadd(self._generations_key(), generation)
                pipe.hset(
                    self._generation_key(generation),
                    fingerprint,
                    _serialize_entry(entry),
                )
                await pipe.execute()
        except redis.exceptions.RedisError as e:
            raise StorageError(f"Failed to write {fingerprint!r}") from e

    async def delete_generation(self, generation: str) -> bool:
        """Delete a generation and all of its entries."""
        try:
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.srem(self._generations_key(), generation)
                pipe.delete(self._generation_key(generation))
                removed, _ = await pipe.execute()
        except redis.exceptions.RedisError as e:
            raise StorageError(f"Failed to delete generation {generation!r}") from e
        return bool(removed)

    async def list_generations(self) -> set[str]:
        """Names of every stored generation."""
        try:
            members = await self._client.smembers(self._generations_key())
        except redis.exceptions.RedisError as e:
            raise StorageError("Failed to list generations") from e
        return {
            member.decode("utf-8") if isinstance(member, bytes) else member
            for member in members
        }

    async def disconnect(self) -> None:
        """Close the Redis connection."""
        await self._client.aclose()
