"""Tests for memory storage adapter."""

import pytest

from swcache import AsyncMemoryStorage, CacheEntry, StorageQuotaExceeded


def make_entry(content: bytes = b"body") -> CacheEntry:
    return CacheEntry(
        method="GET",
        url="http://app.test/",
        status_code=200,
        headers=[("content-type", "text/plain")],
        content=content,
        stored_at=1000,
    )


class TestAsyncMemoryStorage:
    """Tests for AsyncMemoryStorage."""

    async def test_get_nonexistent_returns_none(
        self, storage: AsyncMemoryStorage
    ) -> None:
        """Test that missing generations and keys return None."""
        assert await storage.get("static-v1", "GET http://app.test/") is None
        await storage.open("static-v1")
        assert await storage.get("static-v1", "GET http://app.test/") is None

    async def test_put_and_get(self, storage: AsyncMemoryStorage) -> None:
        """Test storing and reading back an entry."""
        await storage.put("static-v1", "GET http://app.test/", make_entry())
        result = await storage.get("static-v1", "GET http://app.test/")
        assert result is not None
        assert result.content == b"body"

    async def test_put_replaces_previous_entry(
        self, storage: AsyncMemoryStorage
    ) -> None:
        """Test that the last write for a fingerprint wins."""
        await storage.put("dynamic-v1", "GET /a", make_entry(b"one"))
        await storage.put("dynamic-v1", "GET /a", make_entry(b"two"))
        result = await storage.get("dynamic-v1", "GET /a")
        assert result is not None
        assert result.content == b"two"

    async def test_generations_are_isolated(
        self, storage: AsyncMemoryStorage
    ) -> None:
        """Test that the same fingerprint in two generations is independent."""
        await storage.put("static-v1", "GET /a", make_entry(b"static"))
        assert await storage.get("dynamic-v1", "GET /a") is None

    async def test_put_creates_generation_lazily(
        self, storage: AsyncMemoryStorage
    ) -> None:
        """Test that writing into an unopened generation creates it."""
        await storage.put("dynamic-v1", "GET /a", make_entry())
        assert await storage.list_generations() == {"dynamic-v1"}

    async def test_delete_generation(self, storage: AsyncMemoryStorage) -> None:
        """Test deleting a generation removes all its entries."""
        await storage.put("static-v1", "GET /a", make_entry())
        await storage.put("static-v1", "GET /b", make_entry())
        assert await storage.delete_generation("static-v1") is True
        assert await storage.list_generations() == set()
        assert await storage.get("static-v1", "GET /a") is None

    async def test_delete_missing_generation_is_noop(
        self, storage: AsyncMemoryStorage
    ) -> None:
        """Test that deleting an unknown generation is not an error."""
        assert await storage.delete_generation("nope") is False

    async def test_quota_exceeded(self) -> None:
        """Test that writes beyond the quota are rejected."""
        storage = AsyncMemoryStorage(max_entries=2)
        await storage.put("g", "GET /a", make_entry())
        await storage.put("g", "GET /b", make_entry())

        with pytest.raises(StorageQuotaExceeded):
            await storage.put("g", "GET /c", make_entry())

        # Overwriting an existing fingerprint needs no extra room
        await storage.put("g", "GET /a", make_entry(b"new"))
        result = await storage.get("g", "GET /a")
        assert result is not None
        assert result.content == b"new"
