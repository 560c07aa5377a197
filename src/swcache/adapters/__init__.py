"""Storage adapters for swcache."""

from contextlib import suppress

from swcache.adapters.base import AsyncCacheStorage
from swcache.adapters.memory import AsyncMemoryStorage

# Optional adapters - only available when dependencies are installed
with suppress(ImportError):
    from swcache.adapters.redis import AsyncRedisStorage

__all__ = [
    "AsyncCacheStorage",
    "AsyncMemoryStorage",
    "AsyncRedisStorage",
]
