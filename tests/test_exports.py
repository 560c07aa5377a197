"""Tests for package exports."""


def test_exports_available() -> None:
    """Test that the public API is importable from the package root."""
    from swcache import (
        AsyncMemoryStorage,
        CacheStore,
        FallbackPolicy,
        GenerationRegistry,
        InterceptingTransport,
        LifecycleController,
        RequestClassifier,
        StrategyExecutor,
        WorkerConfig,
        WorkerHost,
    )

    # Just verify they're importable
    assert AsyncMemoryStorage is not None
    assert CacheStore is not None
    assert FallbackPolicy is not None
    assert GenerationRegistry is not None
    assert InterceptingTransport is not None
    assert LifecycleController is not None
    assert RequestClassifier is not None
    assert StrategyExecutor is not None
    assert WorkerConfig is not None
    assert WorkerHost is not None


def test_memory_storage_satisfies_protocol() -> None:
    from swcache import AsyncCacheStorage, AsyncMemoryStorage

    assert isinstance(AsyncMemoryStorage(), AsyncCacheStorage)
