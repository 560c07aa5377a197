"""swcache - Offline request cache with network-first and cache-first strategies."""

from contextlib import suppress

# Adapters
from swcache.adapters import AsyncCacheStorage, AsyncMemoryStorage
from swcache.classifier import RequestClassifier
from swcache.config import WorkerConfig

# Errors
from swcache.errors import (
    LifecycleError,
    ProvisioningError,
    StorageError,
    StorageQuotaExceeded,
    SwCacheError,
)
from swcache.fingerprint import fingerprint
from swcache.host import WorkerHost
from swcache.lifecycle import LifecycleController, LifecycleState
from swcache.notifications import (
    Notification,
    NotificationDispatcher,
    Notifier,
    WindowClient,
    WindowClients,
)
from swcache.registry import GenerationRegistry
from swcache.store import CacheStore, GenerationHandle
from swcache.strategies import FallbackPolicy, StrategyExecutor
from swcache.transport import InterceptingTransport

# Core types
from swcache.types import (
    CacheEntry,
    Classification,
    Generation,
    GenerationKind,
    Strategy,
)

# Optional adapter imports - only available when dependencies are installed
with suppress(ImportError):
    from swcache.adapters import AsyncRedisStorage

__version__ = "0.1.0"

__all__ = [
    "AsyncCacheStorage",
    "AsyncMemoryStorage",
    "AsyncRedisStorage",
    "CacheEntry",
    "CacheStore",
    "Classification",
    "FallbackPolicy",
    "Generation",
    "GenerationHandle",
    "GenerationKind",
    "GenerationRegistry",
    "InterceptingTransport",
    "LifecycleController",
    "LifecycleError",
    "LifecycleState",
    "Notification",
    "NotificationDispatcher",
    "Notifier",
    "ProvisioningError",
    "RequestClassifier",
    "StorageError",
    "StorageQuotaExceeded",
    "Strategy",
    "StrategyExecutor",
    "SwCacheError",
    "WindowClient",
    "WindowClients",
    "WorkerConfig",
    "WorkerHost",
    "fingerprint",
]
