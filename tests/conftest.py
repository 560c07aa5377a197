"""Shared pytest fixtures."""

from collections.abc import AsyncIterator

import httpx
import pytest

from swcache import (
    AsyncMemoryStorage,
    CacheStore,
    GenerationRegistry,
    Notification,
    WorkerConfig,
)

APP = "http://app.test"


class RecordingNotifier:
    """Notifier that remembers what it was asked to show."""

    def __init__(self) -> None:
        self.shown: list[Notification] = []

    async def show(self, notification: Notification) -> None:
        self.shown.append(notification)


class FakeWindow:
    def __init__(self, url: str) -> None:
        self.url = url
        self.focused = False

    async def focus(self) -> None:
        self.focused = True


class FakeWindows:
    """In-memory set of application windows."""

    def __init__(self, *urls: str) -> None:
        self.windows = [FakeWindow(url) for url in urls]
        self.opened: list[str] = []

    def add(self, url: str) -> FakeWindow:
        window = FakeWindow(url)
        self.windows.append(window)
        return window

    async def list_windows(self) -> list[FakeWindow]:
        return list(self.windows)

    async def open_window(self, url: str) -> FakeWindow:
        window = FakeWindow(url)
        self.windows.append(window)
        self.opened.append(url)
        return window


@pytest.fixture
def config() -> WorkerConfig:
    """Config pointing at the test origins."""
    return WorkerConfig(
        static_generation="static-v2",
        dynamic_generation="dynamic-v2",
        app_origin=APP,
        backend_origin="backend.test",
    )


@pytest.fixture
def storage() -> AsyncMemoryStorage:
    """Create a fresh AsyncMemoryStorage for each test."""
    return AsyncMemoryStorage()


@pytest.fixture
def store(storage: AsyncMemoryStorage) -> CacheStore:
    return CacheStore(storage)


@pytest.fixture
def registry(config: WorkerConfig) -> GenerationRegistry:
    return GenerationRegistry.from_config(config)


@pytest.fixture
async def network() -> AsyncIterator[httpx.AsyncClient]:
    """The client used for real network calls (mocked with respx)."""
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def windows() -> FakeWindows:
    return FakeWindows()
