"""Lifecycle controller: provisioning, cutover and interception."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum

import httpx

from swcache.classifier import RequestClassifier
from swcache.config import WorkerConfig
from swcache.errors import LifecycleError, ProvisioningError, StorageError
from swcache.notifications import (
    Notification,
    NotificationDispatcher,
    Notifier,
    WindowClient,
    WindowClients,
)
from swcache.registry import GenerationRegistry
from swcache.store import CacheStore
from swcache.strategies import FallbackPolicy, StrategyExecutor

logger = logging.getLogger(__name__)


class LifecycleState(str, Enum):
    UNINSTALLED = "uninstalled"
    PROVISIONING = "provisioning"
    INSTALLED = "installed"
    ACTIVATING = "activating"
    ACTIVE = "active"
    INTERCEPTING = "intercepting"
    REDUNDANT = "redundant"


class LifecycleController:
    """State machine driven by install, activate, fetch and push triggers.

    Phase transitions are serialised. A phase invoked from the wrong state
    raises ``LifecycleError``; a failed install leaves the controller
    ``REDUNDANT`` so it can never be activated.
    """

    def __init__(
        self,
        config: WorkerConfig,
        store: CacheStore,
        client: httpx.AsyncClient,
        *,
        notifier: Notifier | None = None,
        windows: WindowClients | None = None,
        policy: FallbackPolicy | None = None,
    ) -> None:
        self._config = config
        self._store = store
        self._registry = GenerationRegistry.from_config(config)
        self._classifier = RequestClassifier(config)
        self._executor = StrategyExecutor(
            store,
            self._registry,
            client,
            policy=policy
            or FallbackPolicy(fallback_on_http_error=config.fallback_on_http_error),
        )
        self._dispatcher = (
            NotificationDispatcher(config, notifier, windows)
            if notifier is not None and windows is not None
            else None
        )
        self._state = LifecycleState.UNINSTALLED
        self._lock = asyncio.Lock()

    @property
    def config(self) -> WorkerConfig:
        return self._config

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def registry(self) -> GenerationRegistry:
        return self._registry

    @property
    def classifier(self) -> RequestClassifier:
        return self._classifier

    @property
    def executor(self) -> StrategyExecutor:
        return self._executor

    @property
    def is_ready(self) -> bool:
        """Whether the static generation has been fully provisioned."""
        return self._state in (
            LifecycleState.INSTALLED,
            LifecycleState.ACTIVATING,
            LifecycleState.ACTIVE,
            LifecycleState.INTERCEPTING,
        )

    def _transition(self, state: LifecycleState) -> None:
        logger.info(
            "[%s] %s -> %s",
            self._config.static_generation,
            self._state.value,
            state.value,
        )
        self._state = state

    def _expect(self, state: LifecycleState, phase: str) -> None:
        if self._state is not state:
            raise LifecycleError(
                f"Cannot {phase} from state {self._state.value!r}, "
                f"expected {state.value!r}"
            )

    async def _fetch_asset(
        self, path: str
    ) -> tuple[str, httpx.Request, httpx.Response]:
        url = httpx.URL(self._config.app_origin).join(path)
        request = httpx.Request("GET", url)
        try:
            response = await self._executor.passthrough(request)
        except httpx.HTTPError as e:
            raise ProvisioningError(path, str(e) or type(e).__name__) from e
        if not response.is_success:
            raise ProvisioningError(path, f"HTTP {response.status_code}")
        return path, request, response

    async def _provision(self) -> None:
        """Fetch the whole shell manifest, then write it in one go."""
        handle = await self._store.open(self._config.static_generation)
        results = await asyncio.gather(
            *(self._fetch_asset(path) for path in self._config.shell_manifest),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        for path, request, response in results:
            try:
                await handle.put(request, response)
            except StorageError as e:
                raise ProvisioningError(path, str(e)) from e

    async def on_install(self) -> None:
        """Provision the static generation."""
        async with self._lock:
            self._expect(LifecycleState.UNINSTALLED, "install")
            self._transition(LifecycleState.PROVISIONING)
            try:
                await self._provision()
            except BaseException:
                logger.error(
                    "Provisioning %s failed", self._config.static_generation
                )
                self._transition(LifecycleState.REDUNDANT)
                raise
            self._transition(LifecycleState.INSTALLED)

    async def on_activate(self, *, claim: bool = True) -> list[str]:
        """Delete stale generations, then take over interception.

        Returns the names of the generations that were deleted.
        """
        async with self._lock:
            self._expect(LifecycleState.INSTALLED, "activate")
            self._transition(LifecycleState.ACTIVATING)
            try:
                deleted = await self._registry.cutover(self._store)
            except BaseException:
                self._transition(LifecycleState.INSTALLED)
                raise
            self._transition(LifecycleState.ACTIVE)
            if claim:
                self._transition(LifecycleState.INTERCEPTING)
            return deleted

    async def claim(self) -> None:
        """Start intercepting after an activation that did not claim."""
        async with self._lock:
            self._expect(LifecycleState.ACTIVE, "claim")
            self._transition(LifecycleState.INTERCEPTING)

    async def intercept(self, request: httpx.Request) -> httpx.Response:
        """Resolve an outgoing request.

        Until this controller is intercepting, requests go straight to the
        network as they would for an uncontrolled client.
        """
        if self._state is not LifecycleState.INTERCEPTING:
            return await self._executor.passthrough(request)
        classification = self._classifier.classify(request)
        return await self._executor.execute(request, classification)

    def supersede(self) -> None:
        """Stop intercepting; a newer version has taken over."""
        if self._state is not LifecycleState.REDUNDANT:
            self._transition(LifecycleState.REDUNDANT)

    async def shutdown(self) -> None:
        """Wait for pending cache writes."""
        await self._executor.drain()

    def _require_dispatcher(self) -> NotificationDispatcher:
        if self._dispatcher is None:
            raise LifecycleError("No notifier configured for this controller")
        return self._dispatcher

    async def on_push(self, payload: bytes | str | None = None) -> Notification:
        """Show a notification for an inbound push signal."""
        return await self._require_dispatcher().on_push(payload)

    async def on_notification_click(self, notification: Notification) -> WindowClient:
        """Focus or open the application window."""
        return await self._require_dispatcher().on_notification_click(notification)
