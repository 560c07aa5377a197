"""A simulated worker environment that hands control between versions."""

from __future__ import annotations

import asyncio
import logging

import httpx

from swcache.lifecycle import LifecycleController
from swcache.notifications import Notification

logger = logging.getLogger(__name__)


class WorkerHost:
    """Runs controllers through their lifecycle and routes requests to them.

    At most one controller is active. A newly registered controller is
    installed and activated while the previous one keeps serving; once the
    new one has finished its cutover and claimed control, the previous one
    is superseded and stops receiving requests.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client
        self._active: LifecycleController | None = None
        self._waiting: LifecycleController | None = None
        self._lock = asyncio.Lock()

    @property
    def active(self) -> LifecycleController | None:
        return self._active

    @property
    def waiting(self) -> LifecycleController | None:
        return self._waiting

    async def register(self, controller: LifecycleController) -> list[str]:
        """Install and activate ``controller``, replacing the active one.

        Returns the generations deleted at cutover. If install fails the
        previous controller stays active and the error propagates.
        """
        async with self._lock:
            self._waiting = controller
            try:
                await controller.on_install()
                deleted = await controller.on_activate()
            finally:
                self._waiting = None

            previous, self._active = self._active, controller
            if previous is not None and previous is not controller:
                previous.supersede()
                await previous.shutdown()
            return deleted

    async def fetch(self, request: httpx.Request) -> httpx.Response:
        """Send a request through the active controller, if any."""
        controller = self._active
        if controller is None:
            response = await self._client.send(request)
            await response.aread()
            return response
        return await controller.intercept(request)

    async def push(
        self, payload: bytes | str | None = None
    ) -> Notification | None:
        """Deliver a push signal to the active controller."""
        if self._active is None:
            logger.warning("Dropping push signal, no active controller")
            return None
        return await self._active.on_push(payload)

    async def shutdown(self) -> None:
        """Drain pending cache writes of the active controller."""
        if self._active is not None:
            await self._active.shutdown()
