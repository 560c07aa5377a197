"""Push notification dispatch."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

import httpx

from swcache.config import WorkerConfig

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Notification:
    """A notification as handed to the platform."""

    title: str
    body: str
    icon: str
    badge: str
    vibrate: tuple[int, ...]
    data: dict[str, Any] = field(default_factory=dict)
    closed: bool = False

    def close(self) -> None:
        self.closed = True


@runtime_checkable
class Notifier(Protocol):
    """Displays notifications."""

    async def show(self, notification: Notification) -> None:
        """Show a notification."""
        ...


@runtime_checkable
class WindowClient(Protocol):
    """An open application window."""

    url: str

    async def focus(self) -> None:
        """Bring the window to the front."""
        ...


@runtime_checkable
class WindowClients(Protocol):
    """The application windows controlled by the host."""

    async def list_windows(self) -> list[WindowClient]:
        """Every open window."""
        ...

    async def open_window(self, url: str) -> WindowClient:
        """Open a new window at ``url``."""
        ...


def decode_payload(payload: bytes | str | None) -> str | None:
    """Decode a push payload as UTF-8 text, or None if there is nothing usable."""
    if payload is None:
        return None
    if isinstance(payload, bytes):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Discarding push payload that is not valid UTF-8")
            return None
    return payload or None


def _same_origin(a: httpx.URL, b: httpx.URL) -> bool:
    return (a.scheme, a.host, a.port) == (b.scheme, b.host, b.port)


class NotificationDispatcher:
    """Turns push signals into notifications and clicks into focused windows."""

    def __init__(
        self,
        config: WorkerConfig,
        notifier: Notifier,
        windows: WindowClients,
    ) -> None:
        self._config = config
        self._notifier = notifier
        self._windows = windows

    def build(self, body: str | None) -> Notification:
        """Notification with the fixed visual parameters."""
        return Notification(
            title=self._config.notification_title,
            body=body if body is not None else self._config.default_notification_body,
            icon=self._config.notification_icon,
            badge=self._config.notification_badge,
            vibrate=self._config.notification_vibrate,
            data={"date_of_arrival": int(time.time() * 1000), "primary_key": 1},
        )

    async def on_push(self, payload: bytes | str | None) -> Notification:
        """Show a notification for an inbound push signal."""
        notification = self.build(decode_payload(payload))
        await self._notifier.show(notification)
        return notification

    async def on_notification_click(self, notification: Notification) -> WindowClient:
        """Close the notification and focus the main window, opening one if needed."""
        notification.close()
        root = self._config.app_origin.rstrip("/") + "/"
        app = httpx.URL(root)
        same_origin = [
            window
            for window in await self._windows.list_windows()
            if _same_origin(httpx.URL(window.url), app)
        ]
        if same_origin:
            # Prefer a window already showing the root page
            window = next(
                (w for w in same_origin if w.url.split("#", 1)[0] == root),
                same_origin[0],
            )
            await window.focus()
            return window
        logger.info("No open window, opening %s", root)
        return await self._windows.open_window(root)
