"""Worker configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

DEFAULT_SHELL_MANIFEST = ("/", "/index.html", "/manifest.json")


@dataclass(frozen=True)
class WorkerConfig:
    """Everything a lifecycle controller needs to know about its deployment.

    The two generation names are the only versioning mechanism: bump them
    to force cache invalidation on the next activation.
    """

    static_generation: str = "crowdsense-static-v1"
    dynamic_generation: str = "crowdsense-dynamic-v1"
    app_origin: str = "http://localhost:5173"
    backend_origin: str = "localhost:3000"
    api_prefix: str = "/api/"
    shell_manifest: tuple[str, ...] = DEFAULT_SHELL_MANIFEST
    cacheable_methods: tuple[str, ...] = ("GET",)
    fallback_on_http_error: bool = False
    notification_title: str = "CrowdSense"
    default_notification_body: str = "You have a new notification."
    notification_icon: str = "/icon-192.png"
    notification_badge: str = "/icon-192.png"
    notification_vibrate: tuple[int, ...] = (200, 100, 200)

    def __post_init__(self) -> None:
        if not self.static_generation or not self.dynamic_generation:
            raise ValueError("generation names must not be empty")
        if self.static_generation == self.dynamic_generation:
            raise ValueError("static and dynamic generations must have different names")
        if not self.api_prefix.startswith("/"):
            raise ValueError(f"api_prefix must start with '/': {self.api_prefix!r}")
        # Normalise so callers may pass lists
        object.__setattr__(self, "shell_manifest", tuple(self.shell_manifest))
        object.__setattr__(
            self,
            "cacheable_methods",
            tuple(method.upper() for method in self.cacheable_methods),
        )
        object.__setattr__(
            self, "notification_vibrate", tuple(self.notification_vibrate)
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> WorkerConfig:
        """Build a config from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> WorkerConfig:
        """Build a config from ``SWCACHE_*`` environment variables."""
        env = os.environ if environ is None else environ
        data: dict[str, Any] = {}
        for key, var in ENV_MAP.items():
            raw = env.get(var)
            if raw is None:
                continue
            if key in _LIST_KEYS:
                data[key] = tuple(part.strip() for part in raw.split(",") if part.strip())
            elif key == "notification_vibrate":
                data[key] = tuple(int(part) for part in raw.split(","))
            elif key == "fallback_on_http_error":
                data[key] = _parse_bool(raw)
            else:
                data[key] = raw
        return cls.from_mapping(data)


ENV_MAP = {
    "static_generation": "SWCACHE_STATIC_GENERATION",
    "dynamic_generation": "SWCACHE_DYNAMIC_GENERATION",
    "app_origin": "SWCACHE_APP_ORIGIN",
    "backend_origin": "SWCACHE_BACKEND_ORIGIN",
    "api_prefix": "SWCACHE_API_PREFIX",
    "shell_manifest": "SWCACHE_SHELL_MANIFEST",
    "cacheable_methods": "SWCACHE_CACHEABLE_METHODS",
    "fallback_on_http_error": "SWCACHE_FALLBACK_ON_HTTP_ERROR",
    "notification_title": "SWCACHE_NOTIFICATION_TITLE",
    "default_notification_body": "SWCACHE_DEFAULT_NOTIFICATION_BODY",
    "notification_icon": "SWCACHE_NOTIFICATION_ICON",
    "notification_badge": "SWCACHE_NOTIFICATION_BADGE",
    "notification_vibrate": "SWCACHE_NOTIFICATION_VIBRATE",
}

_LIST_KEYS = frozenset({"shell_manifest", "cacheable_methods"})


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off", ""}:
        return False
    raise ValueError(f"Invalid boolean: {raw!r}")
