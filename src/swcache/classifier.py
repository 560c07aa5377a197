"""Request classification."""

import httpx

from swcache.config import WorkerConfig
from swcache.types import Classification, GenerationKind, Strategy

_PASSTHROUGH = Classification(kind=None, strategy=Strategy.PASSTHROUGH)
_DYNAMIC = Classification(kind=GenerationKind.DYNAMIC, strategy=Strategy.NETWORK_FIRST)
_STATIC = Classification(kind=GenerationKind.STATIC, strategy=Strategy.CACHE_FIRST)


_DEFAULT_PORTS = {"http": 80, "https": 443}


def parse_origin(origin: str) -> tuple[str, int | None]:
    """Split ``host[:port]`` (a scheme and path are tolerated) into its parts.

    A missing port means any port on that host.
    """
    origin = origin.split("://", 1)[-1].split("/", 1)[0]
    host, sep, port = origin.rpartition(":")
    if sep and port.isdigit():
        return host.lower(), int(port)
    return origin.lower(), None


def _effective_port(url: httpx.URL) -> int | None:
    if url.port is not None:
        return url.port
    return _DEFAULT_PORTS.get(url.scheme)


class RequestClassifier:
    """Decides which strategy and generation a request belongs to.

    API data is time-sensitive and goes network-first into the dynamic
    generation. Everything else is application shell and goes cache-first
    into the static generation. Requests that can't be replayed from a
    cache (non-GET methods, non-HTTP schemes) bypass caching entirely.
    """

    def __init__(self, config: WorkerConfig) -> None:
        self._backend = (
            parse_origin(config.backend_origin) if config.backend_origin else None
        )
        self._api_prefix = config.api_prefix
        self._cacheable_methods = frozenset(config.cacheable_methods)

    def is_backend(self, url: httpx.URL) -> bool:
        if self._backend is not None:
            host, port = self._backend
            if url.host == host and (port is None or _effective_port(url) == port):
                return True
        return url.path.startswith(self._api_prefix)

    def classify(self, request: httpx.Request) -> Classification:
        """Classify a request."""
        if request.url.scheme not in ("http", "https"):
            return _PASSTHROUGH
        if request.method.upper() not in self._cacheable_methods:
            return _PASSTHROUGH
        if self.is_backend(request.url):
            return _DYNAMIC
        return _STATIC
