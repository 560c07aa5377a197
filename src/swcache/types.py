"""Core types for swcache."""

import time
from dataclasses import dataclass
from enum import Enum

import httpx

from swcache.fingerprint import canonical_url

# Headers that describe the wire encoding rather than the decoded body we store
_DROPPED_HEADERS = frozenset({"content-encoding", "content-length", "transfer-encoding"})

SOURCE_EXTENSION = "swcache.source"


class GenerationKind(str, Enum):
    """Which partition of the cache a request belongs to."""

    STATIC = "static"
    DYNAMIC = "dynamic"


class Strategy(str, Enum):
    """How a request is resolved."""

    NETWORK_FIRST = "network_first"
    CACHE_FIRST = "cache_first"
    PASSTHROUGH = "passthrough"


@dataclass(frozen=True, slots=True)
class Generation:
    """A named, wholesale-replaceable partition of cached entries."""

    name: str
    kind: GenerationKind


@dataclass(frozen=True, slots=True)
class Classification:
    """Result of classifying a request."""

    kind: GenerationKind | None
    strategy: Strategy


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """A stored response snapshot."""

    method: str
    url: str
    status_code: int
    headers: list[tuple[str, str]]
    content: bytes
    stored_at: int  # Unix timestamp ms, informational only

    @classmethod
    def from_response(
        cls, response: httpx.Response, request: httpx.Request | None = None
    ) -> "CacheEntry":
        """Snapshot a response whose body has already been read.

        ``request`` is the request the response answers; it defaults to
        ``response.request``, which is the last hop when redirects were
        followed.
        """
        if request is None:
            request = response.request
        return cls(
            method=request.method.upper(),
            url=canonical_url(request.url),
            status_code=response.status_code,
            headers=[
                (name, value)
                for name, value in response.headers.multi_items()
                if name.lower() not in _DROPPED_HEADERS
            ],
            content=response.content,
            stored_at=int(time.time() * 1000),
        )

    def to_response(self, request: httpx.Request) -> httpx.Response:
        """Build a fresh response for ``request`` from this snapshot."""
        return httpx.Response(
            self.status_code,
            headers=self.headers,
            content=self.content,
            request=request,
            extensions={SOURCE_EXTENSION: "cache"},
        )
