"""Request fingerprinting."""

import httpx


def canonical_url(url: httpx.URL) -> str:
    """Absolute URL with the fragment removed; the query is kept."""
    return str(url).split("#", 1)[0]


def fingerprint(request: httpx.Request) -> str:
    """Build the cache key for a request: method plus absolute URL."""
    return f"{request.method.upper()} {canonical_url(request.url)}"
