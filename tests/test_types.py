"""Tests for core types and fingerprinting."""

import gzip

import httpx

from swcache import CacheEntry, fingerprint
from swcache.types import SOURCE_EXTENSION


class TestFingerprint:
    def test_method_and_url(self) -> None:
        request = httpx.Request("get", "http://app.test/api/crowd?area=3")
        assert fingerprint(request) == "GET http://app.test/api/crowd?area=3"

    def test_query_is_significant(self) -> None:
        a = httpx.Request("GET", "http://app.test/api/crowd?area=1")
        b = httpx.Request("GET", "http://app.test/api/crowd?area=2")
        assert fingerprint(a) != fingerprint(b)

    def test_fragment_is_ignored(self) -> None:
        a = httpx.Request("GET", "http://app.test/index.html#top")
        b = httpx.Request("GET", "http://app.test/index.html")
        assert fingerprint(a) == fingerprint(b)

    def test_method_is_significant(self) -> None:
        a = httpx.Request("GET", "http://app.test/x")
        b = httpx.Request("HEAD", "http://app.test/x")
        assert fingerprint(a) != fingerprint(b)


class TestCacheEntry:
    def test_snapshot_and_restore(self) -> None:
        """Test that a snapshot rebuilds an equivalent response."""
        request = httpx.Request("GET", "http://app.test/api/parking")
        response = httpx.Response(
            200,
            headers={"content-type": "application/json", "x-trace": "abc"},
            json={"spots": 4},
            request=request,
        )

        entry = CacheEntry.from_response(response)
        assert entry.method == "GET"
        assert entry.url == "http://app.test/api/parking"
        assert entry.status_code == 200

        restored = entry.to_response(request)
        assert restored.status_code == 200
        assert restored.headers["x-trace"] == "abc"
        assert restored.json() == {"spots": 4}
        assert restored.extensions[SOURCE_EXTENSION] == "cache"

    def test_encoding_headers_are_dropped(self) -> None:
        """Test that the decoded body is stored without its wire encoding."""
        request = httpx.Request("GET", "http://app.test/index.html")
        response = httpx.Response(
            200,
            headers={"content-encoding": "gzip"},
            content=gzip.compress(b"<html></html>"),
            request=request,
        )

        entry = CacheEntry.from_response(response)
        assert entry.content == b"<html></html>"
        assert all(name.lower() != "content-encoding" for name, _ in entry.headers)
        assert entry.to_response(request).text == "<html></html>"

    def test_repeated_headers_are_preserved(self) -> None:
        request = httpx.Request("GET", "http://app.test/")
        response = httpx.Response(
            200,
            headers=[("set-cookie", "a=1"), ("set-cookie", "b=2")],
            request=request,
        )
        entry = CacheEntry.from_response(response)
        assert [v for k, v in entry.headers if k == "set-cookie"] == ["a=1", "b=2"]
