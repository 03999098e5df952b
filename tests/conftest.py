"""Shared fixtures: an in-memory fake of the HTTP fetcher."""

from __future__ import annotations

import pytest

from getwebsite.fetcher import FetchResponse, TransportError


class FakeFetcher:
    """Serves canned responses by URL; unknown URLs behave like a dead host."""

    def __init__(self, pages: dict[str, tuple[str | bytes, str] | tuple[str | bytes, str, int]]) -> None:
        self.pages = pages
        self.calls: list[str] = []

    def get(self, url: str) -> FetchResponse:
        self.calls.append(url)
        if url not in self.pages:
            raise TransportError(url)
        body, content_type, *rest = self.pages[url]
        status = rest[0] if rest else 200
        content = body.encode("utf-8") if isinstance(body, str) else body
        return FetchResponse(url, content, content_type, "utf-8", status)


PNG = b"\x89PNG\r\n\x1a\n\x00\x00fake"

SITE = {
    "http://example.com": (
        '<html><head><link href="style.css" rel="stylesheet"></head><body>'
        '<img src="/img/logo.png">'
        '<a href="/a.html">A</a>'
        '<a href="/b.html">B</a>'
        '<a href="http://other.org/x">X</a>'
        '<a href="mailto:support@example.com">Mail</a>'
        "</body></html>",
        "text/html",
    ),
    "http://example.com/style.css": ("body { color: red }", "text/css"),
    "http://example.com/img/logo.png": (PNG, "image/png"),
    "http://example.com/a.html": (
        '<img src="/img/logo.png"><a href="/c.html">C</a>',
        "text/html",
    ),
    "http://example.com/b.html": ('<a href="/a.html">A again</a>', "text/html"),
    "http://example.com/c.html": ("<p>leaf</p>", "text/html"),
}


@pytest.fixture
def site() -> FakeFetcher:
    return FakeFetcher(dict(SITE))


@pytest.fixture
def out(tmp_path) -> str:
    return str(tmp_path)
