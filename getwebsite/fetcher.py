"""HTTP fetching with a pooled client and politeness (User-Agent, timeouts)."""

import os
from dataclasses import dataclass

import httpx

# Browser-like UA to reduce 403 from sites that block scrapers
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_TIMEOUT = 30.0

DEFAULT_HEADERS = {
    "User-Agent": DEFAULT_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

# Non text/* types whose bodies are still worth scanning for references
TEXTUAL_TYPES = frozenset({
    "application/xhtml+xml",
    "application/xml",
    "application/javascript",
    "application/json",
})


def get_timeout() -> float:
    """Return request timeout from env GETWEBSITE_TIMEOUT, or the default."""
    value = os.environ.get("GETWEBSITE_TIMEOUT", "").strip()
    if not value:
        return DEFAULT_TIMEOUT
    try:
        return float(value)
    except ValueError:
        return DEFAULT_TIMEOUT


def get_user_agent() -> str:
    """Return User-Agent from env GETWEBSITE_USER_AGENT, or the browser-like default."""
    return os.environ.get("GETWEBSITE_USER_AGENT", "").strip() or DEFAULT_USER_AGENT


class TransportError(RuntimeError):
    """No response at all (DNS, refused connection, timeout). Fatal for a run."""

    def __init__(self, url: str, cause: BaseException | None = None) -> None:
        super().__init__(f"Could not download URL '{url}'.")
        self.url = url
        self.cause = cause


@dataclass
class FetchResponse:
    """Body and classification of one GET."""

    url: str
    content: bytes
    content_type: str
    charset: str
    status_code: int

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_textual(self) -> bool:
        ct = self.content_type
        # No Content-Type at all: decode and scan it like a page
        if not ct:
            return True
        return ct.startswith("text/") or ct.endswith("+xml") or ct in TEXTUAL_TYPES

    def text(self) -> str:
        """Body decoded with the response charset (utf-8 when unknown)."""
        try:
            return self.content.decode(self.charset, errors="replace")
        except LookupError:
            return self.content.decode("utf-8", errors="replace")


def parse_content_type(header: str | None) -> str:
    """Media type without parameters, lower-cased: 'text/html; charset=x' -> 'text/html'."""
    return header.split(";")[0].strip().lower() if header else ""


class Fetcher:
    """HTTP fetcher with connection pooling. Reuse for multiple requests."""

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._headers = {**DEFAULT_HEADERS, **(headers or {})}
        self._transport = transport
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                follow_redirects=True,
                timeout=self._timeout,
                headers=self._headers,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        if self._client and not self._client.is_closed:
            self._client.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def get(self, url: str) -> FetchResponse:
        """GET ``url``. Error statuses are returned, not raised; only a missing response raises."""
        try:
            resp = self._get_client().get(url)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise TransportError(url, e) from e
        return FetchResponse(
            url=url,
            content=resp.content,
            content_type=parse_content_type(resp.headers.get("content-type")),
            charset=resp.charset_encoding or "utf-8",
            status_code=resp.status_code,
        )
