"""URL resolution: raw href/src strings to absolute URLs and mirror paths."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urljoin

from getwebsite.console import Console, SILENT

# Raw references that can never be fetched
_UNFETCHABLE_RE = re.compile(r"^(?:mailto:|#|javascript:)")
_HAS_HTTP_SCHEME_RE = re.compile(r"^https?://")
# Any "scheme:" prefix (data:, ftp:, tel:...)
_HAS_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")
# base = scheme + host, then everything after the host (path, query, fragment)
_ABSOLUTE_RE = re.compile(r"^((https?)://([^/]+))(.*)$", re.DOTALL)
# Stripped from local paths to keep them filesystem-safe
_UNSAFE_PATH_CHARS_RE = re.compile(r"[?&%]")


@dataclass
class ResolutionFailure:
    """Returned instead of a reference when ``raw`` cannot be fetched."""

    raw: str
    reason: str

    def __bool__(self) -> bool:
        return False


@dataclass
class ResolvedReference:
    """An absolute URL plus the local path its mirror copy is stored under.

    ``content_type`` stays ``None`` until the reference is downloaded; the
    download may also append ``.html`` to ``local_path``.
    """

    raw: str
    href: str
    resolved_url: str
    scheme: str
    base: str
    domain: str
    request_path: str
    local_path: str
    local_dir: str
    local_filename: str
    content_type: str | None = None

    @property
    def directory_url(self) -> str:
        """Parent URL directory used for directory-relative references."""
        head, _, _ = self.request_path.rpartition("/")
        return f"{self.base}{head}/"

    def set_local_path(self, path: str) -> None:
        self.local_path = path
        self.local_dir, _, self.local_filename = path.rpartition("/")


def local_path_for(output_root: str, domain: str, request_path: str) -> str:
    """Mirror location for ``domain`` + ``request_path`` below ``output_root``."""
    path = f"{output_root}/{domain}{request_path}"
    if path.endswith("/"):
        path += "index.html"
    return _UNSAFE_PATH_CHARS_RE.sub("", path)


def _absolutize(href: str, parent: ResolvedReference | None) -> str:
    if parent is None:
        return href
    if href.startswith("//"):
        return f"{parent.scheme}:{href}"
    if href.startswith("/"):
        return parent.base + href
    if "/" not in href:
        return parent.directory_url + href
    if not _HAS_SCHEME_RE.match(href):
        # img/a.png, ../style.css
        return urljoin(parent.directory_url, href)
    return href


def resolve(
    raw: str,
    parent: ResolvedReference | None = None,
    output_root: str = ".",
    *,
    console: Console = SILENT,
) -> ResolvedReference | ResolutionFailure:
    """Resolve ``raw`` against ``parent`` (``None`` for the crawl seed).

    Returns a :class:`ResolutionFailure` for ``mailto:``, ``javascript:`` and
    fragment-only references, and for anything that does not end up as an
    absolute ``http``/``https`` URL (``data:`` URIs, ``ftp:`` links).
    """
    console.debug(f'Analyze URL: "{raw}".')
    if _UNFETCHABLE_RE.match(raw):
        return ResolutionFailure(raw, "unsupported scheme")

    href = raw
    if parent is None and not _HAS_HTTP_SCHEME_RE.match(href):
        href = "http://" + href

    url = _absolutize(href, parent)
    console.debug(f'Regenerated url: "{url}".')

    m = _ABSOLUTE_RE.match(url)
    if m is None:
        return ResolutionFailure(raw, "not an http(s) URL")
    base, scheme, domain, request_path = m.groups()
    request_path = request_path or "/"

    local_path = local_path_for(output_root, domain, request_path)
    local_dir, _, local_filename = local_path.rpartition("/")
    return ResolvedReference(
        raw=raw,
        href=href,
        resolved_url=url,
        scheme=scheme,
        base=base,
        domain=domain,
        request_path=request_path,
        local_path=local_path,
        local_dir=local_dir,
        local_filename=local_filename,
    )
