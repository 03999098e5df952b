"""Find media and anchor references in page markup."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Literal, Protocol

from bs4 import BeautifulSoup

from getwebsite.console import Console, SILENT
from getwebsite.registry import ReplacementLedger
from getwebsite.resolver import ResolvedReference, resolve

Kind = Literal["media", "link"]

# <link|img|script ... href|src="..." ...>; the last href/src in the tag wins
MEDIA_RE = re.compile(r"""(<(link|img|script)[^>]+(href|src)=(["'])([^'"]*?)\4[^>]*?>)""", re.S)
# <a href="...">name</a>; group 1 is the opening tag only
LINK_RE = re.compile(r"""(<a\s+[^>]*href=(['"])(.+?)\2.*?>)(.*?)</a>""", re.S)

MEDIA_TAGS = ("link", "img", "script")
MEDIA_ATTRS = ("href", "src")


@dataclass(frozen=True)
class Candidate:
    """A raw reference as it appears in the markup, before resolution."""

    kind: Kind
    matched_text: str
    raw_url: str
    display_name: str | None = None


@dataclass(frozen=True)
class DiscoveredReference:
    """A resolved reference found on a page."""

    kind: Kind
    target: ResolvedReference
    matched_text: str
    display_name: str | None = None


class Scanner(Protocol):
    """Pluggable markup scanner: media candidates first, then anchors, each in markup order."""

    def extract_matches(self, markup: str) -> Iterable[Candidate]: ...


class RegexScanner:
    """Tag-regex scanning. Case-sensitive, quoted attributes only, no structural parsing."""

    def extract_matches(self, markup: str) -> Iterator[Candidate]:
        for m in MEDIA_RE.finditer(markup):
            yield Candidate("media", m.group(1), m.group(5))
        for m in LINK_RE.finditer(markup):
            yield Candidate("link", m.group(1), m.group(3), m.group(4))


def _opening_tag_re(tag: str, attr: str, value: str) -> re.Pattern[str]:
    v = re.escape(value)
    return re.compile(
        rf"""<{tag}\b[^>]*?\b{attr}\s*=\s*(?:"(?P<dq>{v})"|'(?P<sq>{v})'|(?P<bare>{v})(?=[\s/>]))[^>]*>""",
        re.I | re.S,
    )


def _attribute_spellings(value: str) -> list[str]:
    # bs4 hands back entity-decoded values; the markup may still say &amp;
    spellings = [value]
    if "&" in value:
        spellings.append(value.replace("&", "&amp;"))
    return spellings


class SoupScanner:
    """Structural scanning with BeautifulSoup + lxml.

    Tolerates upper-case tags, unquoted attributes and attributes split over
    lines. Each hit is mapped back onto the verbatim opening tag so the link
    rewriter can still substitute it; tags that cannot be located are dropped.
    """

    def __init__(self, features: str = "lxml") -> None:
        self.features = features

    def _locate(self, markup: str, pos: int, tag: str, attr: str, value: str) -> re.Match[str] | None:
        for spelling in _attribute_spellings(value):
            m = _opening_tag_re(tag, attr, spelling).search(markup, pos)
            if m:
                return m
        return None

    def extract_matches(self, markup: str) -> Iterator[Candidate]:
        soup = BeautifulSoup(markup, self.features)

        pos = 0
        for tag in soup.find_all(MEDIA_TAGS):
            attrs = [a for a in tag.attrs if a in MEDIA_ATTRS]
            if not attrs:
                continue
            attr = attrs[-1]
            m = self._locate(markup, pos, tag.name, attr, tag[attr])
            if m is None:
                continue
            pos = m.end()
            raw = m.group("dq") or m.group("sq") or m.group("bare") or ""
            yield Candidate("media", m.group(0), raw)

        pos = 0
        for tag in soup.find_all("a", href=True):
            m = self._locate(markup, pos, "a", "href", tag["href"])
            if m is None:
                continue
            pos = m.end()
            raw = m.group("dq") or m.group("sq") or m.group("bare") or ""
            yield Candidate("link", m.group(0), raw, tag.get_text())


SCANNERS: dict[str, type] = {
    "regex": RegexScanner,
    "soup": SoupScanner,
}


def get_scanner(name: str) -> Scanner:
    """Scanner by CLI name ('regex' or 'soup')."""
    try:
        return SCANNERS[name]()
    except KeyError:
        raise ValueError(f"Unknown parser {name!r}; choose from {', '.join(SCANNERS)}") from None


def extract_references(
    parent: ResolvedReference,
    markup: str,
    ledger: ReplacementLedger,
    *,
    output_root: str = ".",
    scanner: Scanner | None = None,
    console: Console = SILENT,
) -> list[DiscoveredReference]:
    """Resolve every candidate in ``markup`` against ``parent``.

    Unresolvable candidates are dropped, as are links leaving ``parent``'s
    domain (media may come from anywhere). Each kept hit is appended to
    ``ledger`` as it is found.
    """
    scanner = scanner or RegexScanner()
    found: list[DiscoveredReference] = []
    for cand in scanner.extract_matches(markup):
        ref = resolve(cand.raw_url, parent, output_root, console=console)
        if not ref:
            continue
        if cand.kind == "link" and ref.domain != parent.domain:
            continue
        ledger.append(cand.matched_text, ref)
        found.append(DiscoveredReference(cand.kind, ref, cand.matched_text, cand.display_name))
    return found
