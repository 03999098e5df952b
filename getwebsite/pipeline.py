"""Mirroring pipeline: download references, scan pages, follow links. Used by CLI and programmatic callers."""

from __future__ import annotations

from typing import Literal, Protocol

from tqdm import tqdm

from getwebsite.console import Console, SILENT
from getwebsite.extractors import RegexScanner, Scanner, extract_references
from getwebsite.fetcher import FetchResponse
from getwebsite.registry import ReplacementLedger, VisitedRegistry
from getwebsite.resolver import ResolvedReference, ResolutionFailure, resolve
from getwebsite.storage import write_mirror_file

LinkPolicy = Literal["siblings", "once"]
LINK_POLICIES: tuple[LinkPolicy, ...] = ("siblings", "once")


class HttpGetter(Protocol):
    """Anything with Fetcher.get's contract: a response, or TransportError."""

    def get(self, url: str) -> FetchResponse: ...


class Mirror:
    """Owns one run's visited registry and replacement ledger.

    ``link_policy`` picks how links found on a page are followed:

    * ``"siblings"``: for each link found, every link of that page is crawled
      again at the same depth. This is how the tool has always behaved; the
      registry turns the repeats into no-ops.
    * ``"once"``: each link is crawled exactly once.

    Both visit the same URLs in the same order.
    """

    def __init__(
        self,
        fetcher: HttpGetter,
        output_root: str = ".",
        *,
        scanner: Scanner | None = None,
        link_policy: LinkPolicy = "siblings",
        console: Console = SILENT,
        progress: tqdm | None = None,
    ) -> None:
        if link_policy not in LINK_POLICIES:
            raise ValueError(f"Unknown link policy {link_policy!r}")
        self.fetcher = fetcher
        self.output_root = output_root
        self.scanner = scanner or RegexScanner()
        self.link_policy = link_policy
        self.console = console
        self.progress = progress
        self.registry = VisitedRegistry()
        self.ledger = ReplacementLedger()

    def resolve_seed(self, url: str) -> ResolvedReference | ResolutionFailure:
        return resolve(url, None, self.output_root, console=self.console)

    def download(self, ref: ResolvedReference) -> str | None:
        """Download ``ref`` once per run and mirror it to ``ref.local_path``.

        Returns the decoded body for textual content ("" for binary), or
        None if the URL was already registered or the file could not be
        written. TransportError propagates.
        """
        if not self.registry.register(ref):
            return None
        url = ref.resolved_url

        self.console.info(f'Downloading "{url}".')
        self.console.debug(f'Raw URL: "{ref.raw}".')
        resp = self.fetcher.get(url)
        if self.progress is not None:
            self.progress.update(1)
        if not resp.ok:
            self.console.info(f'  HTTP {resp.status_code} for "{url}".')

        ref.content_type = resp.content_type
        if resp.content_type == "text/html" and not ref.local_path.endswith(".html"):
            ref.set_local_path(ref.local_path + ".html")

        try:
            write_mirror_file(ref.local_path, ref.local_dir, resp.content)
        except OSError as e:
            self.console.info(f'  Could not write "{ref.local_path}": {e}')
            return None

        return resp.text() if resp.is_textual else ""

    def crawl(self, ref: ResolvedReference, depth: int) -> None:
        """Mirror ``ref`` and its media; follow same-domain links while depth allows.

        Depth 0 mirrors the page and its media only; depth N follows links N
        levels deep. Every link on a page is crawled with the same remaining
        depth.
        """
        depth -= 1
        contents = self.download(ref)
        if contents is None:
            return

        found = extract_references(
            ref,
            contents,
            self.ledger,
            output_root=self.output_root,
            scanner=self.scanner,
            console=self.console,
        )
        links = [fu for fu in found if fu.kind == "link"]
        for fu in found:
            if fu.kind == "media":
                self.download(fu.target)
            elif depth >= 0:
                if self.link_policy == "siblings":
                    for sibling in links:
                        self.crawl(sibling.target, depth)
                else:
                    self.crawl(fu.target, depth)


def run_mirror(
    url: str,
    fetcher: HttpGetter,
    output_root: str = ".",
    depth: int = 0,
    *,
    scanner: Scanner | None = None,
    link_policy: LinkPolicy = "siblings",
    console: Console = SILENT,
    progress: tqdm | None = None,
) -> Mirror:
    """Mirror ``url`` into ``output_root``; returns the Mirror for its registry and ledger."""
    mirror = Mirror(
        fetcher,
        output_root,
        scanner=scanner,
        link_policy=link_policy,
        console=console,
        progress=progress,
    )
    seed = mirror.resolve_seed(url)
    if not seed:
        raise ValueError(f"Cannot mirror {url!r}: {seed.reason}")
    mirror.crawl(seed, depth)
    return mirror
