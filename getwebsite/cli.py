"""getwebsite - a website spider.

Usage: getwebsite [options] website [target]

Downloads the given website and its media into TARGET (default: the current
directory), stored as TARGET/<domain>/<path>. Paths ending in "/" are saved as
index.html; HTML responses without an .html extension get one appended; the
characters ?, & and % are dropped from file names.

Media (<link>, <img>, <script>) is always downloaded, from any domain. Links
(<a href>) are only followed on the website's own domain, and only as deep
as --depth allows.

Options:
  -c, --convert-links   Rewrite the links of the downloaded pages so the
                        mirror can be browsed offline.
  -d, --depth N         Maximum link depth. 0 (default) downloads the page
                        and its media only.
  -q, --quiet           Turn off all info messages.
  --debug               Turn on debug messages.
  --timeout SECS        Per-request timeout (env GETWEBSITE_TIMEOUT, default 30).
  --user-agent UA       User-Agent header (env GETWEBSITE_USER_AGENT).
  --parser NAME         regex (default) scans tags with regular expressions;
                        soup uses BeautifulSoup/lxml and tolerates sloppier
                        markup.
  --link-policy NAME    siblings (default) or once; how links on a page are
                        followed. Both visit the same URLs.
  --no-progress         Disable the progress counter.
  -m, --man             Print this manual.

Exit status is 1 when the URL is missing or a download gets no response at
all; files that cannot be written are reported and skipped.
"""

import argparse
import re
import sys

from tqdm import tqdm

from getwebsite.console import Console
from getwebsite.extractors import SCANNERS, get_scanner
from getwebsite.fetcher import Fetcher, TransportError, get_timeout, get_user_agent
from getwebsite.pipeline import LINK_POLICIES, run_mirror
from getwebsite.rewrite import convert_links

DEPTH_FLAGS = ("-d", "--depth")
_INT_RE = re.compile(r"[+-]?\d+")


def fill_bare_depth(argv: list[str]) -> list[str]:
    """Give a bare -d an explicit 0 when the next word is not an integer.

    ``-d example.com`` then means depth 0 and URL example.com instead of a
    bad depth value.
    """
    filled: list[str] = []
    for i, arg in enumerate(argv):
        filled.append(arg)
        if arg == "--":
            filled.extend(argv[i + 1 :])
            break
        if arg in DEPTH_FLAGS and i + 1 < len(argv) and not _INT_RE.fullmatch(argv[i + 1]):
            filled.append("0")
    return filled


class _Parser(argparse.ArgumentParser):
    def parse_known_args(self, args=None, namespace=None):
        if args is None:
            args = sys.argv[1:]
        return super().parse_known_args(fill_bare_depth(list(args)), namespace)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="getwebsite",
        description="Download a website and its media, optionally rewriting links for offline use.",
    )
    parser.add_argument("url", nargs="?", default=None, help="Website to download (scheme optional)")
    parser.add_argument("target", nargs="?", default=".", help="Output directory (default: .)")
    parser.add_argument(
        "-d",
        "--depth",
        type=int,
        nargs="?",
        const=0,
        default=0,
        metavar="N",
        help="Maximum link depth (default: 0, the page and its media only)",
    )
    parser.add_argument(
        "-c",
        "--convert-links",
        action="store_true",
        dest="convert",
        help="Rewrite links of downloaded pages for offline browsing",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Turn off all info messages")
    parser.add_argument("--debug", action="store_true", help="Turn on debug messages")
    parser.add_argument(
        "--timeout",
        type=float,
        default=get_timeout(),
        metavar="SECS",
        help="Request timeout in seconds (default: GETWEBSITE_TIMEOUT or 30)",
    )
    parser.add_argument(
        "--user-agent",
        default=get_user_agent(),
        metavar="UA",
        help="User-Agent header (default: GETWEBSITE_USER_AGENT or a browser UA)",
    )
    parser.add_argument(
        "--parser",
        choices=list(SCANNERS),
        default="regex",
        help="Markup scanner: regex (default) or soup (BeautifulSoup + lxml)",
    )
    parser.add_argument(
        "--link-policy",
        choices=list(LINK_POLICIES),
        default="siblings",
        help="How links on a page are followed (default: siblings)",
    )
    parser.add_argument("--no-progress", action="store_true", help="Disable progress counter")
    parser.add_argument("-m", "--man", action="store_true", help="Print the full manual and exit")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.man:
        print(__doc__)
        sys.exit(0)
    if not args.url or not args.url.strip():
        print("\nURL is missing!\n", file=sys.stderr)
        parser.print_usage(sys.stderr)
        sys.exit(1)
    if args.depth < 0:
        parser.error("--depth must be a non-negative integer")

    console = Console(quiet=args.quiet, debug=args.debug)
    pbar = tqdm(desc="Mirror", unit=" file", file=sys.stderr, disable=args.quiet or args.no_progress)
    try:
        with Fetcher(timeout=args.timeout, headers={"User-Agent": args.user_agent}) as fetcher:
            mirror = run_mirror(
                args.url.strip(),
                fetcher,
                args.target,
                args.depth,
                scanner=get_scanner(args.parser),
                link_policy=args.link_policy,
                console=console,
                progress=pbar,
            )
    except (TransportError, ValueError) as e:
        pbar.close()
        console.error(f"\n{e}")
        sys.exit(1)
    except KeyboardInterrupt:
        pbar.close()
        console.error("\nInterrupted.")
        sys.exit(130)
    pbar.close()

    if args.convert:
        convert_links(mirror.registry, mirror.ledger, console=console)


if __name__ == "__main__":
    main()
