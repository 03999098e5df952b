"""Rewrite links in mirrored pages so they resolve offline."""

from __future__ import annotations

import re

from getwebsite.console import Console, SILENT
from getwebsite.registry import ReplacementLedger, VisitedRegistry
from getwebsite.storage import canonical_path, read_text, relativize, write_text

_EMPTY_REF_RE = re.compile(r"""((?:href|src)\s*=\s*)(["'])\2""", re.I)


def _swap_reference(matched_text: str, raw: str, rel_path: str) -> str:
    if raw:
        return matched_text.replace(raw, rel_path, 1)
    return _EMPTY_REF_RE.sub(lambda m: m.group(1) + m.group(2) + rel_path + m.group(2), matched_text, count=1)


def convert_links(
    registry: VisitedRegistry,
    ledger: ReplacementLedger,
    *,
    console: Console = SILENT,
) -> int:
    """Rewrite every mirrored HTML page in ``registry``; returns how many were rewritten.

    For each ledger entry, in order, the first occurrence of its matched
    markup in the page is replaced by the same markup with the target's raw
    URL swapped for the target's path relative to the page. Entries whose
    target (or the page itself) is not on disk are skipped.
    """
    console.debug("Start link converting.")
    converted = 0
    for page in registry:
        if page.content_type != "text/html":
            continue
        page_path = canonical_path(page.local_path)
        if page_path is None:
            continue
        try:
            contents = read_text(page_path)
        except OSError:
            continue

        console.info(f'Converting links in "{page.local_path}".')
        for entry in ledger:
            # The registered record carries the path the file was actually written to
            target = registry.get(entry.target.resolved_url) or entry.target
            target_path = canonical_path(target.local_path)
            if target_path is None:
                continue
            rel_path = relativize(target_path, page_path)
            if not rel_path:
                continue
            replacement = _swap_reference(entry.matched_text, entry.target.raw, rel_path)
            contents = contents.replace(entry.matched_text, replacement, 1)

        try:
            write_text(page_path, contents)
        except OSError as e:
            console.info(f'  Could not write "{page.local_path}": {e}')
            continue
        converted += 1
    return converted
