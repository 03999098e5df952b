"""Crawl-wide state: which URLs were downloaded, and which markup to rewrite."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from getwebsite.resolver import ResolvedReference


class VisitedRegistry:
    """Absolute URL -> the reference registered when its download was attempted."""

    def __init__(self) -> None:
        self._refs: dict[str, ResolvedReference] = {}

    def register(self, ref: ResolvedReference) -> bool:
        """Register ``ref``. False if its URL was already registered (nothing changes then)."""
        if ref.resolved_url in self._refs:
            return False
        self._refs[ref.resolved_url] = ref
        return True

    def get(self, url: str) -> ResolvedReference | None:
        return self._refs.get(url)

    def __contains__(self, url: object) -> bool:
        return url in self._refs

    def __len__(self) -> int:
        return len(self._refs)

    def __iter__(self) -> Iterator[ResolvedReference]:
        return iter(self._refs.values())

    def urls(self) -> list[str]:
        """Registered URLs in registration order."""
        return list(self._refs)


@dataclass(frozen=True)
class Replacement:
    matched_text: str
    target: ResolvedReference


class ReplacementLedger:
    """Append-only list of (matched markup, target) pairs, in discovery order. Not deduplicated."""

    def __init__(self) -> None:
        self._entries: list[Replacement] = []

    def append(self, matched_text: str, target: ResolvedReference) -> None:
        self._entries.append(Replacement(matched_text, target))

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Replacement]:
        return iter(self._entries)
