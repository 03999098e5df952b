"""Mirror file writing and relative path computation."""

import os
from pathlib import Path


def write_mirror_file(path: str, directory: str, data: bytes) -> None:
    """Write ``data`` to ``path``, creating ``directory`` first. Overwrites. Raises OSError."""
    Path(directory).mkdir(parents=True, exist_ok=True)
    Path(path).write_bytes(data)


def read_text(path: str) -> str:
    """Read a mirrored page as UTF-8; undecodable bytes survive a later write_text()."""
    return Path(path).read_text(encoding="utf-8", errors="surrogateescape")


def write_text(path: str, text: str) -> None:
    Path(path).write_text(text, encoding="utf-8", errors="surrogateescape")


def canonical_path(path: str) -> str | None:
    """Absolute, symlink-free form of ``path``; None if it does not exist."""
    try:
        return str(Path(path).resolve(strict=True))
    except (OSError, RuntimeError):
        return None


def relativize(path: str, related: str) -> str:
    """Make ``path`` relative to ``related`` (a file's directory, or a directory).

    relativize("/root/a/b.html", "/root/a/c.html") == "b.html"
    relativize("/root/a/b.html", "/root/x/c.html") == "../a/b.html"
    """
    if not os.path.isdir(related):
        related = os.path.dirname(related)
    path_parts = path.split("/")
    related_parts = related.split("/")

    # Drop the common leading directories
    common = 0
    for a, b in zip(path_parts, related_parts):
        if a != b:
            break
        common += 1
    path_parts = path_parts[common:]
    related_parts = related_parts[common:]

    return "/".join([".."] * len(related_parts) + path_parts)
