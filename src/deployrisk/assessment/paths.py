"""Critical path matching.

Decides whether a change touches any configured critical path. Patterns are
either glob expressions (``services/*/auth.py``, ``*.sql``) or plain
directory prefixes (``src/payments``, ``infra/``).
"""

from __future__ import annotations

import fnmatch
from collections.abc import Iterable

GLOB_CHARS = "*?["


def normalize_paths(value: object) -> list[str]:
    """Turn a comma-separated string or an iterable into clean path entries.

    Entries are trimmed and empty ones dropped; order is preserved.
    """
    if value is None:
        return []
    if isinstance(value, str):
        items: Iterable[object] = value.split(",")
    elif isinstance(value, Iterable):
        items = value
    else:
        raise TypeError(f"Expected a string or a list of paths, got {type(value).__name__}")
    return [str(item).strip() for item in items if str(item).strip()]


def _clean(path: str) -> str:
    path = path.strip().replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path.lstrip("/")


def matches_critical_path(path: str, pattern: str) -> bool:
    """Check whether a changed file falls under a critical path pattern."""
    path = _clean(path)
    pattern = _clean(pattern)
    if not path or not pattern:
        return False

    if any(ch in pattern for ch in GLOB_CHARS):
        if fnmatch.fnmatch(path, pattern):
            return True
        # a glob naming a directory covers the files beneath it
        return fnmatch.fnmatch(path, pattern.rstrip("/") + "/*")

    prefix = pattern.rstrip("/")
    return path == prefix or path.startswith(prefix + "/")


def matching_files(changed_files: Iterable[str], critical_paths: Iterable[str]) -> list[str]:
    """Return the changed files that match at least one critical path."""
    patterns = normalize_paths(list(critical_paths))
    if not patterns:
        return []
    return [
        f for f in changed_files
        if any(matches_critical_path(f, p) for p in patterns)
    ]


def touches_critical_paths(changed_files: Iterable[str], critical_paths: Iterable[str]) -> bool:
    return bool(matching_files(changed_files, critical_paths))
