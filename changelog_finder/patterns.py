"""Changelog filename patterns and glob matching."""

from __future__ import annotations

import posixpath
from fnmatch import fnmatchcase
from typing import Iterable, List, Optional, Sequence

DEFAULT_PATTERNS: Sequence[str] = (
    "CHANGELOG*",
    "CHANGES*",
    "NEWS*",
    "HISTORY",
    "HISTORY.md",
    "HISTORY.txt",
    "RELEASES*",
    "*WHATSNEW*",
)


def select_patterns(user_patterns: Optional[Iterable[Optional[str]]]) -> List[str]:
    """Return cleaned user patterns, or the defaults when none remain."""
    if not user_patterns:
        return list(DEFAULT_PATTERNS)
    selected = [pattern.strip() for pattern in user_patterns if pattern is not None]
    selected = [pattern for pattern in selected if pattern]
    return selected or list(DEFAULT_PATTERNS)


def path_matches(path: str, pattern: str) -> bool:
    """Case-insensitive glob match of a repo-relative path.

    Patterns containing ``/`` match the whole path segment by segment, other
    patterns match only the base name. Wildcards never cross ``/`` and do not
    match a leading dot.
    """
    lowered_path = path.lower()
    lowered_pattern = pattern.lower()
    if "/" in lowered_pattern:
        return _match_parts(lowered_pattern.split("/"), lowered_path.split("/"))
    return _match_segment(lowered_pattern, posixpath.basename(lowered_path))


def first_matching_path(files: Sequence[str], patterns: Sequence[str]) -> str | None:
    """Return the first path matching the highest-priority pattern.

    Pattern order decides priority; ``files`` order breaks ties, so callers
    pass a sorted list.
    """
    for pattern in patterns:
        for path in files:
            if path_matches(path, pattern):
                return path
    return None


def _match_segment(pattern: str, name: str) -> bool:
    if name.startswith(".") and not pattern.startswith("."):
        return False
    return fnmatchcase(name, pattern)


def _match_parts(pattern_parts: Sequence[str], path_parts: Sequence[str]) -> bool:
    if not pattern_parts:
        return not path_parts
    head, rest = pattern_parts[0], pattern_parts[1:]
    # `**/` spans zero or more non-hidden directories; a trailing `**` is a plain `*` segment.
    if head == "**" and rest:
        for index in range(len(path_parts)):
            if _match_parts(rest, path_parts[index:]):
                return True
            if path_parts[index].startswith("."):
                return False
        return False
    if not path_parts:
        return False
    return _match_segment(head, path_parts[0]) and _match_parts(rest, path_parts[1:])


__all__ = ["DEFAULT_PATTERNS", "first_matching_path", "path_matches", "select_patterns"]
