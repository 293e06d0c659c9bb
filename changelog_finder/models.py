"""Core data models shared across changelog-finder components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple


class SourceKind(str, Enum):
    """Kind of location a source reference points at."""

    GIT = "git"
    WEB = "web"


@dataclass(frozen=True)
class SourceRef:
    """Normalized repository location derived from package metadata."""

    kind: SourceKind
    location: str
    meta: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def key(self) -> Tuple[SourceKind, str]:
        return (self.kind, self.location)


@dataclass(frozen=True)
class FileMatch:
    """A file selected inside a source, addressed by ``locator``.

    ``meta["checkout"]`` may hold the scanner's live checkout so the fetcher
    can read from it without cloning again. The reference is for lookup only.
    """

    source: SourceRef
    path: str
    locator: str
    meta: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class FetchedContent:
    """Raw bytes of a matched file."""

    source: SourceRef
    path: str
    locator: str
    content: bytes
    meta: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


def dedupe_refs(refs: list[SourceRef]) -> list[SourceRef]:
    """Drop repeated ``(kind, location)`` pairs, keeping the first occurrence."""
    seen: set[Tuple[SourceKind, str]] = set()
    unique: list[SourceRef] = []
    for ref in refs:
        if ref.key in seen:
            continue
        seen.add(ref.key)
        unique.append(ref)
    return unique
