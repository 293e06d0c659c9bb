"""Resolve package metadata URLs into clonable git repository locations."""

from __future__ import annotations

import re
from typing import Callable, Iterable, List, Optional, Sequence
from urllib.parse import urlparse

from .logging import get_logger
from .metadata import PackageMetadata
from .models import SourceKind, SourceRef, dedupe_refs

logger = get_logger("resolver")

# Hand-maintained; GitLab routes missing here resolve as repository segments.
GITLAB_DASH_ROUTE_MARKERS = frozenset(
    {
        "archive",
        "blob",
        "raw",
        "tree",
        "commit",
        "commits",
        "issues",
        "merge_requests",
        "pipelines",
        "releases",
        "uploads",
        "tags",
        "wikis",
        "snippets",
        "files",
        "jobs",
    }
)
GITLAB_LEGACY_ROUTE_MARKERS = frozenset({"raw", "blob", "tree"})

_API_VERSION = re.compile(r"v\d+")


class RepoResolver:
    """Turns ordered metadata URLs into deduplicated ``SourceRef`` objects."""

    def __init__(self, urls: Iterable[Optional[str]]) -> None:
        self._urls = [str(url).strip() for url in urls if url is not None]

    @classmethod
    def from_metadata(cls, metadata: PackageMetadata) -> "RepoResolver":
        return cls(metadata.candidate_urls())

    def source_refs(self) -> List[SourceRef]:
        refs: List[SourceRef] = []
        for url in self._urls:
            normalized = normalize_repo_url(url)
            if normalized is None:
                logger.debug("Ignoring unsupported URL %s", url)
                continue
            refs.append(
                SourceRef(
                    kind=SourceKind.GIT,
                    location=normalized,
                    meta={"resolver": "repo_resolver", "origin": url},
                )
            )
        return dedupe_refs(refs)

    def candidate_urls(self) -> List[str]:
        return [ref.location for ref in self.source_refs()]


def normalize_repo_url(url: str) -> Optional[str]:
    """Return the canonical ``.git`` URL for a supported host, else ``None``."""
    if not url:
        return None
    for normalizer in _NORMALIZERS:
        normalized = normalizer(url)
        if normalized is not None:
            return normalized
    return None


def github_repo_url(url: str) -> Optional[str]:
    return _owner_repo_url(url, "github.com")


def bitbucket_repo_url(url: str) -> Optional[str]:
    return _owner_repo_url(url, "bitbucket.org")


def gitlab_repo_url(url: str) -> Optional[str]:
    path = _host_path(url, "gitlab.com")
    if path is None:
        return None
    segments = gitlab_repo_segments(path)
    if segments is None or len(segments) < 2:
        return None
    *namespace, repo = segments
    return f"https://gitlab.com/{'/'.join(namespace)}/{_strip_git_suffix(repo)}.git"


def gitlab_repo_segments(path: Sequence[str]) -> Optional[List[str]]:
    """Strip GitLab route markers from ``path`` to recover the project path."""
    if not path:
        return None
    if _is_gitlab_api_path(path):
        return None

    dash_index = _gitlab_dash_route_index(path)
    if dash_index is not None:
        return list(path[:dash_index])

    marker_index = _gitlab_legacy_route_index(path)
    if marker_index is not None:
        return list(path[:marker_index])

    return list(path)


def _gitlab_dash_route_index(path: Sequence[str]) -> Optional[int]:
    try:
        dash_index = path.index("-")
    except ValueError:
        return None
    if dash_index < 2 or dash_index + 1 >= len(path):
        return None
    if path[dash_index + 1] not in GITLAB_DASH_ROUTE_MARKERS:
        return None
    return dash_index


def _gitlab_legacy_route_index(path: Sequence[str]) -> Optional[int]:
    marker_index = next(
        (index for index, segment in enumerate(path) if segment in GITLAB_LEGACY_ROUTE_MARKERS),
        None,
    )
    if marker_index is None or marker_index < 2:
        return None
    # A legacy route needs a ref after the marker: /group/proj/tree/main
    if marker_index + 1 >= len(path):
        return None
    return marker_index


def _is_gitlab_api_path(path: Sequence[str]) -> bool:
    if path[0] != "api" or len(path) < 2:
        return False
    return _API_VERSION.fullmatch(path[1]) is not None


def _owner_repo_url(url: str, host: str) -> Optional[str]:
    path = _host_path(url, host)
    if path is None or len(path) < 2:
        return None
    owner, repo = path[0], path[1]
    return f"https://{host}/{owner}/{_strip_git_suffix(repo)}.git"


def _host_path(url: str, host: str) -> Optional[List[str]]:
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
    except ValueError:
        return None
    if hostname != host:
        return None
    segments = [segment for segment in parsed.path.split("/") if segment]
    return segments or None


def _strip_git_suffix(name: str) -> str:
    return name[: -len(".git")] if name.endswith(".git") else name


_NORMALIZERS: Sequence[Callable[[str], Optional[str]]] = (
    github_repo_url,
    gitlab_repo_url,
    bitbucket_repo_url,
)


__all__ = [
    "GITLAB_DASH_ROUTE_MARKERS",
    "GITLAB_LEGACY_ROUTE_MARKERS",
    "RepoResolver",
    "gitlab_repo_segments",
    "normalize_repo_url",
]
