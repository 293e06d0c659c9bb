"""Retrieve matched file content from a bare clone."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..errors import ExecutionError
from ..logging import get_logger
from ..models import FetchedContent, FileMatch, SourceKind
from .checkout import RepoCheckout
from .commands import (
    GitCommandError,
    GitRunner,
    clone_command,
    default_runner,
    ls_tree_command,
    show_command,
)

FETCH_PREFIX = "changelog-finder-fetch-"

logger = get_logger("git.fetcher")


class FileFetcher:
    """Reads ``file_match.locator``, preferring the scanner's checkout."""

    def __init__(
        self,
        file_match: FileMatch,
        *,
        runner: GitRunner | None = None,
        git: str = "git",
        checkout_prefix: str = FETCH_PREFIX,
    ) -> None:
        self._file_match = file_match
        self._runner = runner or default_runner
        self._git = git
        self._checkout_prefix = checkout_prefix

    def fetch(self) -> Optional[FetchedContent]:
        if self._file_match.source.kind is not SourceKind.GIT:
            return None
        return self._fetch_git()

    # ------------------------------------------------------------------
    # Internals

    def _fetch_git(self) -> Optional[FetchedContent]:
        existing = self._existing_bare_repo()
        if existing is not None:
            try:
                fetched = self._fetch_from_bare_repo(existing)
            except GitCommandError as exc:
                logger.debug("Existing checkout %s unusable: %s", existing, exc)
                fetched = None
            if fetched is not None:
                return fetched
            logger.debug("Falling back to a fresh clone of %s", self._file_match.source.location)

        location = self._file_match.source.location
        try:
            with RepoCheckout.create(prefix=self._checkout_prefix) as checkout:
                logger.info("Cloning %s", location)
                self._runner(clone_command(self._git, location, checkout.bare_repo))
                return self._fetch_from_bare_repo(checkout.bare_repo)
        except GitCommandError as exc:
            raise ExecutionError(
                f"Failed to fetch changelog from {location}: {exc}",
                location=location,
                detail=exc.output,
            ) from exc

    def _existing_bare_repo(self) -> Optional[Path]:
        checkout = self._file_match.meta.get("checkout")
        if isinstance(checkout, RepoCheckout):
            return checkout.bare_repo

        bare_repo = self._file_match.meta.get("bare_repo")
        if isinstance(bare_repo, (str, Path)) and str(bare_repo):
            return Path(bare_repo)
        return None

    def _fetch_from_bare_repo(self, bare_repo: Path) -> Optional[FetchedContent]:
        if not bare_repo.is_dir():
            return None
        if not self._path_exists(bare_repo):
            return None

        content = self._runner(show_command(self._git, bare_repo, self._file_match.locator))
        return FetchedContent(
            source=self._file_match.source,
            path=self._file_match.path,
            locator=self._file_match.locator,
            content=content,
            meta={"fetcher": "git_show"},
        )

    def _path_exists(self, bare_repo: Path) -> bool:
        path = self._file_match.path
        output = self._runner(ls_tree_command(self._git, bare_repo, path))
        text = output.decode("utf-8", errors="surrogateescape")
        return any(line.rstrip("\n") == path for line in text.splitlines())


__all__ = ["FETCH_PREFIX", "FileFetcher"]
