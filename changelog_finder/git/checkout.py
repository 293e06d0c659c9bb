"""Scoped temporary directories holding a single bare clone."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from types import TracebackType
from typing import Optional, Type

from ..logging import get_logger

DEFAULT_PREFIX = "changelog-finder-"

_BARE_REPO_NAME = "repo.git"

logger = get_logger("git.checkout")


class RepoCheckout:
    """Owns a temporary directory; ``cleanup`` removes it exactly once."""

    def __init__(self, work_dir: Path, bare_repo: Path) -> None:
        self.work_dir = work_dir
        self.bare_repo = bare_repo

    @classmethod
    def create(cls, prefix: str = DEFAULT_PREFIX) -> "RepoCheckout":
        work_dir = Path(tempfile.mkdtemp(prefix=prefix))
        logger.debug("Created checkout directory %s", work_dir)
        return cls(work_dir=work_dir, bare_repo=work_dir / _BARE_REPO_NAME)

    @property
    def exists(self) -> bool:
        return self.bare_repo.is_dir()

    def cleanup(self) -> None:
        """Remove the working directory; a no-op when already removed."""
        if not self.work_dir.exists():
            return
        shutil.rmtree(self.work_dir)
        logger.debug("Removed checkout directory %s", self.work_dir)

    def __enter__(self) -> "RepoCheckout":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.cleanup()

    def __repr__(self) -> str:
        return f"RepoCheckout(work_dir={str(self.work_dir)!r})"


__all__ = ["DEFAULT_PREFIX", "RepoCheckout"]
