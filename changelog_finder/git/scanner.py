"""Find the first changelog-like file across candidate repositories."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..errors import ExecutionError
from ..logging import get_logger
from ..models import FileMatch, SourceKind, SourceRef
from ..patterns import first_matching_path
from .checkout import DEFAULT_PREFIX, RepoCheckout
from .commands import GitCommandError, GitRunner, clone_command, default_runner, ls_tree_command

logger = get_logger("git.scanner")


class FileScanner:
    """Shallow-clones each git source in turn and matches its file list."""

    def __init__(
        self,
        source_refs: Sequence[SourceRef],
        patterns: Sequence[str],
        *,
        runner: GitRunner | None = None,
        git: str = "git",
        checkout_prefix: str = DEFAULT_PREFIX,
    ) -> None:
        self._source_refs = list(source_refs)
        self._patterns = list(patterns)
        self._runner = runner or default_runner
        self._git = git
        self._checkout_prefix = checkout_prefix

    def first_match(self) -> Optional[FileMatch]:
        """Return the first match, keeping its checkout alive in ``meta``.

        Raises the last ``ExecutionError`` only when no source could be
        scanned at all.
        """
        last_error: ExecutionError | None = None
        scanned = False

        for source_ref in self._source_refs:
            if source_ref.kind is not SourceKind.GIT:
                logger.debug("Skipping non-git source %s", source_ref.location)
                continue
            try:
                match = self._scan_git_source(source_ref)
            except ExecutionError as exc:
                logger.debug("Scan failed for %s: %s", source_ref.location, exc)
                last_error = exc
                continue
            scanned = True
            if match is not None:
                return match

        if not scanned and last_error is not None:
            raise last_error
        return None

    # ------------------------------------------------------------------
    # Internals

    def _scan_git_source(self, source_ref: SourceRef) -> Optional[FileMatch]:
        checkout = RepoCheckout.create(prefix=self._checkout_prefix)
        keep_checkout = False
        try:
            logger.info("Cloning %s", source_ref.location)
            self._runner(clone_command(self._git, source_ref.location, checkout.bare_repo))
            tree_output = self._runner(ls_tree_command(self._git, checkout.bare_repo))
            files = _parse_file_list(tree_output)
            logger.debug("Found %d files in %s", len(files), source_ref.location)

            matched_path = first_matching_path(files, self._patterns)
            if matched_path is None:
                return None

            keep_checkout = True
            return FileMatch(
                source=source_ref,
                path=matched_path,
                locator=f"HEAD:{matched_path}",
                meta={"scanner": "git_ls_tree", "checkout": checkout},
            )
        except GitCommandError as exc:
            raise ExecutionError(
                f"Failed to scan repository {source_ref.location}: {exc}",
                location=source_ref.location,
                detail=exc.output,
            ) from exc
        finally:
            if not keep_checkout:
                checkout.cleanup()


def _parse_file_list(output: bytes) -> List[str]:
    text = output.decode("utf-8", errors="surrogateescape")
    return sorted(line.strip() for line in text.splitlines() if line.strip())


__all__ = ["FileScanner"]
