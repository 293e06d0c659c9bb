"""Pipeline orchestration: resolve, scan, fetch, classify."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from .browser import build_browser_url, open_browser_url
from .errors import ExecutionError, user_facing_error_message
from .git.checkout import DEFAULT_PREFIX, RepoCheckout
from .git.commands import GitRunner
from .git.fetcher import FETCH_PREFIX, FileFetcher
from .git.scanner import FileScanner
from .logging import get_logger, log_stage
from .metadata import PackageMetadata
from .models import FetchedContent, FileMatch, SourceRef
from .output import OutputProcessor
from .patterns import select_patterns
from .resolver import RepoResolver

logger = get_logger("orchestrator")

EXIT_OK = 0
EXIT_MISSING = 1
EXIT_EXECUTION_ERROR = 2


class OutputMode(str, Enum):
    """What to do with a found changelog."""

    CONTENT = "content"
    PRINT_URL = "print_url"
    OPEN = "open"


class OutcomeStatus(str, Enum):
    FOUND = "found"
    URL = "url"
    NOT_FOUND = "not_found"
    BINARY = "binary"
    ERROR = "error"


@dataclass
class Outcome:
    """Result of a changelog lookup, rendered by the command line."""

    status: OutcomeStatus
    exit_code: int = EXIT_OK
    output: Optional[str] = None
    message: Optional[str] = None
    error: Optional[ExecutionError] = None


class ChangelogFinder:
    """Coordinates the resolve → scan → fetch → process pipeline."""

    def __init__(
        self,
        *,
        runner: GitRunner | None = None,
        git: str = "git",
        checkout_prefix: str | None = None,
        browser_opener: Callable[[str], bool] | None = None,
    ) -> None:
        self._runner = runner
        self._git = git
        self._checkout_prefix = checkout_prefix
        self._browser_opener = browser_opener or open_browser_url

    def run(
        self,
        metadata: PackageMetadata,
        patterns: Optional[Sequence[Optional[str]]] = None,
        *,
        mode: OutputMode = OutputMode.CONTENT,
        allow_missing: bool = False,
    ) -> Outcome:
        file_match: FileMatch | None = None
        try:
            selected = select_patterns(patterns)
            log_stage(logger, "select_patterns", f"count={len(selected)} values={', '.join(selected)}")

            logger.info("Resolving repository URL candidates...")
            source_refs = self.resolve(metadata)
            log_stage(logger, "resolve_sources", _source_refs_text(source_refs))
            if source_refs:
                logger.info("Using candidate source: %s", source_refs[0].location)
            else:
                logger.info("No repository candidates resolved from metadata")

            logger.info("Scanning repository tree for changelog files...")
            file_match = self.scan(source_refs, selected)
            log_stage(
                logger,
                "scan_files",
                "(none)" if file_match is None else f"{file_match.path} via {file_match.locator}",
            )
            if file_match is None:
                logger.info("No changelog files matched current patterns")
                return _missing(f"Changelog not found for {metadata.name}", allow_missing)
            logger.info("Selected changelog file: %s", file_match.path)

            if mode is not OutputMode.CONTENT:
                return self._render_url(file_match, metadata, mode, allow_missing)

            logger.info("Fetching changelog content...")
            fetched = self.fetch(file_match)
            log_stage(
                logger,
                "fetch_file",
                "(none)" if fetched is None else f"{fetched.path} bytes={len(fetched.content)}",
            )
            if fetched is None:
                logger.info("Could not fetch selected changelog file")
                return _missing(f"Changelog not found for {metadata.name}", allow_missing)

            logger.info("Processing changelog content...")
            processed = OutputProcessor(fetched).process()
            log_stage(
                logger,
                "process_output",
                "(none)" if processed is None else f"bytes={len(fetched.content)}",
            )
            if processed is None:
                logger.info("Selected changelog content looks binary and was skipped")
                outcome = _missing(f"Changelog appears to be binary for {metadata.name}", allow_missing)
                outcome.status = OutcomeStatus.BINARY
                return outcome

            return Outcome(status=OutcomeStatus.FOUND, output=processed)
        except ExecutionError as exc:
            log_stage(logger, "error", str(exc))
            return Outcome(
                status=OutcomeStatus.ERROR,
                exit_code=EXIT_EXECUTION_ERROR,
                message=user_facing_error_message(str(exc)),
                error=exc,
            )
        finally:
            _cleanup_scanner_checkout(file_match)

    def resolve(self, metadata: PackageMetadata) -> list[SourceRef]:
        return RepoResolver.from_metadata(metadata).source_refs()

    def scan(self, source_refs: Sequence[SourceRef], patterns: Sequence[str]) -> FileMatch | None:
        return FileScanner(
            source_refs,
            patterns,
            runner=self._runner,
            git=self._git,
            checkout_prefix=self._checkout_prefix or DEFAULT_PREFIX,
        ).first_match()

    def fetch(self, file_match: FileMatch) -> FetchedContent | None:
        return FileFetcher(
            file_match,
            runner=self._runner,
            git=self._git,
            checkout_prefix=f"{self._checkout_prefix}fetch-" if self._checkout_prefix else FETCH_PREFIX,
        ).fetch()

    def _render_url(
        self,
        file_match: FileMatch,
        metadata: PackageMetadata,
        mode: OutputMode,
        allow_missing: bool,
    ) -> Outcome:
        browser_url = build_browser_url(file_match)
        log_stage(logger, f"render_output_{mode.value}", browser_url or "(no browser URL)")
        if browser_url is None:
            return _missing(f"Changelog URL not available for {metadata.name}", allow_missing)
        if mode is OutputMode.OPEN:
            logger.info("Opening changelog in browser...")
            self._browser_opener(browser_url)
        return Outcome(status=OutcomeStatus.URL, output=browser_url)


def _missing(message: str, allow_missing: bool) -> Outcome:
    if allow_missing:
        log_stage(logger, "missing", f"allowed {message}")
        return Outcome(status=OutcomeStatus.NOT_FOUND)
    log_stage(logger, "missing", f"error {message}")
    return Outcome(status=OutcomeStatus.NOT_FOUND, exit_code=EXIT_MISSING, message=message)


def _cleanup_scanner_checkout(file_match: FileMatch | None) -> None:
    if file_match is None:
        return
    checkout = file_match.meta.get("checkout")
    if not isinstance(checkout, RepoCheckout):
        return
    try:
        checkout.cleanup()
    except OSError as exc:
        logger.debug("cleanup scanner checkout failed: %s", exc)


def _source_refs_text(source_refs: Sequence[SourceRef]) -> str:
    if not source_refs:
        return "(none)"
    return ", ".join(f"{ref.kind.value}:{ref.location}" for ref in source_refs)


__all__ = [
    "EXIT_EXECUTION_ERROR",
    "EXIT_MISSING",
    "EXIT_OK",
    "ChangelogFinder",
    "Outcome",
    "OutcomeStatus",
    "OutputMode",
]
