"""Tests for the changelog pipeline orchestration."""

from __future__ import annotations

from pathlib import Path

from changelog_finder.metadata import CaskMetadata, FormulaMetadata
from changelog_finder.orchestrator import (
    EXIT_EXECUTION_ERROR,
    EXIT_MISSING,
    EXIT_OK,
    ChangelogFinder,
    OutcomeStatus,
    OutputMode,
)
from tests._fixtures.fake_git import FakeGit

REPO = "https://github.com/owner/tool.git"


def _formula(**urls: str) -> FormulaMetadata:
    return FormulaMetadata(name="tool", **urls)


def _clone_dirs(fake_git: FakeGit) -> list[Path]:
    return [Path(call[-1]).parent for call in fake_git.commands("clone")]


def test_prints_changelog_content(fake_git: FakeGit) -> None:
    fake_git.add_repo(REPO, {"CHANGELOG.md": "# Changes\n", "NEWS": "news"})
    finder = ChangelogFinder(runner=fake_git)

    outcome = finder.run(_formula(homepage="https://github.com/owner/tool"))

    assert outcome.status is OutcomeStatus.FOUND
    assert outcome.exit_code == EXIT_OK
    assert outcome.output == "# Changes\n"
    assert len(fake_git.commands("clone")) == 1
    assert all(not directory.exists() for directory in _clone_dirs(fake_git))


def test_custom_patterns_override_defaults(fake_git: FakeGit) -> None:
    fake_git.add_repo(REPO, {"CHANGELOG.md": "changelog", "NEWS": "news"})

    outcome = ChangelogFinder(runner=fake_git).run(
        _formula(head_url=REPO),
        [" NEWS ", None, ""],
    )

    assert outcome.output == "news"


def test_unsupported_host_is_not_found(fake_git: FakeGit) -> None:
    outcome = ChangelogFinder(runner=fake_git).run(
        CaskMetadata(name="tool", homepage="https://git.sr.ht/~owner/tool"),
        ["*"],
    )

    assert outcome.status is OutcomeStatus.NOT_FOUND
    assert outcome.exit_code == EXIT_MISSING
    assert outcome.message == "Changelog not found for tool"
    assert fake_git.calls == []


def test_allow_missing_suppresses_not_found(fake_git: FakeGit) -> None:
    fake_git.add_repo(REPO, {"README.md": "readme"})

    outcome = ChangelogFinder(runner=fake_git).run(_formula(head_url=REPO), allow_missing=True)

    assert outcome.status is OutcomeStatus.NOT_FOUND
    assert outcome.exit_code == EXIT_OK
    assert outcome.message is None


def test_binary_content_is_reported_separately(fake_git: FakeGit) -> None:
    fake_git.add_repo(REPO, {"CHANGELOG.bin": b"\x00\x01\x02"})

    outcome = ChangelogFinder(runner=fake_git).run(_formula(head_url=REPO))

    assert outcome.status is OutcomeStatus.BINARY
    assert outcome.exit_code == EXIT_MISSING
    assert outcome.message == "Changelog appears to be binary for tool"
    assert all(not directory.exists() for directory in _clone_dirs(fake_git))


def test_execution_error_when_all_sources_fail(fake_git: FakeGit) -> None:
    fake_git.fail(REPO, "fatal: could not read Username")

    outcome = ChangelogFinder(runner=fake_git).run(_formula(head_url=REPO))

    assert outcome.status is OutcomeStatus.ERROR
    assert outcome.exit_code == EXIT_EXECUTION_ERROR
    assert outcome.message == f"Failed to scan repository {REPO}."
    assert outcome.error is not None
    assert "could not read Username" in str(outcome.error)


def test_print_url_mode_skips_fetch(fake_git: FakeGit) -> None:
    fake_git.add_repo(REPO, {"docs/Release Notes.md": "x"})

    outcome = ChangelogFinder(runner=fake_git).run(
        _formula(head_url=REPO),
        ["Release*"],
        mode=OutputMode.PRINT_URL,
    )

    assert outcome.status is OutcomeStatus.URL
    assert outcome.output == "https://github.com/owner/tool/blob/HEAD/docs/Release%20Notes.md"
    assert fake_git.commands("show") == []
    assert all(not directory.exists() for directory in _clone_dirs(fake_git))


def test_open_mode_invokes_browser(fake_git: FakeGit) -> None:
    fake_git.add_repo(REPO, {"CHANGELOG.md": "x"})
    opened: list[str] = []

    def opener(url: str) -> bool:
        opened.append(url)
        return True

    outcome = ChangelogFinder(runner=fake_git, browser_opener=opener).run(
        _formula(head_url=REPO),
        mode=OutputMode.OPEN,
    )

    assert outcome.output == "https://github.com/owner/tool/blob/HEAD/CHANGELOG.md"
    assert opened == [outcome.output]


def test_checkout_prefix_is_applied(fake_git: FakeGit) -> None:
    fake_git.add_repo(REPO, {"CHANGELOG.md": "x"})

    ChangelogFinder(runner=fake_git, checkout_prefix="cf-test-").run(_formula(head_url=REPO))

    assert _clone_dirs(fake_git)[0].name.startswith("cf-test-")
