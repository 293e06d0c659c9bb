"""Tests for the git file fetcher."""

from __future__ import annotations

from pathlib import Path

import pytest

from changelog_finder.errors import ExecutionError
from changelog_finder.git.checkout import RepoCheckout
from changelog_finder.git.fetcher import FileFetcher
from changelog_finder.git.scanner import FileScanner
from changelog_finder.models import FileMatch, SourceKind, SourceRef
from tests._fixtures.fake_git import FakeGit

REPO = "https://github.com/owner/repo.git"


def _match(path: str = "CHANGELOG.md", *, meta: dict | None = None, kind: SourceKind = SourceKind.GIT) -> FileMatch:
    return FileMatch(
        source=SourceRef(kind=kind, location=REPO),
        path=path,
        locator=f"HEAD:{path}",
        meta=meta or {},
    )


def test_fetches_content_from_git_locator(fake_git: FakeGit) -> None:
    fake_git.add_repo(REPO, {"CHANGELOG.md": "## 1.0\n- first\n"})

    fetched = FileFetcher(_match(), runner=fake_git).fetch()

    assert fetched is not None
    assert fetched.content == b"## 1.0\n- first\n"
    assert fetched.path == "CHANGELOG.md"
    assert fetched.locator == "HEAD:CHANGELOG.md"
    assert fetched.meta["fetcher"] == "git_show"
    assert fake_git.commands("show")[0][-2:] == ["show", "HEAD:CHANGELOG.md"]


def test_fresh_clone_checkout_is_released(fake_git: FakeGit) -> None:
    fake_git.add_repo(REPO, {"CHANGELOG.md": "x"})

    FileFetcher(_match(), runner=fake_git).fetch()

    clone_dir = Path(fake_git.commands("clone")[0][-1])
    assert not clone_dir.parent.exists()


def test_returns_none_for_non_git_source(fake_git: FakeGit) -> None:
    assert FileFetcher(_match(kind=SourceKind.WEB), runner=fake_git).fetch() is None
    assert fake_git.calls == []


def test_returns_none_when_git_locator_is_missing(fake_git: FakeGit) -> None:
    fake_git.add_repo(REPO, {"README.md": "readme"})

    assert FileFetcher(_match("MISSING.md"), runner=fake_git).fetch() is None
    assert fake_git.commands("show") == []


def test_reuses_existing_checkout_from_scanner_metadata(fake_git: FakeGit) -> None:
    fake_git.add_repo(REPO, {"CHANGELOG.md": "from scan"})
    match = FileScanner([SourceRef(kind=SourceKind.GIT, location=REPO)], ["CHANGELOG*"], runner=fake_git).first_match()
    assert match is not None

    try:
        fetched = FileFetcher(match, runner=fake_git).fetch()
    finally:
        match.meta["checkout"].cleanup()

    assert fetched is not None
    assert fetched.content == b"from scan"
    assert len(fake_git.commands("clone")) == 1


def test_reuses_bare_repo_path_from_metadata(fake_git: FakeGit, tmp_path: Path) -> None:
    fake_git.add_repo(REPO, {"CHANGELOG.md": "bare"})
    bare_repo = tmp_path / "repo.git"
    bare_repo.mkdir()
    fake_git.register_clone(bare_repo, REPO)

    fetched = FileFetcher(_match(meta={"bare_repo": str(bare_repo)}), runner=fake_git).fetch()

    assert fetched is not None
    assert fetched.content == b"bare"
    assert fake_git.commands("clone") == []


def test_falls_back_to_fresh_clone_when_checkout_is_missing(fake_git: FakeGit) -> None:
    fake_git.add_repo(REPO, {"CHANGELOG.md": "recloned"})
    stale = RepoCheckout.create(prefix="changelog-finder-test-")
    stale.cleanup()

    fetched = FileFetcher(_match(meta={"checkout": stale}), runner=fake_git).fetch()

    assert fetched is not None
    assert fetched.content == b"recloned"
    assert len(fake_git.commands("clone")) == 1


def test_falls_back_when_path_no_longer_resolves_in_checkout(fake_git: FakeGit, tmp_path: Path) -> None:
    stale_location = "https://github.com/owner/stale.git"
    fake_git.add_repo(stale_location, {"OTHER.md": "x"})
    fake_git.add_repo(REPO, {"CHANGELOG.md": "fresh"})
    bare_repo = tmp_path / "stale.git"
    bare_repo.mkdir()
    fake_git.register_clone(bare_repo, stale_location)

    fetched = FileFetcher(_match(meta={"bare_repo": bare_repo}), runner=fake_git).fetch()

    assert fetched is not None
    assert fetched.content == b"fresh"


def test_clone_failure_raises_execution_error(fake_git: FakeGit) -> None:
    fake_git.fail(REPO, "fatal: Authentication failed")

    with pytest.raises(ExecutionError) as excinfo:
        FileFetcher(_match(), runner=fake_git).fetch()

    message = str(excinfo.value)
    assert message.startswith(f"Failed to fetch changelog from {REPO}: Failure while executing;")
    assert "Authentication failed" in message
    clone_dir = Path(fake_git.commands("clone")[0][-1])
    assert not clone_dir.parent.exists()
