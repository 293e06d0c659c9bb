from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.fake_git import FakeGit
from tests._fixtures.git_repo import GitRepoBuilder


@pytest.fixture
def fake_git() -> FakeGit:
    """Provide an in-memory git runner."""
    return FakeGit()


@pytest.fixture
def git_repos(tmp_path: Path) -> GitRepoBuilder:
    """Provide a builder for real git repositories rooted at the pytest tmp_path."""
    return GitRepoBuilder(tmp_path / "sources")
