"""In-memory stand-in for the git subprocess runner used by scanner and fetcher tests."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Mapping

from changelog_finder.git.commands import GitCommandError


class FakeGit:
    """Serves clone/ls-tree/show for registered repositories.

    Cloning creates the destination directory so on-disk checks behave like
    a real bare repository.
    """

    def __init__(self) -> None:
        self.repos: Dict[str, Dict[str, bytes]] = {}
        self.failing: Dict[str, str] = {}
        self.calls: List[List[str]] = []
        self._clones: Dict[str, str] = {}

    def add_repo(self, location: str, files: Mapping[str, bytes | str]) -> None:
        self.repos[location] = {
            path: content.encode("utf-8") if isinstance(content, str) else content
            for path, content in files.items()
        }

    def fail(self, location: str, output: str = "fatal: repository not found") -> None:
        self.failing[location] = output

    def register_clone(self, bare_repo: Path, location: str) -> None:
        self._clones[str(bare_repo)] = location

    def commands(self, name: str) -> List[List[str]]:
        return [call for call in self.calls if name in call]

    def __call__(self, args: Iterable[str], *, cwd: Path | None = None) -> bytes:
        args = list(args)
        self.calls.append(args)
        if "clone" in args:
            return self._clone(args)
        bare_repo = args[args.index("-C") + 1]
        files = self.repos[self._clones[bare_repo]]
        if "ls-tree" in args:
            if "--" in args:
                path = args[args.index("--") + 1]
                return f"{path}\n".encode("utf-8") if path in files else b""
            return "".join(f"{path}\n" for path in files).encode("utf-8")
        if "show" in args:
            path = args[-1].split(":", 1)[1]
            if path not in files:
                raise GitCommandError(args, 128, f"fatal: path '{path}' does not exist in 'HEAD'")
            return files[path]
        raise AssertionError(f"unexpected git call: {args}")

    def _clone(self, args: List[str]) -> bytes:
        location, destination = args[-2], args[-1]
        if location in self.failing:
            raise GitCommandError(args, 128, self.failing[location])
        if location not in self.repos:
            raise GitCommandError(args, 128, f"fatal: repository '{location}' not found")
        Path(destination).mkdir(parents=True)
        self._clones[destination] = location
        return b""


__all__ = ["FakeGit"]
