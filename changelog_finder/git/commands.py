"""Subprocess helpers for invoking git."""

from __future__ import annotations

import shlex
import subprocess
from pathlib import Path
from typing import Callable, Iterable

GitRunner = Callable[..., bytes]


class GitCommandError(RuntimeError):
    """Raised when a git subprocess exits unsuccessfully."""

    def __init__(self, args: Iterable[str], returncode: int, output: str) -> None:
        self.args_list = list(args)
        self.returncode = returncode
        self.output = output
        command = shlex.join(self.args_list)
        message = f"Failure while executing; `{command}` exited with {returncode}."
        if output.strip():
            message += f" Here's the output:\n{output.rstrip()}"
        super().__init__(message)


def default_runner(args: Iterable[str], *, cwd: Path | None = None) -> bytes:
    """Run ``args`` and return raw stdout, raising ``GitCommandError`` on failure."""
    command = list(args)
    try:
        completed = subprocess.run(
            command,
            cwd=str(cwd) if cwd is not None else None,
            check=False,
            capture_output=True,
        )
    except OSError as exc:
        raise GitCommandError(command, 127, str(exc)) from exc
    if completed.returncode != 0:
        output = (completed.stderr or completed.stdout or b"").decode("utf-8", errors="replace")
        raise GitCommandError(command, completed.returncode, output)
    return completed.stdout


def clone_command(git: str, location: str, destination: Path | str) -> list[str]:
    """Shallow, blob-filtered bare clone of ``location``."""
    return [
        git,
        "clone",
        "--bare",
        "--filter=blob:none",
        "--depth=1",
        location,
        str(destination),
    ]


def ls_tree_command(git: str, bare_repo: Path | str, path: str | None = None) -> list[str]:
    if path is None:
        return [git, "-C", str(bare_repo), "ls-tree", "-r", "--name-only", "HEAD"]
    return [git, "-C", str(bare_repo), "ls-tree", "--name-only", "HEAD", "--", path]


def show_command(git: str, bare_repo: Path | str, locator: str) -> list[str]:
    return [git, "-C", str(bare_repo), "show", locator]


__all__ = [
    "GitCommandError",
    "GitRunner",
    "clone_command",
    "default_runner",
    "ls_tree_command",
    "show_command",
]
