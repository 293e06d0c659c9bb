"""Error types raised by the changelog pipeline."""

from __future__ import annotations

_EXECUTION_MARKER = ": Failure while executing;"


class ExecutionError(RuntimeError):
    """Raised when a git invocation fails for operational reasons."""

    def __init__(self, message: str, *, location: str | None = None, detail: str | None = None) -> None:
        super().__init__(message)
        self.location = location
        self.detail = detail


class MetadataError(RuntimeError):
    """Raised when package metadata cannot be resolved."""


def user_facing_error_message(message: str) -> str:
    """Return a single concise sentence for ``message``.

    Keeps the text before the git failure marker when present, otherwise the
    first line.
    """
    if _EXECUTION_MARKER in message:
        return f"{message.split(_EXECUTION_MARKER, 1)[0]}."
    lines = message.splitlines()
    return lines[0] if lines else ""


__all__ = ["ExecutionError", "MetadataError", "user_facing_error_message"]
