"""Git-backed scanning and fetching stages."""

from .checkout import RepoCheckout
from .commands import GitCommandError
from .fetcher import FileFetcher
from .scanner import FileScanner

__all__ = ["FileFetcher", "FileScanner", "GitCommandError", "RepoCheckout"]
