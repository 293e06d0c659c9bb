"""Browser URLs for matched changelog files on known hosting UIs."""

from __future__ import annotations

import webbrowser
from typing import Optional
from urllib.parse import quote_plus, urlparse

from .logging import get_logger
from .models import FileMatch

logger = get_logger("browser")

_BLOB_TEMPLATES = {
    "github.com": "/blob/HEAD/",
    "gitlab.com": "/-/blob/HEAD/",
    "bitbucket.org": "/src/HEAD/",
}


def build_browser_url(file_match: FileMatch) -> Optional[str]:
    """Return a human-viewable URL for ``file_match`` or ``None`` for unknown hosts."""
    repo = file_match.source.location
    try:
        host = urlparse(repo).hostname
    except ValueError:
        return None
    template = _BLOB_TEMPLATES.get(host or "")
    if template is None:
        return None
    base = repo[: -len(".git")] if repo.endswith(".git") else repo
    return f"{base}{template}{encode_url_path(file_match.path)}"


def encode_url_path(path: str) -> str:
    return "/".join(quote_plus(part, safe="*").replace("+", "%20") for part in path.split("/"))


def open_browser_url(url: str) -> bool:
    """Open ``url`` in the user's browser; failures are logged, not raised."""
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as exc:
        logger.warning("Could not open browser automatically: %s", exc)
        return False
    if not opened:
        logger.warning("Could not open browser automatically")
    return opened


__all__ = ["build_browser_url", "encode_url_path", "open_browser_url"]
