"""Text/binary classification of fetched changelog content."""

from __future__ import annotations

from typing import Iterable, Optional

from .models import FetchedContent

# Heuristic constants; tunable rather than load-bearing.
CONTROL_RATIO_THRESHOLD = 0.30
RAW_SAMPLE_SIZE = 4096

_ALLOWED_CONTROLS = frozenset({9, 10, 13})


class OutputProcessor:
    """Returns printable text for ``fetched_content`` or ``None`` when binary."""

    def __init__(self, fetched_content: FetchedContent) -> None:
        self._fetched_content = fetched_content

    def process(self) -> Optional[str]:
        content = self._fetched_content.content
        if is_binary(content):
            return None
        # Undecodable bytes survive as surrogates and re-encode to the original bytes.
        return content.decode("utf-8", errors="surrogateescape")


def is_binary(content: bytes) -> bool:
    if b"\x00" in content:
        return True
    if not content:
        return False

    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError:
        return _control_ratio(content[:RAW_SAMPLE_SIZE]) > CONTROL_RATIO_THRESHOLD

    return _control_ratio(ord(char) for char in text) > CONTROL_RATIO_THRESHOLD


def _control_ratio(values: Iterable[int]) -> float:
    total = 0
    control = 0
    for value in values:
        total += 1
        if value < 32 and value not in _ALLOWED_CONTROLS:
            control += 1
    if total == 0:
        return 0.0
    return control / total


__all__ = ["CONTROL_RATIO_THRESHOLD", "RAW_SAMPLE_SIZE", "OutputProcessor", "is_binary"]
