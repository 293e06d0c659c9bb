"""Locate and print the changelog of a package from its loose metadata."""

from .metadata import CaskMetadata, FormulaMetadata
from .models import FetchedContent, FileMatch, SourceKind, SourceRef
from .orchestrator import ChangelogFinder, Outcome, OutcomeStatus, OutputMode

__version__ = "0.1.0"

__all__ = [
    "CaskMetadata",
    "ChangelogFinder",
    "FetchedContent",
    "FileMatch",
    "FormulaMetadata",
    "Outcome",
    "OutcomeStatus",
    "OutputMode",
    "SourceKind",
    "SourceRef",
]
