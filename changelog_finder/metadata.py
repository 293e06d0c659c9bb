"""Package metadata sources: formula-like and cask-like targets."""

from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Protocol

import yaml

from .errors import MetadataError
from .logging import get_logger

logger = get_logger("metadata")

FORMULA = "formula"
CASK = "cask"


class PackageMetadata(Protocol):
    """Loose metadata of a package whose changelog is being located."""

    name: str

    @property
    def kind(self) -> str: ...

    def candidate_urls(self) -> List[Optional[str]]: ...


@dataclass(frozen=True)
class FormulaMetadata:
    """Formula-like target: head and stable URLs plus a homepage."""

    name: str
    head_url: Optional[str] = None
    homepage: Optional[str] = None
    stable_url: Optional[str] = None

    @property
    def kind(self) -> str:
        return FORMULA

    def candidate_urls(self) -> List[Optional[str]]:
        return [self.head_url, self.homepage, self.stable_url]


@dataclass(frozen=True)
class CaskMetadata:
    """Cask-like target: homepage plus a download URL."""

    name: str
    homepage: Optional[str] = None
    url: Optional[str] = None

    @property
    def kind(self) -> str:
        return CASK

    def candidate_urls(self) -> List[Optional[str]]:
        return [self.homepage, self.url]


def formula_from_brew_json(entry: Mapping[str, Any]) -> FormulaMetadata:
    urls = _as_dict(entry.get("urls"))
    return FormulaMetadata(
        name=_as_str(entry.get("full_name")) or _as_str(entry.get("name")) or "",
        head_url=_as_str(_as_dict(urls.get("head")).get("url")),
        homepage=_as_str(entry.get("homepage")),
        stable_url=_as_str(_as_dict(urls.get("stable")).get("url")),
    )


def cask_from_brew_json(entry: Mapping[str, Any]) -> CaskMetadata:
    return CaskMetadata(
        name=_as_str(entry.get("full_token")) or _as_str(entry.get("token")) or "",
        homepage=_as_str(entry.get("homepage")),
        url=_as_str(entry.get("url")),
    )


def metadata_from_mapping(data: Mapping[str, Any], *, name: Optional[str] = None) -> PackageMetadata:
    """Build metadata from a plain mapping such as a YAML metadata file.

    A ``type`` key selects the variant; without it, a mapping carrying ``head``
    or ``stable`` is a formula, anything else a cask.
    """
    if not isinstance(data, Mapping):
        raise MetadataError("Metadata must be a mapping")
    kind = _as_str(data.get("type"))
    resolved_name = name or _as_str(data.get("name")) or ""
    if kind is None:
        kind = FORMULA if ("head" in data or "stable" in data) else CASK
    if kind == FORMULA:
        return FormulaMetadata(
            name=resolved_name,
            head_url=_as_str(data.get("head")),
            homepage=_as_str(data.get("homepage")),
            stable_url=_as_str(data.get("stable")),
        )
    if kind == CASK:
        return CaskMetadata(
            name=resolved_name,
            homepage=_as_str(data.get("homepage")),
            url=_as_str(data.get("url")),
        )
    raise MetadataError(f"Unknown metadata type: {kind}")


def load_metadata_file(path: Path, *, name: Optional[str] = None) -> PackageMetadata:
    """Read a YAML (or JSON) metadata file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MetadataError(f"Could not read metadata file {path}: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise MetadataError(f"Failed to parse {path.name}: {exc}") from exc
    return metadata_from_mapping(data or {}, name=name)


class BrewMetadataProvider:
    """Looks up formula and cask metadata through ``brew info --json=v2``."""

    def __init__(self, runner: Callable[..., str] | None = None, *, brew: str = "brew") -> None:
        self._runner = runner or self._default_runner
        self._brew = brew

    def lookup(self, name: str, kind: Optional[str] = None) -> PackageMetadata:
        args = [self._brew, "info", "--json=v2"]
        if kind == FORMULA:
            args.append("--formula")
        elif kind == CASK:
            args.append("--cask")
        args.append(name)

        logger.debug("Looking up %s via %s", name, " ".join(args))
        try:
            output = self._runner(args)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise MetadataError(f"No available formula or cask with the name \"{name}\".") from exc

        try:
            payload = json.loads(output)
        except json.JSONDecodeError as exc:
            raise MetadataError(f"Unexpected output from brew info for {name}") from exc

        formulae = _as_list(payload.get("formulae")) if isinstance(payload, dict) else []
        casks = _as_list(payload.get("casks")) if isinstance(payload, dict) else []
        if kind != CASK and formulae:
            return formula_from_brew_json(_as_dict(formulae[0]))
        if kind != FORMULA and casks:
            return cask_from_brew_json(_as_dict(casks[0]))
        raise MetadataError(f"No available formula or cask with the name \"{name}\".")

    @staticmethod
    def _default_runner(args: Iterable[str]) -> str:
        completed = subprocess.run(
            list(args),
            check=True,
            text=True,
            capture_output=True,
        )
        return completed.stdout


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    return None


__all__ = [
    "CASK",
    "FORMULA",
    "BrewMetadataProvider",
    "CaskMetadata",
    "FormulaMetadata",
    "PackageMetadata",
    "load_metadata_file",
    "metadata_from_mapping",
]
