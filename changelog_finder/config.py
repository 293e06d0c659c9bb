"""Configuration loading for changelog-finder (.changelog-finder.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".changelog-finder.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class FinderConfig:
    """Represents the settings defined in .changelog-finder.yml."""

    root: Path
    patterns: List[str] = field(default_factory=list)
    allow_missing: bool = False
    git_binary: str = "git"
    brew_binary: str = "brew"
    checkout_prefix: Optional[str] = None
    log_file: Optional[Path] = None


def load_config(config_path: Path) -> FinderConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return FinderConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    log_file_str = _as_str(data.get("log_file"))
    log_file = None
    if log_file_str:
        log_file = Path(log_file_str).expanduser()
        if not log_file.is_absolute():
            log_file = root / log_file

    return FinderConfig(
        root=root,
        patterns=_as_str_list(data.get("patterns")),
        allow_missing=_as_bool(data.get("allow_missing")) or False,
        git_binary=_as_str(data.get("git_binary")) or "git",
        brew_binary=_as_str(data.get("brew_binary")) or "brew",
        checkout_prefix=_as_str(data.get("checkout_prefix")),
        log_file=log_file,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "FinderConfig", "load_config"]
