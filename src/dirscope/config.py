"""
Scan settings and pattern configuration helpers.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Union

from .errors import ConfigFileError

PatternInput = Union[str, Iterable[str], None]

# Persisted settings use camelCase keys; both spellings are accepted.
_SETTING_KEYS = {
    "respect_gitignore": ("respect_gitignore", "respectRepoIgnore", "respectGitignore"),
    "ignore_vcs": ("ignore_vcs", "ignoreVcs"),
    "ignore_dotfiles": ("ignore_dotfiles", "ignoreDotfiles"),
}


@dataclass(frozen=True)
class ScanSettings:
    """Toggles for the three built-in rule layers."""

    respect_gitignore: bool = True
    ignore_vcs: bool = True
    ignore_dotfiles: bool = True

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "ScanSettings":
        if not data:
            return cls()
        values = {}
        for field_name, keys in _SETTING_KEYS.items():
            for key in keys:
                if key in data and data[key] is not None:
                    values[field_name] = bool(data[key])
                    break
        return cls(**values)

    def to_dict(self) -> dict:
        return {
            "respectRepoIgnore": self.respect_gitignore,
            "ignoreVcs": self.ignore_vcs,
            "ignoreDotfiles": self.ignore_dotfiles,
        }


def coerce_settings(settings: Union[ScanSettings, Mapping[str, Any], None]) -> ScanSettings:
    if isinstance(settings, ScanSettings):
        return settings
    return ScanSettings.from_mapping(settings)


def split_patterns(value: PatternInput) -> List[str]:
    """Split comma-separated configuration into trimmed, non-empty patterns.

    Sequences are accepted as-is (each item trimmed) so callers holding an
    already-split list do not need to join it again.
    """
    if not value:
        return []
    if isinstance(value, str):
        items: Iterable[str] = value.split(",")
    else:
        items = value
    return [p.strip() for p in items if p and p.strip()]


def load_pattern_file(config_path: Path) -> List[str]:
    """Read newline-separated patterns, skipping blanks and ``#`` comments."""
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigFileError(f"Config file '{config_path}' does not exist")
    if not config_path.is_file():
        raise ConfigFileError(f"'{config_path}' is not a file")
    try:
        with config_path.open("r", encoding="utf-8") as fh:
            return [
                ln.strip()
                for ln in fh
                if ln.strip() and not ln.lstrip().startswith("#")
            ]
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(f"Could not read config file '{config_path}': {e}")
