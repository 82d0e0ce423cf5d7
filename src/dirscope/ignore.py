"""
Layered ignore rules for one scan root.

Layers are added in a fixed order so later rules (user patterns) can negate
earlier ones:

1. the root's own ``.gitignore``
2. the VCS set (``.git`` and its contents)
3. the dotfile set (any segment starting with ``.`` plus OS metadata files)
4. user exclude patterns
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .config import ScanSettings
from .patterns import GitWildMatchMatcher, compile_patterns, prepare_patterns

logger = logging.getLogger(__name__)

VCS_EXCLUDES: List[str] = [
    "/.git",
    "/.git/**",
]

DOTFILE_EXCLUDES: List[str] = [
    ".*",
    ".*/**",
    "Thumbs.db",
    "desktop.ini",
]

# Suggestions only; none of these is applied unless a caller adds it.
COMMON_EXCLUSIONS: List[str] = [
    "node_modules",
    "dist",
    "build",
    "coverage",
    "__pycache__",
    "*.log",
]


def load_gitignore(root: Path) -> List[str]:
    """Return the non-comment lines of ``root/.gitignore``.

    A missing or unreadable file yields an empty list.
    """
    gitignore_path = Path(root) / ".gitignore"
    try:
        if not gitignore_path.is_file():
            return []
        with gitignore_path.open("r", encoding="utf-8", errors="replace") as fh:
            lines = [ln.rstrip("\r\n") for ln in fh]
    except OSError as e:
        logger.warning("Could not read %s: %s", gitignore_path, e)
        return []
    return [
        ln.strip().replace("\\", "/")
        for ln in lines
        if ln.strip() and not ln.lstrip().startswith("#")
    ]


class IgnoreSet:
    """All exclusion layers for *root*, compiled into one gitignore matcher."""

    def __init__(
        self,
        root: Path,
        exclude_patterns: Iterable[str] = (),
        settings: Optional[ScanSettings] = None,
    ):
        self.root = Path(root)
        self.settings = settings or ScanSettings()
        self.layers: Dict[str, List[str]] = {}

        if self.settings.respect_gitignore:
            self.layers["gitignore"] = load_gitignore(self.root)
        if self.settings.ignore_vcs:
            self.layers["vcs"] = list(VCS_EXCLUDES)
        if self.settings.ignore_dotfiles:
            self.layers["dotfiles"] = list(DOTFILE_EXCLUDES)
        self.layers["user"] = prepare_patterns(exclude_patterns, self.root)

        self.matcher: GitWildMatchMatcher = compile_patterns(self.rules)

    @property
    def rules(self) -> List[str]:
        return [rule for layer in self.layers.values() for rule in layer]

    def ignores(self, path: str, is_dir: bool = False) -> bool:
        return self.matcher.matches(path, is_dir)

    def ignores_entry(self, path: str, is_dir: bool = False) -> bool:
        """Match *path* without consulting its parent directories."""
        return self.matcher.matches_entry(path, is_dir)

    def describe(self) -> dict:
        return {
            "root": str(self.root),
            "settings": self.settings.to_dict(),
            "layers": {name: list(rules) for name, rules in self.layers.items()},
            "compiled": len(self.matcher),
        }
