"""
Per-root exclusion decisions with a per-instance memo.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .config import PatternInput, ScanSettings, coerce_settings, split_patterns
from .ignore import IgnoreSet
from .patterns import normalize_path

logger = logging.getLogger(__name__)


class ExclusionResolver:
    """Answer "is this path excluded" for one scan root.

    Answers are cached by (relative path, is_dir). The cache belongs to
    this instance only and is never invalidated automatically: the walker
    clears it at the start of each scan, and callers that change patterns
    build a new resolver.
    """

    def __init__(
        self,
        root: Union[str, Path],
        exclude_patterns: PatternInput = "",
        settings: Union[ScanSettings, Mapping[str, Any], None] = None,
    ):
        self.root = Path(os.path.abspath(root))
        self.settings = coerce_settings(settings)
        self.exclude_patterns = split_patterns(exclude_patterns)
        self.ignore_set = IgnoreSet(self.root, self.exclude_patterns, self.settings)
        self._cache: Dict[Tuple[str, bool], bool] = {}

    def relative(self, path: Union[str, Path]) -> Optional[str]:
        """Return *path* relative to the root, or None when it escapes it."""
        text = str(path).replace("\\", "/")
        if os.path.isabs(text):
            rel = os.path.relpath(os.path.normpath(text), self.root)
        else:
            rel = os.path.normpath(text) if text else ""
        rel = normalize_path(rel.replace(os.sep, "/"))
        if rel == ".." or rel.startswith("../"):
            return None
        return rel

    def is_excluded(self, path: Union[str, Path], is_dir: Optional[bool] = None) -> bool:
        try:
            rel = self.relative(path)
            if rel is None:
                logger.debug("Path escapes root %s: %s", self.root, path)
                return False
            if not rel:
                return False
            return self._resolve(rel, is_dir)
        except Exception as e:
            logger.warning("Could not check exclusion for %s: %s", path, e)
            return False

    def _resolve(self, rel: str, is_dir: Optional[bool]) -> bool:
        if is_dir is None:
            is_dir = (self.root / rel).is_dir()
        # directory-only rules give different answers for the same path
        key = (rel, is_dir)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        parent = rel.rpartition("/")[0]
        excluded = bool(parent) and self._resolve(parent, True)
        if not excluded:
            excluded = self.ignore_set.ignores_entry(rel, is_dir)
        self._cache[key] = excluded
        return excluded

    def clear_cache(self) -> None:
        self._cache.clear()

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def describe(self) -> dict:
        info = self.ignore_set.describe()
        info["patterns"] = list(self.exclude_patterns)
        info["cached"] = len(self._cache)
        return info
