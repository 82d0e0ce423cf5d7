"""
Optional allow-list of file globs.

Only files are filtered; directories always pass so the folder skeleton
stays intact even when most files are dropped.
"""

from __future__ import annotations

import logging

from .config import PatternInput, split_patterns
from .patterns import RegexGlobMatcher

logger = logging.getLogger(__name__)


class IncludeFilter:
    def __init__(self, include_patterns: PatternInput = ""):
        self.patterns = split_patterns(include_patterns)
        self.matcher = RegexGlobMatcher(self.patterns)

    def __bool__(self) -> bool:
        return len(self.matcher) > 0

    def should_include(self, path: str, is_dir: bool = False) -> bool:
        if is_dir or not self:
            return True
        try:
            return self.matcher.matches(path)
        except Exception as e:
            logger.warning("Could not check include patterns for %s: %s", path, e)
            return False
