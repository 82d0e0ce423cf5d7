"""
Re-flag an existing tree after a pattern edit, without walking the disk.

The result depends only on the tree's shape and the new pattern set: a fresh
resolver is built for every update, and node types stand in for ``is_dir``
checks. Only the root ``.gitignore`` and directory-pattern expansion read
the filesystem, exactly as a full scan would.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .config import PatternInput, ScanSettings
from .exclusion import ExclusionResolver
from .include import IncludeFilter
from .tree import TreeNode

logger = logging.getLogger(__name__)


class ExclusionUpdater:
    def __init__(
        self,
        root: Union[str, Path],
        exclude_patterns: PatternInput = "",
        include_patterns: PatternInput = "",
        settings: Union[ScanSettings, Mapping[str, Any], None] = None,
    ):
        self.resolver = ExclusionResolver(root, exclude_patterns, settings)
        self.include_filter = IncludeFilter(include_patterns)

    def apply(self, tree: TreeNode, changed_pattern: Optional[str] = None) -> TreeNode:
        """Return a re-flagged copy of *tree*; the input is left untouched."""
        if changed_pattern:
            logger.debug("Re-flagging tree %s after change to '%s'", tree.path, changed_pattern)
        self.resolver.clear_cache()
        return self._annotate(tree, is_root=True)

    def _annotate(self, node: TreeNode, is_root: bool = False) -> TreeNode:
        excluded = False if is_root else self.resolver.is_excluded(node.path, is_dir=node.is_folder)
        if not node.is_folder:
            return replace(node, excluded=excluded, children=[])

        children = [
            self._annotate(child)
            for child in node.children
            if child.is_folder or self.include_filter.should_include(child.path)
        ]
        # A folder listed without children keeps whatever the scanner reported.
        has_children = bool(children) if node.children else node.has_children
        return replace(node, excluded=excluded, children=children, has_children=has_children)
