"""
Entry points for dirscope.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Set, Union

from .config import PatternInput, ScanSettings
from .modules import ModuleGraph, ModuleId
from .tree import TreeNode
from .updater import ExclusionUpdater
from .walker import CancelToken, DirectoryWalker

logger = logging.getLogger(__name__)

SettingsInput = Union[ScanSettings, Mapping[str, Any], None]


def scan_tree(
    root: Union[str, Path],
    exclude_patterns: PatternInput = "",
    include_patterns: PatternInput = "",
    settings: SettingsInput = None,
    cancel: Optional[CancelToken] = None,
) -> TreeNode:
    """Scan *root* and return its annotated tree.

    Filesystem problems end up in ``error`` fields; this never raises except
    for ``ScanCancelled`` when *cancel* fires.
    """
    walker = DirectoryWalker(root, exclude_patterns, include_patterns, settings, cancel)
    tree = walker.scan()
    logger.info(
        "Scanned %s: %d nodes, %d unreadable",
        walker.root,
        sum(1 for _ in tree.walk()),
        len(walker.errors),
    )
    return tree


def update_exclusions(
    root: Union[str, Path],
    tree: Union[TreeNode, Dict[str, Any]],
    exclude_patterns: PatternInput = "",
    include_patterns: PatternInput = "",
    changed_pattern: Optional[str] = None,
    settings: SettingsInput = None,
) -> Union[TreeNode, Dict[str, Any]]:
    """Re-flag *tree* for a new pattern set; returns the same form it was given."""
    as_dict = isinstance(tree, dict)
    node = TreeNode.from_dict(tree) if as_dict else tree
    updater = ExclusionUpdater(root, exclude_patterns, include_patterns, settings)
    updated = updater.apply(node, changed_pattern)
    return updated.to_dict() if as_dict else updated


def resolve_module_patterns(module_id: ModuleId, graph: ModuleGraph) -> Set[str]:
    """Transitive pattern closure for *module_id*; cycles are cut silently."""
    return graph.closure(module_id)
