"""
dirscope - directory scanning and pattern-based inclusion/exclusion.

This package walks a project tree, flags every entry that is excluded by
.gitignore rules, built-in VCS/dotfile rules or user glob patterns, prunes
files that miss an optional allow-list, and returns a JSON-compatible tree
that UIs and text generators can consume.
"""

__version__ = "0.1.0"
__author__ = "dirscope team"

from .config import ScanSettings, load_pattern_file, split_patterns
from .core import resolve_module_patterns, scan_tree, update_exclusions
from .errors import (
    ConfigFileError,
    DirscopeError,
    InvalidRootError,
    ModuleError,
    ScanCancelled,
    VersionCycleError,
    VersionError,
)
from .exclusion import ExclusionResolver
from .include import IncludeFilter
from .modules import Module, ModuleGraph, closure, resolve_project_patterns
from .tree import TreeNode
from .versions import ProjectVersion, VersionTree
from .walker import CancelToken, DirectoryWalker

__all__ = [
    "CancelToken",
    "ConfigFileError",
    "DirectoryWalker",
    "DirscopeError",
    "ExclusionResolver",
    "IncludeFilter",
    "InvalidRootError",
    "Module",
    "ModuleError",
    "ModuleGraph",
    "ProjectVersion",
    "ScanCancelled",
    "ScanSettings",
    "TreeNode",
    "VersionCycleError",
    "VersionError",
    "VersionTree",
    "closure",
    "load_pattern_file",
    "resolve_module_patterns",
    "resolve_project_patterns",
    "scan_tree",
    "split_patterns",
    "update_exclusions",
]
