"""
Pre-scan size estimate, used to warn before scanning a huge tree.

This is a separate, flat walk: it honours the exclusion layers (excluded
directories are not descended into) but builds no tree.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from .config import PatternInput, ScanSettings
from .errors import InvalidRootError
from .exclusion import ExclusionResolver

logger = logging.getLogger(__name__)

MB = 1024 * 1024

SIZE_LIMITS: Dict[str, int] = {
    "folder_file_count": 500,
    "file_size_mb": 1,
    "total_size_mb": 50,
}

COMMON_LARGE_DIRECTORIES: List[str] = [
    "node_modules",
    "dist",
    "build",
    ".git",
    "vendor",
    "target",
    "packages",
    ".next",
    "coverage",
    "public/assets",
]


@dataclass
class SizeReport:
    total_files: int = 0
    total_bytes: int = 0
    large_files: List[Dict[str, Any]] = field(default_factory=list)
    large_folders: List[Dict[str, Any]] = field(default_factory=list)
    large_directories: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def total_size_mb(self) -> float:
        return self.total_bytes / MB

    @property
    def exceeds_limits(self) -> bool:
        return bool(self.large_directories) or self.total_size_mb > SIZE_LIMITS["total_size_mb"]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exceedsLimits": self.exceeds_limits,
            "totalFiles": self.total_files,
            "totalSizeMB": round(self.total_size_mb, 3),
            "largeFiles": self.large_files,
            "largeFolders": self.large_folders,
            "largeDirectories": self.large_directories,
        }


def _common_dir_for(rel: str) -> Optional[str]:
    for name in COMMON_LARGE_DIRECTORIES:
        if rel.startswith(name + "/"):
            return name
    return None


def estimate_size(
    root: Union[str, Path],
    exclude_patterns: PatternInput = "",
    settings: Union[ScanSettings, Mapping[str, Any], None] = None,
) -> SizeReport:
    root = Path(os.path.abspath(root))
    if not root.is_dir():
        raise InvalidRootError(f"Root directory '{root}' does not exist or is not a directory")

    resolver = ExclusionResolver(root, exclude_patterns, settings)
    report = SizeReport()
    common: Dict[str, List[int]] = {}
    stack: List[Path] = [root]

    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = list(it)
        except OSError as e:
            logger.warning("Size check skipped %s: %s", current, e)
            continue

        files_here = 0
        for entry in entries:
            rel = os.path.relpath(entry.path, root).replace(os.sep, "/")
            try:
                if entry.is_dir(follow_symlinks=False):
                    if not resolver.is_excluded(rel, is_dir=True):
                        stack.append(Path(entry.path))
                    continue
                if entry.is_dir():
                    # linked directory; its target is counted where it lives
                    continue
                if resolver.is_excluded(rel, is_dir=False):
                    continue
                size = entry.stat(follow_symlinks=False).st_size
            except OSError as e:
                logger.warning("Size check skipped %s: %s", entry.path, e)
                continue

            files_here += 1
            report.total_files += 1
            report.total_bytes += size
            if size > SIZE_LIMITS["file_size_mb"] * MB:
                report.large_files.append({"path": rel, "sizeMB": round(size / MB, 3)})
            bucket = _common_dir_for(rel)
            if bucket is not None:
                stats = common.setdefault(bucket, [0, 0])
                stats[0] += 1
                stats[1] += size

        if files_here > SIZE_LIMITS["folder_file_count"]:
            folder = os.path.relpath(current, root).replace(os.sep, "/")
            report.large_folders.append({"path": folder, "fileCount": files_here})

    for name in COMMON_LARGE_DIRECTORIES:
        if name not in common:
            continue
        count, size = common[name]
        if size > SIZE_LIMITS["total_size_mb"] * MB:
            report.large_directories.append(
                {"path": name, "sizeMB": round(size / MB, 3), "fileCount": count}
            )

    logger.debug("Size check of %s: %d files, %.1f MB", root, report.total_files, report.total_size_mb)
    return report
