"""
Recursive directory walk producing a TreeNode per entry.

The walk is synchronous and depth-first. Directories are always descended
into, excluded or not, so nested flags and ``has_children`` stay accurate.
Excluded entries stay in the tree with ``excluded=True``; files that are not
text or miss the include allow-list are dropped.

Symlinks are followed. A directory link that points back at one of its own
ancestors is kept as a childless folder with ``error`` set.
"""

from __future__ import annotations

import logging
import os
import stat
import threading
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple, Union

from .config import PatternInput, ScanSettings
from .errors import ScanCancelled
from .exclusion import ExclusionResolver
from .filetypes import is_text_file
from .include import IncludeFilter
from .tree import FILE, FOLDER, TreeNode, sort_key

logger = logging.getLogger(__name__)


class CancelToken:
    """Thread-safe flag checked by the walker at each directory boundary."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ScanCancelled("Scan cancelled")


class DirectoryWalker:
    """Scan directories under one project root.

    Every node path is relative to *root*, also when ``scan`` is pointed
    at a subdirectory, so paths are stable across nested scans.
    """

    def __init__(
        self,
        root: Union[str, Path],
        exclude_patterns: PatternInput = "",
        include_patterns: PatternInput = "",
        settings: Union[ScanSettings, Mapping[str, Any], None] = None,
        cancel: Optional[CancelToken] = None,
    ):
        self.root = Path(os.path.abspath(root))
        self.exclusions = ExclusionResolver(self.root, exclude_patterns, settings)
        self.include_filter = IncludeFilter(include_patterns)
        self.cancel = cancel
        self.errors: List[Dict[str, str]] = []
        # (st_dev, st_ino) of the directories on the current descent path
        self._active: Set[Tuple[int, int]] = set()

    def relative_path(self, path: Union[str, Path]) -> str:
        rel = os.path.relpath(path, self.root).replace(os.sep, "/")
        return "." if rel in ("", ".") else rel

    def scan(self, directory: Union[str, Path, None] = None) -> TreeNode:
        """Scan *directory* (default: the root) and return its tree.

        Failures on the scanned directory itself come back as a folder node
        with ``error`` set instead of an exception. Only ``ScanCancelled``
        propagates.
        """
        self.errors = []
        self.exclusions.clear_cache()
        directory = self.root if directory is None else Path(os.path.abspath(directory))
        name = directory.name or str(directory)

        try:
            rel = self.relative_path(directory)
        except ValueError as e:
            return self._degenerate(name, ".", f"Error accessing directory: {e}")
        if rel == ".." or rel.startswith("../"):
            return self._degenerate(name, ".", f"Directory is outside the project root: {directory}")

        logger.debug("Scanning %s (root %s)", directory, self.root)
        try:
            st = directory.stat()
            if not stat.S_ISDIR(st.st_mode):
                raise NotADirectoryError(f"Path is not a directory: {directory}")
            self._active = {(st.st_dev, st.st_ino)}
            children = self._scan_children(directory)
        except OSError as e:
            logger.warning("Could not scan %s: %s", directory, e)
            self._record("SCAN_ERROR", rel, e)
            return self._degenerate(name, rel, f"Error reading directory: {e}")

        if self.errors:
            logger.info("Scan of %s finished with %d unreadable entries", directory, len(self.errors))
        return TreeNode(
            type=FOLDER,
            name=name,
            path=rel,
            excluded=False,
            children=children,
            has_children=bool(children),
        )

    def _scan_children(self, directory: Path) -> List[TreeNode]:
        if self.cancel is not None:
            self.cancel.raise_if_cancelled()

        nodes: List[TreeNode] = []
        with os.scandir(directory) as entries:
            for entry in entries:
                try:
                    node = self._scan_entry(entry)
                except OSError as e:
                    logger.warning("Skipping %s: %s", entry.path, e)
                    self._record("ENTRY_ERROR", self.relative_path(entry.path), e)
                    continue
                if node is not None:
                    nodes.append(node)

        nodes.sort(key=sort_key)
        return nodes

    def _scan_entry(self, entry: os.DirEntry) -> Optional[TreeNode]:
        rel = self.relative_path(entry.path)
        if entry.is_dir():
            excluded = self.exclusions.is_excluded(rel, is_dir=True)
            children: List[TreeNode] = []
            error = None
            try:
                # DirEntry.stat() leaves st_ino zeroed on Windows
                st = os.stat(entry.path)
                key = (st.st_dev, st.st_ino)
                if key in self._active:
                    logger.warning("Not following symlink loop at %s", entry.path)
                    error = f"Symlink loop: {rel} points to one of its parent directories"
                    self.errors.append({"type": "SYMLINK_LOOP", "path": rel, "message": error})
                else:
                    self._active.add(key)
                    try:
                        children = self._scan_children(Path(entry.path))
                    finally:
                        self._active.discard(key)
            except OSError as e:
                logger.warning("Could not read directory %s: %s", entry.path, e)
                self._record("ENTRY_ERROR", rel, e)
                children = []
                error = f"Error reading directory: {e}"
            return TreeNode(
                type=FOLDER,
                name=entry.name,
                path=rel,
                excluded=excluded,
                children=children,
                has_children=bool(children),
                error=error,
            )

        st = entry.stat()
        if not stat.S_ISREG(st.st_mode):
            return None
        if not is_text_file(entry.name):
            return None
        if not self.include_filter.should_include(rel, is_dir=False):
            return None
        return TreeNode(
            type=FILE,
            name=entry.name,
            path=rel,
            excluded=self.exclusions.is_excluded(rel, is_dir=False),
        )

    def _record(self, kind: str, path: str, error: Exception) -> None:
        self.errors.append({"type": kind, "path": path, "message": str(error)})

    @staticmethod
    def _degenerate(name: str, path: str, message: str) -> TreeNode:
        return TreeNode(
            type=FOLDER,
            name=name,
            path=path,
            excluded=False,
            children=[],
            has_children=False,
            error=message,
        )
