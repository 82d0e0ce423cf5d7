"""Helpers for building fixture trees on disk."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable


def make_tree(root: Path, files: Iterable[str], content: str = "x\n") -> None:
    """Create every relative path in *files*; a trailing ``/`` makes a directory."""
    for rel in files:
        target = root / rel
        if rel.endswith("/"):
            target.mkdir(parents=True, exist_ok=True)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")


def flags(tree) -> Dict[str, bool]:
    """Map node path -> excluded for every node in *tree*."""
    return {node.path: node.excluded for node in tree.walk()}
