"""
TreeNode model, sibling ordering and renderers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

FOLDER = "folder"
FILE = "file"

_DIGITS = re.compile(r"(\d+)")


def natural_key(name: str) -> list:
    """Case-insensitive key where digit runs compare numerically."""
    parts = _DIGITS.split(name.casefold())
    return [int(part) if idx % 2 else part for idx, part in enumerate(parts)]


def sort_key(node: "TreeNode") -> tuple:
    return (node.type != FOLDER, natural_key(node.name), node.name)


@dataclass
class TreeNode:
    """One filesystem entry relative to the scan root."""

    type: str
    name: str
    path: str
    excluded: bool = False
    children: List["TreeNode"] = field(default_factory=list)
    has_children: bool = False
    error: Optional[str] = None

    @property
    def is_folder(self) -> bool:
        return self.type == FOLDER

    def walk(self) -> Iterator["TreeNode"]:
        """Depth-first, pre-order iteration including this node."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, path: str) -> Optional["TreeNode"]:
        for node in self.walk():
            if node.path == path:
                return node
        return None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.type,
            "name": self.name,
            "path": self.path,
            "excluded": self.excluded,
            "children": [child.to_dict() for child in self.children],
            "hasChildren": self.has_children,
        }
        if self.error:
            data["error"] = self.error
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TreeNode":
        node_type = data.get("type", FILE)
        children = [cls.from_dict(child) for child in data.get("children") or []]
        has_children = data.get("hasChildren", data.get("has_children"))
        return cls(
            type=node_type,
            name=data.get("name", ""),
            path=data.get("path", ""),
            excluded=bool(data.get("excluded", False)),
            children=children,
            has_children=bool(children) if has_children is None else bool(has_children),
            error=data.get("error"),
        )


def excluded_paths(tree: TreeNode) -> List[str]:
    return [node.path for node in tree.walk() if node.excluded]


def render_tree(tree: TreeNode, show_excluded: bool = True) -> str:
    """
    Return an ASCII tree (like the Unix ``tree`` utility).

    Excluded entries are suffixed with ``[excluded]`` or left out entirely
    when *show_excluded* is False; errors are shown after the name.
    """
    lines: List[str] = [f"{tree.name}/"]
    if tree.error:
        lines[0] += f"  ({tree.error})"

    def _walk(node: TreeNode, prefix: str = "") -> None:
        items = [c for c in node.children if show_excluded or not c.excluded]
        for idx, child in enumerate(items):
            last = idx == len(items) - 1
            connector = "└── " if last else "├── "
            label = child.name + ("/" if child.is_folder else "")
            if child.excluded:
                label += "  [excluded]"
            if child.error:
                label += f"  ({child.error})"
            lines.append(f"{prefix}{connector}{label}")
            _walk(child, prefix + ("    " if last else "│   "))

    _walk(tree)
    return "\n".join(lines)
