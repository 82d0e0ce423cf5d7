"""
Named pattern bundles ("modules") and their dependency graph.

The stored dependency data may contain cycles even though it is meant to be
a DAG, so every traversal carries a visited set. A cycle is not an error:
the walk stops at the first revisit and returns what it gathered.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Hashable, Iterable, List, Mapping, Optional, Set

from .config import PatternInput, split_patterns
from .errors import ConfigFileError, ModuleError

logger = logging.getLogger(__name__)

ModuleId = Hashable


@dataclass
class Module:
    id: ModuleId
    name: str
    patterns: Set[str] = field(default_factory=set)
    dependencies: Set[ModuleId] = field(default_factory=set)
    description: str = ""


def closure(
    module_id: ModuleId,
    graph: Mapping[ModuleId, Module],
    visited: Optional[Set[ModuleId]] = None,
) -> Set[str]:
    """Union of the patterns of *module_id* and everything it depends on."""
    if visited is None:
        visited = set()
    if module_id in visited:
        return set()
    visited.add(module_id)

    module = graph.get(module_id)
    if module is None:
        logger.debug("Unknown module %r in dependency graph", module_id)
        return set()

    patterns = set(module.patterns)
    for dep_id in sorted(module.dependencies, key=str):
        patterns |= closure(dep_id, graph, visited)
    return patterns


class ModuleGraph:
    """In-memory module store; persistence is the caller's concern."""

    def __init__(self, modules: Iterable[Module] = ()):
        self.modules: Dict[ModuleId, Module] = {}
        for module in modules:
            self.add_module(module)

    def __contains__(self, module_id: ModuleId) -> bool:
        return module_id in self.modules

    def __len__(self) -> int:
        return len(self.modules)

    def get(self, module_id: ModuleId) -> Optional[Module]:
        return self.modules.get(module_id)

    def _require(self, module_id: ModuleId) -> Module:
        module = self.modules.get(module_id)
        if module is None:
            raise ModuleError(f"Module {module_id!r} not found")
        return module

    def add_module(self, module: Module) -> Module:
        if module.id in self.modules:
            raise ModuleError(f"Module {module.id!r} already exists")
        self.modules[module.id] = module
        return module

    def remove_module(self, module_id: ModuleId) -> None:
        self._require(module_id)
        del self.modules[module_id]
        for module in self.modules.values():
            module.dependencies.discard(module_id)

    def add_pattern(self, module_id: ModuleId, pattern: str) -> None:
        pattern = pattern.strip()
        if pattern:
            self._require(module_id).patterns.add(pattern)

    def remove_pattern(self, module_id: ModuleId, pattern: str) -> None:
        self._require(module_id).patterns.discard(pattern.strip())

    def add_dependency(self, parent_id: ModuleId, child_id: ModuleId) -> None:
        parent = self._require(parent_id)
        self._require(child_id)
        parent.dependencies.add(child_id)

    def remove_dependency(self, parent_id: ModuleId, child_id: ModuleId) -> None:
        self._require(parent_id).dependencies.discard(child_id)

    def dependencies_of(self, module_id: ModuleId) -> List[Module]:
        module = self._require(module_id)
        return [self.modules[d] for d in sorted(module.dependencies, key=str) if d in self.modules]

    def closure(self, module_id: ModuleId) -> Set[str]:
        return closure(module_id, self.modules)

    def pattern_sources(self, module_ids: Iterable[ModuleId]) -> Dict[str, ModuleId]:
        """Map each resolved pattern to the module that contributed it first."""
        sources: Dict[str, ModuleId] = {}
        visited: Set[ModuleId] = set()

        def _visit(module_id: ModuleId) -> None:
            if module_id in visited or module_id not in self.modules:
                return
            visited.add(module_id)
            module = self.modules[module_id]
            for pattern in sorted(module.patterns):
                sources.setdefault(pattern, module_id)
            for dep_id in sorted(module.dependencies, key=str):
                _visit(dep_id)

        for module_id in module_ids:
            _visit(module_id)
        return sources


def resolve_project_patterns(
    exclude_patterns: PatternInput,
    module_ids: Iterable[ModuleId],
    graph: ModuleGraph,
) -> List[str]:
    """Project patterns first, then each enabled module's closure, de-duplicated."""
    combined: List[str] = []
    seen: Set[str] = set()

    def _add(patterns: Iterable[str]) -> None:
        for pattern in patterns:
            if pattern not in seen:
                seen.add(pattern)
                combined.append(pattern)

    _add(split_patterns(exclude_patterns))
    for module_id in module_ids:
        _add(sorted(graph.closure(module_id)))
    return combined


def load_module_graph(path: Path) -> ModuleGraph:
    """Read ``{"modules": [{"id", "name", "patterns", "dependencies"}]}``."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigFileError(f"Could not read module file '{path}': {e}")

    entries = data.get("modules") if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise ConfigFileError(f"Module file '{path}' has no 'modules' list")

    graph = ModuleGraph()
    try:
        for entry in entries:
            graph.add_module(
                Module(
                    id=entry["id"],
                    name=entry.get("name", str(entry["id"])),
                    patterns=set(split_patterns(entry.get("patterns"))),
                    dependencies=set(entry.get("dependencies") or []),
                    description=entry.get("description", ""),
                )
            )
    except (KeyError, TypeError, AttributeError, ModuleError) as e:
        raise ConfigFileError(f"Invalid module entry in '{path}': {e}")
    return graph
