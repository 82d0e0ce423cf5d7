"""
Project versions: named snapshots of (path, patterns, settings) kept as a tree
under one main version.

Parent links are stored as plain ids, so lookups walk them with a visited
set instead of assuming the data is acyclic. Mutations validate everything
before touching state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Set

from .config import ScanSettings
from .errors import VersionCycleError, VersionError

logger = logging.getLogger(__name__)


@dataclass
class ProjectVersion:
    id: int
    name: str
    path: str
    exclude_patterns: str = ""
    include_patterns: str = ""
    settings: ScanSettings = field(default_factory=ScanSettings)
    parent_id: Optional[int] = None
    enabled_modules: Set = field(default_factory=set)

    @property
    def is_main(self) -> bool:
        return self.parent_id is None


class VersionTree:
    def __init__(self, main: ProjectVersion, versions: Iterable[ProjectVersion] = ()):
        if not main.is_main:
            raise VersionError(f"Version {main.id} has a parent and cannot be the main version")
        self.main_id = main.id
        self.versions: Dict[int, ProjectVersion] = {main.id: main}
        for version in versions:
            if version.id in self.versions:
                raise VersionError(f"Duplicate version id {version.id}")
            if version.is_main:
                raise VersionError(f"Version {version.id} has no parent")
            self.versions[version.id] = version

    @property
    def main(self) -> ProjectVersion:
        return self.versions[self.main_id]

    def get(self, version_id: int) -> ProjectVersion:
        version = self.versions.get(version_id)
        if version is None:
            raise VersionError(f"Version {version_id} not found")
        return version

    def children(self, version_id: int) -> List[ProjectVersion]:
        return sorted(
            (v for v in self.versions.values() if v.parent_id == version_id),
            key=lambda v: v.id,
        )

    def descendants(self, version_id: int, visited: Optional[Set[int]] = None) -> List[int]:
        if visited is None:
            visited = {version_id}
        found: List[int] = []
        for child in self.children(version_id):
            if child.id in visited:
                continue
            visited.add(child.id)
            found.append(child.id)
            found.extend(self.descendants(child.id, visited))
        return found

    def ancestors(self, version_id: int) -> List[int]:
        """Parent chain from the direct parent upwards; stops on a loop."""
        chain: List[int] = []
        seen = {version_id}
        parent_id = self.get(version_id).parent_id
        while parent_id is not None and parent_id not in seen and parent_id in self.versions:
            chain.append(parent_id)
            seen.add(parent_id)
            parent_id = self.versions[parent_id].parent_id
        return chain

    def _next_id(self) -> int:
        return max(self.versions) + 1

    def create_version(self, name: str, source_id: int, copy_from_main: bool = False) -> ProjectVersion:
        """Create a version from the main project or from *source_id*.

        Copying from main makes the new version a direct child of main;
        otherwise it branches off the source version.
        """
        source = self.get(source_id)
        settings_source = self.main if copy_from_main else source
        version = replace(
            settings_source,
            id=self._next_id(),
            name=name,
            parent_id=settings_source.id,
            enabled_modules=set(settings_source.enabled_modules),
        )
        self.versions[version.id] = version
        logger.info("Created version %s (%r) under %s", version.id, name, version.parent_id)
        return version

    def delete_version(self, version_id: int) -> List[int]:
        """Delete a version and its descendants; returns the removed ids."""
        version = self.get(version_id)
        if version.is_main:
            raise VersionError("Cannot delete the main version")
        removed = [version_id] + self.descendants(version_id)
        for vid in removed:
            del self.versions[vid]
        logger.info("Deleted versions %s", removed)
        return removed

    def rename_version(self, version_id: int, new_name: str) -> None:
        version = self.get(version_id)
        if version.is_main:
            raise VersionError("Cannot rename the main version")
        version.name = new_name

    def would_create_cycle(self, version_id: int, new_parent_id: int) -> bool:
        return new_parent_id == version_id or new_parent_id in self.descendants(version_id)

    def move_version(self, version_id: int, new_parent_id: int) -> None:
        version = self.get(version_id)
        if version.is_main:
            raise VersionError("Cannot move the main version")
        self.get(new_parent_id)
        if self.would_create_cycle(version_id, new_parent_id):
            raise VersionCycleError(
                f"Cannot move version {version_id} under {new_parent_id}: would create a cycle"
            )
        version.parent_id = new_parent_id
        logger.info("Moved version %s under %s", version_id, new_parent_id)

    def available_parents(self, version_id: int) -> List[ProjectVersion]:
        self.get(version_id)
        blocked = {version_id, *self.descendants(version_id)}
        return [v for vid, v in sorted(self.versions.items()) if vid not in blocked]
