"""Tests for the project version tree."""

from __future__ import annotations

import unittest

from dirscope.config import ScanSettings
from dirscope.errors import VersionCycleError, VersionError
from dirscope.versions import ProjectVersion, VersionTree


def _tree() -> VersionTree:
    """main(1) -> v2 -> v3 -> v4, and main(1) -> v5."""
    main = ProjectVersion(1, "main", "/proj", exclude_patterns="dist", enabled_modules={10})
    return VersionTree(main, [
        ProjectVersion(2, "feature", "/proj", exclude_patterns="dist, docs", parent_id=1),
        ProjectVersion(3, "feature-a", "/proj", parent_id=2),
        ProjectVersion(4, "feature-a1", "/proj", parent_id=3),
        ProjectVersion(5, "hotfix", "/proj", parent_id=1),
    ])


def _parents(tree: VersionTree) -> dict:
    return {vid: v.parent_id for vid, v in tree.versions.items()}


class VersionLookupTests(unittest.TestCase):
    def test_descendants_and_ancestors(self) -> None:
        tree = _tree()
        self.assertEqual(tree.descendants(1), [2, 3, 4, 5])
        self.assertEqual(tree.descendants(2), [3, 4])
        self.assertEqual(tree.ancestors(4), [3, 2, 1])
        self.assertEqual(tree.ancestors(1), [])

    def test_cyclic_stored_data_terminates(self) -> None:
        tree = _tree()
        tree.versions[2].parent_id = 3
        self.assertEqual(tree.descendants(3), [2, 4])
        self.assertEqual(tree.ancestors(2), [3])

    def test_available_parents_exclude_self_and_descendants(self) -> None:
        tree = _tree()
        self.assertEqual([v.id for v in tree.available_parents(2)], [1, 5])


class VersionMutationTests(unittest.TestCase):
    def test_create_from_selected_version(self) -> None:
        tree = _tree()
        version = tree.create_version("branch", 2)
        self.assertEqual(version.id, 6)
        self.assertEqual(version.parent_id, 2)
        self.assertEqual(version.exclude_patterns, "dist, docs")

    def test_create_from_main(self) -> None:
        tree = _tree()
        version = tree.create_version("fresh", 3, copy_from_main=True)
        self.assertEqual(version.parent_id, 1)
        self.assertEqual(version.exclude_patterns, "dist")
        self.assertEqual(version.enabled_modules, {10})
        version.enabled_modules.add(11)
        self.assertEqual(tree.main.enabled_modules, {10})

    def test_move_into_descendant_is_rejected_without_mutation(self) -> None:
        tree = _tree()
        before = _parents(tree)
        with self.assertRaises(VersionCycleError):
            tree.move_version(2, 4)
        with self.assertRaises(VersionCycleError):
            tree.move_version(2, 2)
        self.assertEqual(_parents(tree), before)

    def test_move_to_unrelated_parent(self) -> None:
        tree = _tree()
        tree.move_version(3, 5)
        self.assertEqual(tree.get(3).parent_id, 5)
        self.assertEqual(tree.descendants(5), [3, 4])

    def test_main_version_is_protected(self) -> None:
        tree = _tree()
        for action in (
            lambda: tree.move_version(1, 2),
            lambda: tree.delete_version(1),
            lambda: tree.rename_version(1, "x"),
            lambda: tree.move_version(2, 99),
            lambda: tree.get(99),
        ):
            with self.assertRaises(VersionError):
                action()

    def test_delete_cascades_to_descendants(self) -> None:
        tree = _tree()
        self.assertEqual(tree.delete_version(2), [2, 3, 4])
        self.assertEqual(sorted(tree.versions), [1, 5])

    def test_rename(self) -> None:
        tree = _tree()
        tree.rename_version(5, "release")
        self.assertEqual(tree.get(5).name, "release")

    def test_settings_are_copied(self) -> None:
        main = ProjectVersion(1, "main", "/p", settings=ScanSettings(ignore_dotfiles=False))
        tree = VersionTree(main)
        self.assertFalse(tree.create_version("v", 1).settings.ignore_dotfiles)

    def test_main_must_have_no_parent(self) -> None:
        with self.assertRaises(VersionError):
            VersionTree(ProjectVersion(1, "main", "/p", parent_id=7))


if __name__ == "__main__":
    unittest.main()
