"""Tests for the layered ignore set."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from dirscope.config import ScanSettings
from dirscope.ignore import IgnoreSet, load_gitignore


class LoadGitignoreTests(unittest.TestCase):
    def test_reads_rules_and_skips_comments(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / ".gitignore").write_text("# build output\n\ndist/\n*.tmp\n", encoding="utf-8")
            self.assertEqual(load_gitignore(root), ["dist/", "*.tmp"])

    def test_missing_file_yields_no_rules(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(load_gitignore(Path(tmp)), [])


class IgnoreSetTests(unittest.TestCase):
    def test_default_layers_cover_vcs_and_dotfiles_only(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            ignore = IgnoreSet(Path(tmp))
            self.assertTrue(ignore.ignores(".git", is_dir=True))
            self.assertTrue(ignore.ignores(".git/config"))
            self.assertTrue(ignore.ignores(".env"))
            self.assertTrue(ignore.ignores("src/.cache/x.py"))
            self.assertTrue(ignore.ignores("Thumbs.db"))
            self.assertFalse(ignore.ignores("src/a.js"))
            self.assertFalse(ignore.ignores("node_modules", is_dir=True))

    def test_layers_toggle_independently(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / ".gitignore").write_text("secret.txt\n", encoding="utf-8")

            vcs_only = IgnoreSet(root, settings=ScanSettings(respect_gitignore=False, ignore_dotfiles=False))
            self.assertTrue(vcs_only.ignores(".git/config"))
            self.assertFalse(vcs_only.ignores(".env"))
            self.assertFalse(vcs_only.ignores("secret.txt"))

            nothing = IgnoreSet(root, settings=ScanSettings(False, False, False))
            self.assertFalse(nothing.ignores(".git", is_dir=True))
            self.assertEqual(list(nothing.layers), ["user"])

            gitignore_only = IgnoreSet(root, settings=ScanSettings(True, False, False))
            self.assertTrue(gitignore_only.ignores("secret.txt"))

    def test_user_negation_overrides_dotfile_layer(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            ignore = IgnoreSet(Path(tmp), ["!.env"])
            self.assertFalse(ignore.ignores(".env"))
            self.assertTrue(ignore.ignores(".envrc"))

    def test_user_negation_cannot_reach_into_excluded_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            ignore = IgnoreSet(Path(tmp), ["!.github/ci.yml"])
            self.assertTrue(ignore.ignores(".github/ci.yml"))

    def test_describe_lists_active_layers(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            info = IgnoreSet(Path(tmp), ["dist"]).describe()
            self.assertEqual(list(info["layers"]), ["gitignore", "vcs", "dotfiles", "user"])
            self.assertEqual(info["layers"]["user"], ["dist"])


if __name__ == "__main__":
    unittest.main()
