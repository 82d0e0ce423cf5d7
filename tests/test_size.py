"""Tests for the size-estimation pre-scan."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from dirscope.errors import InvalidRootError
from dirscope.size import estimate_size
from support import make_tree


class EstimateSizeTests(unittest.TestCase):
    def test_counts_files_and_skips_excluded_directories(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            make_tree(root, ["a.txt", "src/b.py", "build/c.js", ".git/HEAD"], content="12345")

            report = estimate_size(root, "build")
            self.assertEqual(report.total_files, 2)
            self.assertEqual(report.total_bytes, 10)
            self.assertFalse(report.exceeds_limits)

    def test_linked_directory_is_not_counted_twice(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            make_tree(root, ["real/a.txt"], content="12345")
            try:
                os.symlink(root / "real", root / "linkdir", target_is_directory=True)
            except (OSError, NotImplementedError) as e:
                self.skipTest(f"symlinks unavailable: {e}")

            report = estimate_size(root)
            self.assertEqual(report.total_files, 1)
            self.assertEqual(report.total_bytes, 5)

    def test_limits_are_reported(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            make_tree(root, ["node_modules/x/a.js", "node_modules/x/b.js", "c.txt"], content="data")

            limits = {"folder_file_count": 1, "file_size_mb": 0, "total_size_mb": 0}
            with mock.patch.dict("dirscope.size.SIZE_LIMITS", limits):
                report = estimate_size(root)

            self.assertTrue(report.exceeds_limits)
            self.assertEqual(len(report.large_files), 3)
            self.assertEqual(report.large_folders, [{"path": "node_modules/x", "fileCount": 2}])
            self.assertEqual(report.large_directories[0]["path"], "node_modules")
            self.assertEqual(report.large_directories[0]["fileCount"], 2)
            self.assertTrue(report.to_dict()["exceedsLimits"])

    def test_missing_root_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(InvalidRootError):
                estimate_size(Path(tmp) / "missing")


if __name__ == "__main__":
    unittest.main()
