"""Tests for the include allow-list."""

from __future__ import annotations

import unittest

from dirscope.include import IncludeFilter


class IncludeFilterTests(unittest.TestCase):
    def test_empty_allow_list_includes_everything(self) -> None:
        for value in ("", None, " , ", []):
            include = IncludeFilter(value)
            self.assertFalse(include)
            self.assertTrue(include.should_include("src/a.py"))

    def test_directories_always_pass(self) -> None:
        include = IncludeFilter("*.md")
        self.assertTrue(include.should_include("src", is_dir=True))
        self.assertTrue(include.should_include("deep/nested/dir", is_dir=True))

    def test_files_need_a_matching_pattern(self) -> None:
        include = IncludeFilter("*.md, src/*.py")
        self.assertTrue(include)
        self.assertTrue(include.should_include("docs/readme.md"))
        self.assertTrue(include.should_include("src/app.py"))
        self.assertFalse(include.should_include("src/pkg/app.py"))
        self.assertFalse(include.should_include("package.json"))


if __name__ == "__main__":
    unittest.main()
