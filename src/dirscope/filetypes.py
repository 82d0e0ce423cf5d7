"""
Text/binary classification for scanned files.
"""

from __future__ import annotations

import mimetypes
from pathlib import PurePath
from typing import FrozenSet, Union

TEXT_EXTENSIONS: FrozenSet[str] = frozenset({
    "txt", "js", "jsx", "ts", "tsx", "md", "json", "yml",
    "yaml", "css", "scss", "less", "html", "xml", "svg",
    "env", "config", "lock", "map", "vue", "php", "py",
    "rb", "java", "c", "cpp", "h", "hpp", "cs", "go",
    "rs", "sql", "sh", "bash", "conf", "ini", "toml", "cfg",
    "gitignore", "dockerignore", "editorconfig", "eslintrc", "prettierrc",
})

BINARY_EXTENSIONS: FrozenSet[str] = frozenset({
    "woff", "woff2", "ttf", "eot", "otf",
    "jpg", "jpeg", "png", "gif", "bmp", "ico", "webp",
    "pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx",
    "zip", "rar", "7z", "tar", "gz",
    "mp3", "wav", "ogg", "mp4", "avi", "mov",
    "dll", "exe", "so", "dylib", "pyc", "class", "jar",
})

# Extension-less names that are plain text.
TEXT_FILENAMES: FrozenSet[str] = frozenset({
    "makefile", "dockerfile", "license", "readme", "procfile", "gemfile",
})

STRUCTURED_TEXT_TYPES: FrozenSet[str] = frozenset({
    "application/json",
    "application/xml",
    "application/javascript",
    "application/x-javascript",
    "application/x-sh",
    "application/x-yaml",
    "application/yaml",
    "application/toml",
    "application/sql",
})


def extension(path: Union[str, PurePath]) -> str:
    """Lower-cased extension without the dot; ``.gitignore`` yields ``gitignore``."""
    name = PurePath(path).name.lower()
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1]


def is_text_file(path: Union[str, PurePath]) -> bool:
    ext = extension(path)
    if ext in BINARY_EXTENSIONS:
        return False
    if ext in TEXT_EXTENSIONS:
        return True
    if not ext and PurePath(path).name.lower() in TEXT_FILENAMES:
        return True
    mime_type, _ = mimetypes.guess_type(str(path), strict=False)
    if not mime_type:
        return False
    return mime_type.startswith("text/") or mime_type in STRUCTURED_TEXT_TYPES
