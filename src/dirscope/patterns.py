"""
Pattern normalization and compilation.

Two matchers live behind the same ``Matcher`` protocol:

* ``GitWildMatchMatcher`` - gitignore semantics through ``pathspec``
  (ordered rules, ``!`` negation, anchored ``/`` patterns, directory-only
  ``name/`` patterns, and "an excluded parent directory cannot be
  re-included").
* ``RegexGlobMatcher`` - a plain full-path glob matcher used for allow-lists.

Neither raises on malformed input: a rejected glob degrades to a literal
match, and an unusable one is dropped with a warning.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional, Protocol

import pathspec

logger = logging.getLogger(__name__)

_GLOB_CHARS = re.compile(r"[*?\[]")
_LEADING_DOT_SLASH = re.compile(r"^(?:\./)+")


class Matcher(Protocol):
    """Anything that can answer "does this relative path match"."""

    def matches(self, path: str, is_dir: bool = False) -> bool: ...


# Normalization helpers
def normalize_path(path: str) -> str:
    """Forward slashes, no leading ``./`` or ``/``, no trailing ``/``."""
    if not path:
        return ""
    path = str(path).replace("\\", "/")
    path = _LEADING_DOT_SLASH.sub("", path)
    path = path.strip("/")
    return "" if path == "." else path


def normalize_pattern(pattern: str) -> str:
    """Trim, convert backslashes and strip a leading ``./``.

    A leading ``!`` (negation) and a leading ``/`` (anchor) are preserved.
    """
    pattern = pattern.strip().replace("\\", "/")
    negated = pattern.startswith("!")
    body = pattern[1:] if negated else pattern
    body = _LEADING_DOT_SLASH.sub("", body)
    return f"!{body}" if negated else body


def expand_pattern(pattern: str, root: Optional[Path] = None) -> List[str]:
    """Expand a pattern naming an existing directory into ``[p, p/**]``.

    Patterns that already carry ``**``, carry glob characters, or do not
    name a directory under *root* are returned unchanged.
    """
    if root is None or "**" in pattern:
        return [pattern]
    negated = pattern.startswith("!")
    body = pattern[1:] if negated else pattern
    name = body.strip("/")
    if not name or _GLOB_CHARS.search(name):
        return [pattern]
    try:
        is_dir = (Path(root) / name).is_dir()
    except (OSError, ValueError) as e:
        logger.warning("Could not check pattern target '%s': %s", name, e)
        return [pattern]
    if not is_dir:
        return [pattern]
    prefix = "!" if negated else ""
    return [pattern, f"{prefix}{body.rstrip('/')}/**"]


def prepare_patterns(patterns: Iterable[str], root: Optional[Path] = None) -> List[str]:
    """Normalize, drop empties/comments, expand directories, keep order."""
    prepared: List[str] = []
    for raw in patterns:
        if raw is None:
            continue
        pattern = normalize_pattern(raw)
        if not pattern or pattern == "!" or pattern.startswith("#"):
            continue
        prepared.extend(expand_pattern(pattern, root))
    return prepared


def escape_glob(pattern: str) -> str:
    return re.sub(r"([*?\[\]\\])", r"\\\1", pattern)


def unbalanced_bracket(pattern: str) -> int:
    """Index of the first ``[`` with no closing ``]``, or -1.

    Such a ``[`` and every bracket after it are literals.
    """
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "\\":
            i += 2
            continue
        if c == "[":
            end = pattern.find("]", i + 2)
            if end == -1:
                return i
            i = end + 1
            continue
        i += 1
    return -1


# gitignore matcher
def _compile_line(line: str) -> list:
    # pathspec turns an open "[" into a regex that never matches
    start = unbalanced_bracket(line)
    if start != -1:
        line = line[:start] + re.sub(r"(?<!\\)([\[\]])", r"\\\1", line[start:])
    try:
        return list(pathspec.PathSpec.from_lines("gitwildmatch", [line]).patterns)
    except (ValueError, TypeError) as e:
        literal = escape_glob(line)
        logger.warning("Pattern '%s' rejected (%s); matching it literally", line, e)
    try:
        return list(pathspec.PathSpec.from_lines("gitwildmatch", [literal]).patterns)
    except (ValueError, TypeError) as e:
        logger.warning("Pattern '%s' dropped: %s", line, e)
        return []


class GitWildMatchMatcher:
    """Ordered gitignore rules compiled with ``pathspec``."""

    def __init__(self, patterns: Iterable[str]):
        self.patterns: List[str] = []
        compiled = []
        for line in patterns:
            line = line.strip() if line else ""
            if not line or line.startswith("#"):
                continue
            parts = _compile_line(line)
            if parts:
                self.patterns.append(line)
                compiled.extend(parts)
        self._spec = pathspec.PathSpec(compiled)

    def __len__(self) -> int:
        return len(self.patterns)

    def matches_entry(self, path: str, is_dir: bool = False) -> bool:
        """Match *path* alone, ignoring the state of its parent directories."""
        path = normalize_path(path)
        if not path:
            return False
        return self._spec.match_file(path + "/" if is_dir else path)

    def matches(self, path: str, is_dir: bool = False) -> bool:
        path = normalize_path(path)
        if not path:
            return False
        parts = path.split("/")
        for depth in range(1, len(parts)):
            if self.matches_entry("/".join(parts[:depth]), is_dir=True):
                return True
        return self.matches_entry(path, is_dir)


def compile_patterns(patterns: Iterable[str]) -> GitWildMatchMatcher:
    """Compile gitignore-style patterns; the walker only relies on ``matches``."""
    return GitWildMatchMatcher(patterns)


# Regex glob matcher
def glob_to_regex(pattern: str) -> str:
    """Translate a glob into an anchored regex.

    ``**/`` matches zero or more directories, ``**`` anything, ``*`` and
    ``?`` stay within one path segment. An unbalanced ``[`` is literal.
    """
    out: List[str] = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            if pattern.startswith("**/", i):
                out.append("(?:.*/)?")
                i += 3
                continue
            if pattern.startswith("**", i):
                out.append(".*")
                i += 2
                continue
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "[":
            end = pattern.find("]", i + 2)
            if end == -1:
                out.append(re.escape(c))
            else:
                body = pattern[i + 1:end]
                negate = body[:1] in ("!", "^")
                if negate:
                    body = body[1:]
                body = body.replace("\\", "\\\\")
                out.append("[" + ("^" if negate else "") + body + "]")
                i = end + 1
                continue
        else:
            out.append(re.escape(c))
        i += 1
    return "^" + "".join(out) + "$"


class _RegexRule:
    __slots__ = ("source", "regex", "basename")

    def __init__(self, source: str, regex: "re.Pattern", basename: bool):
        self.source = source
        self.regex = regex
        self.basename = basename


class RegexGlobMatcher:
    """Full-path glob matcher; a path matches when any pattern matches.

    A pattern without ``/`` is also tried against the base name, so ``*.md``
    admits ``docs/readme.md``. A leading ``/`` anchors the pattern to the
    full path only.
    """

    def __init__(self, patterns: Iterable[str]):
        self.rules: List[_RegexRule] = []
        for raw in patterns:
            pattern = normalize_pattern(raw) if raw else ""
            if not pattern:
                continue
            anchored = pattern.startswith("/")
            body = pattern.strip("/")
            if not body:
                continue
            try:
                regex = re.compile(glob_to_regex(body))
            except re.error as e:
                logger.warning("Glob '%s' rejected (%s); matching it literally", raw, e)
                regex = re.compile("^" + re.escape(body) + "$")
            self.rules.append(_RegexRule(pattern, regex, not anchored and "/" not in body))

    def __len__(self) -> int:
        return len(self.rules)

    def matches(self, path: str, is_dir: bool = False) -> bool:
        path = normalize_path(path)
        if not path:
            return False
        name = path.rsplit("/", 1)[-1]
        for rule in self.rules:
            if rule.regex.match(path):
                return True
            if rule.basename and rule.regex.match(name):
                return True
        return False
