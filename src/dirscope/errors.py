"""
Exception hierarchy for dirscope.

Filesystem irregularities met during a scan never surface as exceptions;
they end up in the tree's ``error`` fields. These classes cover the
operations that are allowed to fail loudly.
"""


class DirscopeError(Exception):
    """Base exception for dirscope errors."""


class InvalidRootError(DirscopeError):
    """Raised when a root directory cannot be used for a size estimate."""


class ConfigFileError(DirscopeError):
    """Raised when a pattern or module file cannot be read."""


class ScanCancelled(DirscopeError):
    """Raised when a scan's cancel token fires at a directory boundary."""


class ModuleError(DirscopeError):
    """Raised for unknown modules or invalid module edits."""


class VersionError(DirscopeError):
    """Raised for unknown versions or illegal operations on the main version."""


class VersionCycleError(VersionError):
    """Raised when a move would place a version under its own descendant."""
