"""
errors.py
---------

Exceptions that abort a whole run.

Per-file problems (unreadable files, rename conflicts, rejected renames)
are never raised; they travel as outcomes and apply results instead.
"""


class KtiError(Exception):
    """Base class for fatal kti errors."""


class RootPathError(KtiError):
    """The starting path does not exist or cannot be accessed."""

    def __init__(self, path, reason=None):
        self.path = path
        self.reason = reason
        msg = f"Cannot access path: {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class ConfigError(KtiError):
    """A setting has an invalid value."""
