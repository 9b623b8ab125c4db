"""Exception family shared by navigation, status, and shell layers.

Filesystem failures carry a normalized kind so callers can report them
without inspecting ``OSError`` subclasses themselves.
"""

from __future__ import annotations

import enum
from pathlib import Path


class JermError(Exception):
    """Base class for all jerm errors."""


class FilesystemErrorKind(enum.Enum):
    NOT_FOUND = "no such file or directory"
    PERMISSION_DENIED = "permission denied"
    NOT_A_DIRECTORY = "not a directory"


class FilesystemError(JermError):
    """Listing or committing a directory failed."""

    def __init__(self, kind: FilesystemErrorKind, path: Path) -> None:
        super().__init__(f"{kind.value}: {path}")
        self.kind = kind
        self.path = path

    @classmethod
    def from_os_error(cls, exc: OSError, path: Path) -> FilesystemError:
        """Map an ``OSError`` raised for ``path`` onto a filesystem error kind."""
        if isinstance(exc, PermissionError):
            return cls(FilesystemErrorKind.PERMISSION_DENIED, path)
        if isinstance(exc, NotADirectoryError):
            return cls(FilesystemErrorKind.NOT_A_DIRECTORY, path)
        return cls(FilesystemErrorKind.NOT_FOUND, path)


class StatusUnavailable(JermError):
    """A status probe failed, timed out, or produced unparseable output."""


class NavigationStateError(JermError):
    """A browsing operation was invoked outside browsing mode."""


class InvalidPath(JermError):
    """A typed path could not be interpreted (for example ``cd -`` with no previous directory)."""
