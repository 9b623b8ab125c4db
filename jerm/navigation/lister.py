"""Synchronous listing of immediate subdirectories."""

from __future__ import annotations

import os
from pathlib import Path

from ..errors import FilesystemError, FilesystemErrorKind


def list_subdirectories(path: Path, show_hidden: bool = False) -> list[str]:
    """Return names of immediate subdirectories of ``path``.

    Names are ordered case-insensitively (ties broken by the exact name so the
    order is deterministic). Hidden directories are skipped unless
    ``show_hidden`` is set. Symlinks to directories count as directories.
    """
    try:
        with os.scandir(path) as it:
            children = list(it)
    except OSError as exc:
        raise FilesystemError.from_os_error(exc, path) from exc

    names: list[str] = []
    for child in children:
        if not show_hidden and child.name.startswith("."):
            continue
        try:
            is_dir = child.is_dir()
        except OSError:
            continue
        if is_dir:
            names.append(child.name)
    return sorted(names, key=lambda name: (name.lower(), name))


def validate_directory(path: Path) -> Path:
    """Return ``path`` if it is an existing, readable directory, else raise."""
    if not path.exists():
        raise FilesystemError(FilesystemErrorKind.NOT_FOUND, path)
    if not path.is_dir():
        raise FilesystemError(FilesystemErrorKind.NOT_A_DIRECTORY, path)
    if not os.access(path, os.R_OK | os.X_OK):
        raise FilesystemError(FilesystemErrorKind.PERMISSION_DENIED, path)
    return path
