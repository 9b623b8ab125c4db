"""Virtual directory browsing state machine.

Browsing moves a virtual path around the filesystem without touching the
working directory. Only ``confirm`` hands the virtual path to a commit
callback; every other transition is local to the session.
"""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ..errors import FilesystemError, NavigationStateError
from .lister import list_subdirectories


class NavigationMode(enum.Enum):
    INACTIVE = "inactive"
    BROWSING = "browsing"


@dataclass
class BrowseSession:
    virtual_path: Path
    entries: list[str]
    selected: int
    origin_path: Path


@dataclass(frozen=True)
class BrowseView:
    """Read-only copy of a session for rendering."""

    virtual_path: Path
    entries: tuple[str, ...]
    selected: int
    origin_path: Path

    @property
    def selected_name(self) -> str | None:
        if not self.entries:
            return None
        return self.entries[self.selected]


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


class NavigationEngine:
    """Own the browse session and its transitions."""

    def __init__(self, list_directory: Callable[[Path], list[str]] = list_subdirectories) -> None:
        self._list_directory = list_directory
        self._session: BrowseSession | None = None

    @property
    def mode(self) -> NavigationMode:
        return NavigationMode.INACTIVE if self._session is None else NavigationMode.BROWSING

    @property
    def is_browsing(self) -> bool:
        return self._session is not None

    def _require_session(self) -> BrowseSession:
        if self._session is None:
            raise NavigationStateError("not browsing")
        return self._session

    def _list(self, path: Path) -> list[str]:
        # Listing failures are soft: the session stays open with no entries.
        try:
            return list(self._list_directory(path))
        except FilesystemError:
            return []

    def view(self) -> BrowseView | None:
        session = self._session
        if session is None:
            return None
        return BrowseView(
            virtual_path=session.virtual_path,
            entries=tuple(session.entries),
            selected=session.selected,
            origin_path=session.origin_path,
        )

    def activate(self, current_dir: Path) -> None:
        """Start a fresh session at ``current_dir``, replacing any existing one."""
        self._session = BrowseSession(
            virtual_path=current_dir,
            entries=self._list(current_dir),
            selected=0,
            origin_path=current_dir,
        )

    def move_selection(self, delta: int) -> None:
        session = self._require_session()
        if not session.entries:
            return
        session.selected = _clamp(session.selected + delta, 0, len(session.entries) - 1)

    def descend(self) -> None:
        session = self._require_session()
        if not session.entries:
            return
        session.virtual_path = session.virtual_path / session.entries[session.selected]
        session.entries = self._list(session.virtual_path)
        session.selected = 0

    def ascend(self) -> None:
        session = self._require_session()
        parent = session.virtual_path.parent
        if parent == session.virtual_path:
            return
        child_name = session.virtual_path.name
        session.virtual_path = parent
        session.entries = self._list(parent)
        try:
            session.selected = session.entries.index(child_name)
        except ValueError:
            session.selected = 0

    def confirm(self, commit: Callable[[Path], object]) -> Path:
        """Commit the virtual path through ``commit`` and end the session.

        If ``commit`` raises ``FilesystemError`` the session is kept as-is and
        the error propagates.
        """
        session = self._require_session()
        target = session.virtual_path
        commit(target)
        self._session = None
        return target

    def cancel(self) -> None:
        self._require_session()
        self._session = None
