"""Single owner of the working directory, generation counter, and mode.

Every committed directory change goes through ``on_directory_committed``,
which bumps the generation and schedules a local status refresh. Browsing
never commits on its own; the status service never writes anything the
coordinator did not tag with the current generation.
"""

from __future__ import annotations

import enum
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .errors import FilesystemError, JermError
from .git import GitProbe, StatusService, StatusSnapshot
from .navigation import BrowseView, NavigationEngine, list_subdirectories
from .prompt import abbreviate_home, format_prompt
from .shell.executor import resolve_cd_path, set_actual_directory
from .shortcuts import MAX_SHORTCUT_SLOTS, Shortcut, ShortcutManager

logger = logging.getLogger(__name__)

MESSAGE_SECONDS = 4.0


class CommitSource(enum.Enum):
    TYPED_CHANGE = "typed-change"
    BROWSE_CONFIRM = "browse-confirm"
    SHORTCUT_JUMP = "shortcut-jump"


class InteractionMode(enum.Enum):
    NORMAL = "normal"
    BROWSING = "browsing"
    SHORTCUT_SELECTION = "shortcut-selection"


@dataclass(frozen=True)
class RenderSnapshot:
    """Everything the renderer may read for one frame."""

    working_directory: Path
    display_path: str
    generation: int
    mode: InteractionMode
    browse: BrowseView | None
    status: StatusSnapshot | None
    prompt: str
    message: str
    shortcuts: tuple[Shortcut, ...]
    shortcut_selected: int | None


def _default_status_service(current_generation: Callable[[], int]) -> StatusService:
    return StatusService(GitProbe(), current_generation)


class Coordinator:
    def __init__(
        self,
        working_directory: Path,
        *,
        shortcuts: ShortcutManager,
        make_status_service: Callable[[Callable[[], int]], StatusService] = _default_status_service,
        set_actual_directory: Callable[[Path], None] = set_actual_directory,
        list_directory: Callable[[Path], list[str]] = list_subdirectories,
        monotonic: Callable[[], float] = time.monotonic,
        home: Path | None = None,
    ) -> None:
        self._working_directory = working_directory
        self._previous_directory: Path | None = None
        self._generation = 0
        self._set_actual_directory = set_actual_directory
        self._monotonic = monotonic
        self._home = home
        self._message = ""
        self._message_until = 0.0
        self._shortcut_selected: int | None = None
        self.shortcuts = shortcuts
        self.engine = NavigationEngine(list_directory)
        self.status = make_status_service(self.current_generation)

    @property
    def working_directory(self) -> Path:
        return self._working_directory

    @property
    def previous_directory(self) -> Path | None:
        return self._previous_directory

    @property
    def generation(self) -> int:
        return self._generation

    def current_generation(self) -> int:
        return self._generation

    @property
    def mode(self) -> InteractionMode:
        if self.engine.is_browsing:
            return InteractionMode.BROWSING
        if self._shortcut_selected is not None:
            return InteractionMode.SHORTCUT_SELECTION
        return InteractionMode.NORMAL

    # Messages

    def set_message(self, text: str) -> None:
        self._message = text
        self._message_until = self._monotonic() + MESSAGE_SECONDS

    @property
    def message(self) -> str:
        if self._message and self._monotonic() >= self._message_until:
            self._message = ""
        return self._message

    # Commit path

    def on_directory_committed(self, new_dir: Path, source: CommitSource) -> Path:
        """Make ``new_dir`` the working directory.

        Raises ``FilesystemError`` (leaving all state unchanged) when the
        directory cannot be entered.
        """
        target = new_dir if new_dir.is_absolute() else self._working_directory / new_dir
        self._set_actual_directory(target)

        if target != self._working_directory:
            self._previous_directory = self._working_directory
        self._working_directory = target
        self._generation += 1
        logger.info("directory committed: %s (%s, generation %d)", target, source.value, self._generation)

        self.status.refresh_local(target, self._generation)
        if source is CommitSource.SHORTCUT_JUMP:
            self.shortcuts.touch_shortcut(target)
        if source is not CommitSource.BROWSE_CONFIRM and self.engine.is_browsing:
            self.engine.cancel()
        self._shortcut_selected = None
        return target

    def start(self) -> None:
        """Schedule the first status computation for the startup directory."""
        self.status.refresh_local(self._working_directory, self._generation)

    def on_command_executed(self) -> None:
        self.status.refresh_local(self._working_directory, self._generation, force=True)

    def on_timer_tick(self) -> None:
        self.status.refresh_with_sync(self._working_directory, self._generation)

    def poll(self) -> bool:
        """Apply completed status results. Returns whether the prompt may have changed."""
        return self.status.drain()

    def change_directory(self, text: str | None) -> Path | None:
        """Handle a typed ``cd``; failures become a transient message."""
        try:
            target = resolve_cd_path(text, self._working_directory, self._previous_directory)
            return self.on_directory_committed(target, CommitSource.TYPED_CHANGE)
        except JermError as exc:
            message = str(exc)
            self.set_message(message if message.startswith("cd:") else f"cd: {message}")
            return None

    # Browsing

    def activate_browsing(self) -> None:
        self._shortcut_selected = None
        self.engine.activate(self._working_directory)

    def confirm_browsing(self) -> Path | None:
        try:
            return self.engine.confirm(lambda path: self.on_directory_committed(path, CommitSource.BROWSE_CONFIRM))
        except FilesystemError as exc:
            self.set_message(f"cd: {exc}")
            return None

    def cancel_browsing(self) -> None:
        self.engine.cancel()

    # Shortcuts

    def jump_to_shortcut(self, slot: int) -> Path | None:
        """Commit the shortcut in ``slot`` (1-based). Ignored while browsing."""
        if self.engine.is_browsing:
            return None
        shortcut = self.shortcuts.get_shortcut(slot)
        if shortcut is None:
            return None
        try:
            return self.on_directory_committed(shortcut.path, CommitSource.SHORTCUT_JUMP)
        except FilesystemError:
            self.set_message(f"Error: {shortcut.path} no longer exists")
            return None

    def save_shortcut(self) -> Shortcut:
        shortcut = self.shortcuts.add_shortcut(self._working_directory)
        self.set_message(f"Shortcut saved: {shortcut.display_name(self._home)}")
        return shortcut

    def enter_shortcut_selection(self) -> bool:
        if self.shortcuts.is_empty():
            self.set_message("No shortcuts saved (use 'jerm save')")
            return False
        if self.engine.is_browsing:
            self.engine.cancel()
        self._shortcut_selected = 0
        return True

    def move_shortcut_selection(self, delta: int) -> None:
        if self._shortcut_selected is None:
            return
        last = min(len(self.shortcuts), MAX_SHORTCUT_SLOTS) - 1
        self._shortcut_selected = max(0, min(self._shortcut_selected + delta, last))

    def confirm_shortcut_selection(self) -> Path | None:
        if self._shortcut_selected is None:
            return None
        slot = self._shortcut_selected + 1
        self._shortcut_selected = None
        return self.jump_to_shortcut(slot)

    def cancel_shortcut_selection(self) -> None:
        self._shortcut_selected = None

    # Rendering

    def render_snapshot(self) -> RenderSnapshot:
        status = self.status.current_snapshot(self._working_directory, self._generation)
        display_path = abbreviate_home(self._working_directory, self._home)
        return RenderSnapshot(
            working_directory=self._working_directory,
            display_path=display_path,
            generation=self._generation,
            mode=self.mode,
            browse=self.engine.view(),
            status=status,
            prompt=format_prompt(display_path, status),
            message=self.message,
            shortcuts=tuple(self.shortcuts.get_shortcuts()[:MAX_SHORTCUT_SLOTS]),
            shortcut_selected=self._shortcut_selected,
        )
