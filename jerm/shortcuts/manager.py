"""Recency-ordered shortcut list with 1-based slots for quick jumps."""

from __future__ import annotations

from pathlib import Path

from .storage import Shortcut, load_shortcuts, save_shortcuts

MAX_SHORTCUT_SLOTS = 9


class ShortcutManager:
    def __init__(self, storage_path: Path | None = None, shortcuts: list[Shortcut] | None = None) -> None:
        self._storage_path = storage_path
        self._shortcuts = list(shortcuts) if shortcuts is not None else load_shortcuts(storage_path)

    def _save(self) -> None:
        save_shortcuts(self._shortcuts, self._storage_path)

    def get_shortcuts(self) -> list[Shortcut]:
        """Return shortcuts, most recently accessed first."""
        return sorted(self._shortcuts, key=lambda shortcut: shortcut.last_accessed, reverse=True)

    def get_shortcut(self, slot: int) -> Shortcut | None:
        if slot < 1 or slot > MAX_SHORTCUT_SLOTS:
            return None
        ordered = self.get_shortcuts()
        if slot > len(ordered):
            return None
        return ordered[slot - 1]

    def _find(self, path: Path) -> Shortcut | None:
        return next((shortcut for shortcut in self._shortcuts if shortcut.path == path), None)

    def add_shortcut(self, path: Path) -> Shortcut:
        """Add ``path``, or refresh its recency if it is already saved."""
        existing = self._find(path)
        if existing is not None:
            existing.touch()
        else:
            existing = Shortcut.new(path)
            self._shortcuts.append(existing)
        self._save()
        return existing

    def touch_shortcut(self, path: Path) -> bool:
        existing = self._find(path)
        if existing is None:
            return False
        existing.touch()
        self._save()
        return True

    def remove_shortcut(self, path: Path) -> bool:
        before = len(self._shortcuts)
        self._shortcuts = [shortcut for shortcut in self._shortcuts if shortcut.path != path]
        if len(self._shortcuts) == before:
            return False
        self._save()
        return True

    def reload(self) -> None:
        self._shortcuts = load_shortcuts(self._storage_path)

    def __len__(self) -> int:
        return len(self._shortcuts)

    def is_empty(self) -> bool:
        return not self._shortcuts
