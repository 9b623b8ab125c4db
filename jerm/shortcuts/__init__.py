"""Saved directory shortcuts."""

from .manager import MAX_SHORTCUT_SLOTS, ShortcutManager
from .storage import Shortcut, load_shortcuts, save_shortcuts

__all__ = ["MAX_SHORTCUT_SLOTS", "Shortcut", "ShortcutManager", "load_shortcuts", "save_shortcuts"]
