"""Literal prompt text.

``<path> <gitseg> $`` when a status snapshot exists, ``<path> $`` otherwise.
The git segment is ``<id>[*][ ↑N][ ↓N]``.
"""

from __future__ import annotations

from pathlib import Path

from .git.status import StatusSnapshot

AHEAD_ARROW = "↑"
BEHIND_ARROW = "↓"
DIRTY_MARK = "*"


def abbreviate_home(path: Path, home: Path | None = None) -> str:
    """Replace a leading home directory with ``~``."""
    home = Path.home() if home is None else home
    text = str(path)
    home_text = str(home)
    if home_text != "/" and (text == home_text or text.startswith(home_text + "/")):
        return "~" + text[len(home_text):]
    return text


def format_git_segment(snapshot: StatusSnapshot) -> str:
    parts = [snapshot.identifier]
    if snapshot.dirty:
        parts.append(DIRTY_MARK)
    if snapshot.has_upstream:
        if snapshot.ahead:
            parts.append(f" {AHEAD_ARROW}{snapshot.ahead}")
        if snapshot.behind:
            parts.append(f" {BEHIND_ARROW}{snapshot.behind}")
    return "".join(parts)


def format_prompt(path_text: str, snapshot: StatusSnapshot | None) -> str:
    if snapshot is None:
        return f"{path_text} $"
    return f"{path_text} {format_git_segment(snapshot)} $"
