"""Shortcut records and their JSON file.

File shape: ``{"shortcuts": [{"path", "last_accessed", "created_at"}]}`` with
RFC 3339 UTC timestamps. Malformed records are dropped on load
and an unreadable file yields no shortcuts.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from ..config import SHORTCUTS_PATH
from ..prompt import abbreviate_home

logger = logging.getLogger(__name__)

_FRACTION_RE = re.compile(r"\.(\d+)")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(text: object) -> datetime | None:
    """Parse an RFC 3339 timestamp, tolerating ``Z`` and nanosecond fractions."""
    if not isinstance(text, str) or not text:
        return None
    normalized = text.strip()
    if normalized.endswith(("Z", "z")):
        normalized = normalized[:-1] + "+00:00"
    normalized = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), normalized, count=1)
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass
class Shortcut:
    path: Path
    last_accessed: datetime = field(default_factory=_utcnow)
    created_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def new(cls, path: Path) -> Shortcut:
        now = _utcnow()
        return cls(path=path, last_accessed=now, created_at=now)

    def touch(self) -> None:
        self.last_accessed = _utcnow()

    def display_name(self, home: Path | None = None) -> str:
        return abbreviate_home(self.path, home)

    def time_ago(self, now: datetime | None = None) -> str:
        """Compact age of the last access: ``now``, ``5m``, ``2h``, ``3d``, ``2w``, ``1mo``."""
        now = _utcnow() if now is None else now
        seconds = int((now - self.last_accessed).total_seconds())
        if seconds < 60:
            return "now"
        minutes = seconds // 60
        if minutes < 60:
            return f"{minutes}m"
        hours = minutes // 60
        if hours < 24:
            return f"{hours}h"
        days = hours // 24
        if days < 7:
            return f"{days}d"
        weeks = days // 7
        if weeks < 4:
            return f"{weeks}w"
        return f"{max(1, days // 30)}mo"

    def to_json(self) -> dict[str, object]:
        return {
            "path": str(self.path),
            "last_accessed": format_timestamp(self.last_accessed),
            "created_at": format_timestamp(self.created_at),
        }

    @classmethod
    def from_json(cls, raw: object) -> Shortcut | None:
        if not isinstance(raw, dict):
            return None
        raw_path = raw.get("path")
        if not isinstance(raw_path, str) or not raw_path:
            return None
        last_accessed = parse_timestamp(raw.get("last_accessed"))
        created_at = parse_timestamp(raw.get("created_at"))
        if last_accessed is None:
            return None
        return cls(path=Path(raw_path), last_accessed=last_accessed, created_at=created_at or last_accessed)


def load_shortcuts(path: Path | None = None) -> list[Shortcut]:
    path = SHORTCUTS_PATH if path is None else path
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return []
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable shortcuts file %s: %s", path, exc)
        return []
    raw_items = data.get("shortcuts") if isinstance(data, dict) else None
    if not isinstance(raw_items, list):
        return []
    shortcuts: list[Shortcut] = []
    for raw in raw_items:
        shortcut = Shortcut.from_json(raw)
        if shortcut is not None:
            shortcuts.append(shortcut)
    return shortcuts


def save_shortcuts(shortcuts: list[Shortcut], path: Path | None = None) -> None:
    """Write shortcuts as pretty-printed JSON; write failures are logged only."""
    path = SHORTCUTS_PATH if path is None else path
    payload = {"shortcuts": [shortcut.to_json() for shortcut in shortcuts]}
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write shortcuts file %s: %s", path, exc)
