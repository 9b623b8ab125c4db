from __future__ import annotations

import json
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

from jerm.shortcuts import Shortcut, load_shortcuts, save_shortcuts
from jerm.shortcuts.storage import format_timestamp, parse_timestamp

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


class TimestampTests(unittest.TestCase):
    def test_parses_z_suffix_and_nanoseconds(self) -> None:
        parsed = parse_timestamp("2024-05-01T12:00:00.123456789Z")
        self.assertEqual(parsed, datetime(2024, 5, 1, 12, 0, 0, 123456, tzinfo=timezone.utc))

    def test_parses_offsets(self) -> None:
        self.assertEqual(parse_timestamp("2024-05-01T14:00:00+02:00"), NOW)

    def test_rejects_garbage(self) -> None:
        self.assertIsNone(parse_timestamp("yesterday"))
        self.assertIsNone(parse_timestamp(17))
        self.assertIsNone(parse_timestamp(""))

    def test_format_uses_z_suffix(self) -> None:
        self.assertEqual(format_timestamp(NOW), "2024-05-01T12:00:00Z")


class ShortcutTests(unittest.TestCase):
    def test_time_ago_buckets(self) -> None:
        cases = [
            (timedelta(seconds=30), "now"),
            (timedelta(minutes=5), "5m"),
            (timedelta(hours=2), "2h"),
            (timedelta(days=3), "3d"),
            (timedelta(days=14), "2w"),
            (timedelta(days=65), "2mo"),
        ]
        for age, expected in cases:
            with self.subTest(expected=expected):
                shortcut = Shortcut(Path("/x"), last_accessed=NOW - age, created_at=NOW - age)
                self.assertEqual(shortcut.time_ago(NOW), expected)

    def test_display_name_abbreviates_home(self) -> None:
        shortcut = Shortcut(Path("/home/alice/src"), NOW, NOW)
        self.assertEqual(shortcut.display_name(Path("/home/alice")), "~/src")


class ShortcutFileTests(unittest.TestCase):
    def test_save_then_load_preserves_records(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "shortcuts.json"
            save_shortcuts([Shortcut(Path("/srv/app"), NOW, NOW - timedelta(days=1))], path)

            raw = json.loads(path.read_text(encoding="utf-8"))
            self.assertEqual(raw["shortcuts"][0]["path"], "/srv/app")
            self.assertEqual(raw["shortcuts"][0]["last_accessed"], "2024-05-01T12:00:00Z")

            loaded = load_shortcuts(path)
        self.assertEqual(len(loaded), 1)
        self.assertEqual(loaded[0].path, Path("/srv/app"))
        self.assertEqual(loaded[0].created_at, NOW - timedelta(days=1))

    def test_malformed_records_are_dropped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "shortcuts.json"
            path.write_text(
                json.dumps(
                    {
                        "shortcuts": [
                            {"path": "/ok", "last_accessed": "2024-05-01T12:00:00Z", "created_at": "bad"},
                            {"path": "", "last_accessed": "2024-05-01T12:00:00Z"},
                            {"path": "/no-time"},
                            "not-an-object",
                        ]
                    }
                ),
                encoding="utf-8",
            )
            loaded = load_shortcuts(path)

        self.assertEqual([shortcut.path for shortcut in loaded], [Path("/ok")])
        self.assertEqual(loaded[0].created_at, NOW)

    def test_missing_or_invalid_file_yields_nothing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "shortcuts.json"
            self.assertEqual(load_shortcuts(path), [])
            path.write_text("{not json", encoding="utf-8")
            with self.assertLogs("jerm.shortcuts.storage", level="WARNING"):
                self.assertEqual(load_shortcuts(path), [])


if __name__ == "__main__":
    unittest.main()
