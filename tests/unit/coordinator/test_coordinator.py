"""Coordinator behavior: commit path, generation tagging, and mode changes."""

from __future__ import annotations

import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest import mock

from jerm.coordinator import CommitSource, Coordinator, InteractionMode
from jerm.errors import FilesystemError, FilesystemErrorKind
from jerm.git import StatusService
from jerm.shortcuts import Shortcut, ShortcutManager

TREE = {
    Path("/"): ["repo", "tmp"],
    Path("/repo"): ["docs", "src"],
    Path("/repo/docs"): [],
    Path("/repo/src"): [],
    Path("/tmp"): [],
}


def _fake_lister(path: Path) -> list[str]:
    if path not in TREE:
        raise FilesystemError(FilesystemErrorKind.NOT_FOUND, path)
    return list(TREE[path])


def _fake_set_actual_directory(path: Path) -> None:
    if path not in TREE:
        raise FilesystemError(FilesystemErrorKind.NOT_FOUND, path)


class FakeProbe:
    def __init__(self) -> None:
        self.branch = "main"
        self.counts: tuple[int | None, int | None] = (0, 3)
        self.initialized: set[Path] = set()

    def is_repository(self, directory: Path) -> bool:
        if directory in self.initialized:
            return True
        return directory == Path("/repo") or Path("/repo") in directory.parents

    def branch_or_sentinel(self, directory: Path) -> str:
        return self.branch

    def short_hash(self, directory: Path) -> str:
        return "abc1234"

    def is_dirty(self, directory: Path) -> bool:
        return False

    def ahead_behind(self, directory: Path):
        return self.counts

    def fetch(self, directory: Path) -> bool:
        return True


class CoordinatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.now = 0.0
        self.workers: list = []
        self.probe = FakeProbe()
        stamp = datetime(2024, 5, 1, tzinfo=timezone.utc)
        self.shortcuts = ShortcutManager(
            Path(self._tmp.name) / "shortcuts.json",
            shortcuts=[
                Shortcut(Path("/tmp"), stamp, stamp),
                Shortcut(Path("/gone"), stamp - timedelta(days=1), stamp - timedelta(days=1)),
            ],
        )

        def make_status_service(current_generation):
            return StatusService(
                self.probe,
                current_generation,
                monotonic=lambda: self.now,
                start_worker=lambda target, _name: self.workers.append(target),
            )

        self.coordinator = Coordinator(
            Path("/repo"),
            shortcuts=self.shortcuts,
            make_status_service=make_status_service,
            set_actual_directory=_fake_set_actual_directory,
            list_directory=_fake_lister,
            monotonic=lambda: self.now,
            home=Path("/home/nobody"),
        )

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _finish_workers(self) -> None:
        while self.workers:
            self.workers.pop(0)()
        self.coordinator.poll()

    def test_start_computes_prompt_for_startup_directory(self) -> None:
        self.assertEqual(self.coordinator.render_snapshot().prompt, "/repo $")

        self.coordinator.start()
        self._finish_workers()

        self.assertEqual(self.coordinator.render_snapshot().prompt, "/repo main ↓3 $")

    def test_commit_bumps_generation_and_refreshes(self) -> None:
        self.coordinator.on_directory_committed(Path("/repo/src"), CommitSource.TYPED_CHANGE)

        self.assertEqual(self.coordinator.generation, 1)
        self.assertEqual(self.coordinator.working_directory, Path("/repo/src"))
        self.assertEqual(self.coordinator.previous_directory, Path("/repo"))
        self.assertEqual(len(self.workers), 1)

    def test_failed_commit_changes_nothing(self) -> None:
        with self.assertRaises(FilesystemError):
            self.coordinator.on_directory_committed(Path("/missing"), CommitSource.TYPED_CHANGE)

        self.assertEqual(self.coordinator.generation, 0)
        self.assertEqual(self.coordinator.working_directory, Path("/repo"))
        self.assertEqual(self.workers, [])

    def test_browsing_without_confirm_never_changes_working_directory(self) -> None:
        self.coordinator.activate_browsing()
        self.coordinator.engine.move_selection(1)
        self.coordinator.engine.descend()
        self.coordinator.engine.ascend()
        self.coordinator.engine.ascend()

        self.assertEqual(self.coordinator.mode, InteractionMode.BROWSING)
        self.assertEqual(self.coordinator.working_directory, Path("/repo"))
        self.assertEqual(self.coordinator.generation, 0)

    def test_cancel_browsing_keeps_state(self) -> None:
        self.coordinator.activate_browsing()
        self.coordinator.engine.descend()
        self.coordinator.cancel_browsing()

        self.assertEqual(self.coordinator.mode, InteractionMode.NORMAL)
        self.assertEqual(self.coordinator.working_directory, Path("/repo"))
        self.assertEqual(self.coordinator.generation, 0)

    def test_confirm_browsing_commits_virtual_path(self) -> None:
        self.coordinator.activate_browsing()
        self.coordinator.engine.move_selection(1)
        self.coordinator.engine.descend()

        target = self.coordinator.confirm_browsing()

        self.assertEqual(target, Path("/repo/src"))
        self.assertEqual(self.coordinator.working_directory, Path("/repo/src"))
        self.assertEqual(self.coordinator.generation, 1)
        self.assertEqual(self.coordinator.mode, InteractionMode.NORMAL)

    def test_confirm_failure_stays_browsing_with_message(self) -> None:
        self.coordinator.activate_browsing()
        with mock.patch.dict(TREE):
            del TREE[Path("/repo")]
            self.assertIsNone(self.coordinator.confirm_browsing())

        self.assertEqual(self.coordinator.mode, InteractionMode.BROWSING)
        self.assertTrue(self.coordinator.message.startswith("cd: no such file or directory"))

    def test_stale_sync_result_is_dropped_after_commit(self) -> None:
        self.coordinator.on_timer_tick()
        self.coordinator.on_directory_committed(Path("/repo/src"), CommitSource.TYPED_CHANGE)
        self.probe.branch = "stale"
        self.workers.pop(0)()
        self.coordinator.poll()

        self.assertIsNone(self.coordinator.status.current_snapshot(Path("/repo")))
        self.assertIsNone(self.coordinator.render_snapshot().status)

    def test_command_that_creates_repository_shows_status_in_same_directory(self) -> None:
        self.coordinator.on_directory_committed(Path("/tmp"), CommitSource.TYPED_CHANGE)
        self._finish_workers()
        self.assertEqual(self.coordinator.render_snapshot().prompt, "/tmp $")

        self.probe.initialized.add(Path("/tmp"))
        self.coordinator.on_command_executed()
        self.assertEqual(len(self.workers), 1)
        self._finish_workers()

        self.assertEqual(self.coordinator.render_snapshot().prompt, "/tmp main ↓3 $")

    def test_returning_to_directory_hides_segment_from_earlier_visit(self) -> None:
        self.coordinator.start()
        self._finish_workers()
        self.coordinator.on_directory_committed(Path("/tmp"), CommitSource.TYPED_CHANGE)
        self._finish_workers()

        self.probe.branch = "feature"
        self.coordinator.on_directory_committed(Path("/repo"), CommitSource.TYPED_CHANGE)
        self.assertEqual(self.coordinator.render_snapshot().prompt, "/repo $")

        self._finish_workers()
        self.assertEqual(self.coordinator.render_snapshot().prompt, "/repo feature ↓3 $")

    def test_change_directory_failure_sets_message(self) -> None:
        self.assertIsNone(self.coordinator.change_directory("/definitely/missing/path"))
        self.assertTrue(self.coordinator.message.startswith("cd: "))

        self.now += 10.0
        self.assertEqual(self.coordinator.message, "")

    def test_change_directory_dash_without_previous(self) -> None:
        self.assertIsNone(self.coordinator.change_directory("-"))
        self.assertEqual(self.coordinator.message, "cd: no previous directory")

    def test_jump_to_shortcut_commits_and_touches(self) -> None:
        target = self.coordinator.jump_to_shortcut(1)

        self.assertEqual(target, Path("/tmp"))
        self.assertEqual(self.coordinator.working_directory, Path("/tmp"))
        self.assertEqual(self.coordinator.generation, 1)

    def test_jump_to_missing_shortcut_directory_reports_error(self) -> None:
        self.assertIsNone(self.coordinator.jump_to_shortcut(2))
        self.assertEqual(self.coordinator.message, "Error: /gone no longer exists")
        self.assertIsNone(self.coordinator.jump_to_shortcut(9))

    def test_jump_is_ignored_while_browsing(self) -> None:
        self.coordinator.activate_browsing()

        self.assertIsNone(self.coordinator.jump_to_shortcut(1))
        self.assertEqual(self.coordinator.working_directory, Path("/repo"))
        self.assertEqual(self.coordinator.mode, InteractionMode.BROWSING)

    def test_typed_change_while_browsing_ends_session(self) -> None:
        self.coordinator.activate_browsing()
        self.coordinator.on_directory_committed(Path("/tmp"), CommitSource.TYPED_CHANGE)

        self.assertEqual(self.coordinator.mode, InteractionMode.NORMAL)

    def test_shortcut_selection_flow(self) -> None:
        self.assertTrue(self.coordinator.enter_shortcut_selection())
        self.assertEqual(self.coordinator.mode, InteractionMode.SHORTCUT_SELECTION)
        self.coordinator.move_shortcut_selection(5)
        self.assertEqual(self.coordinator.render_snapshot().shortcut_selected, 1)
        self.coordinator.move_shortcut_selection(-5)

        target = self.coordinator.confirm_shortcut_selection()

        self.assertEqual(target, Path("/tmp"))
        self.assertEqual(self.coordinator.mode, InteractionMode.NORMAL)

    def test_shortcut_selection_with_no_shortcuts(self) -> None:
        self.coordinator.shortcuts = ShortcutManager(Path(self._tmp.name) / "empty.json", shortcuts=[])

        self.assertFalse(self.coordinator.enter_shortcut_selection())
        self.assertEqual(self.coordinator.message, "No shortcuts saved (use 'jerm save')")
        self.assertEqual(self.coordinator.mode, InteractionMode.NORMAL)

    def test_save_shortcut_reports_display_name(self) -> None:
        self.coordinator.save_shortcut()

        self.assertEqual(self.coordinator.message, "Shortcut saved: /repo")
        self.assertEqual(self.shortcuts.get_shortcut(1).path, Path("/repo"))


if __name__ == "__main__":
    unittest.main()
