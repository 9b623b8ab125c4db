"""Browse state machine tests.

Uses an in-memory directory tree so transitions can be checked without
touching the filesystem.
"""

from __future__ import annotations

import unittest
from pathlib import Path

from jerm.errors import FilesystemError, FilesystemErrorKind, NavigationStateError
from jerm.navigation import NavigationEngine, NavigationMode

TREE = {
    Path("/"): ["home", "tmp"],
    Path("/home"): ["alice", "bob"],
    Path("/home/alice"): ["docs", "src"],
    Path("/home/alice/src"): [],
    Path("/home/alice/docs"): [],
    Path("/home/bob"): [],
    Path("/tmp"): [],
}


def _fake_lister(path: Path) -> list[str]:
    if path not in TREE:
        raise FilesystemError(FilesystemErrorKind.NOT_FOUND, path)
    return list(TREE[path])


class NavigationEngineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = NavigationEngine(_fake_lister)

    def test_activate_lists_current_directory_with_first_entry_selected(self) -> None:
        self.engine.activate(Path("/home"))

        view = self.engine.view()
        self.assertEqual(self.engine.mode, NavigationMode.BROWSING)
        self.assertEqual(view.virtual_path, Path("/home"))
        self.assertEqual(view.origin_path, Path("/home"))
        self.assertEqual(view.entries, ("alice", "bob"))
        self.assertEqual(view.selected, 0)
        self.assertEqual(view.selected_name, "alice")

    def test_view_is_none_when_inactive(self) -> None:
        self.assertIsNone(self.engine.view())
        self.assertEqual(self.engine.mode, NavigationMode.INACTIVE)

    def test_selection_clamps_at_both_ends(self) -> None:
        self.engine.activate(Path("/home"))

        self.engine.move_selection(-1)
        self.assertEqual(self.engine.view().selected, 0)
        self.engine.move_selection(5)
        self.assertEqual(self.engine.view().selected, 1)
        self.engine.move_selection(1)
        self.assertEqual(self.engine.view().selected, 1)

    def test_move_selection_on_empty_listing_is_noop(self) -> None:
        self.engine.activate(Path("/tmp"))
        self.engine.move_selection(1)

        view = self.engine.view()
        self.assertEqual(view.entries, ())
        self.assertEqual(view.selected, 0)
        self.assertIsNone(view.selected_name)

    def test_descend_then_ascend_restores_path_and_selection(self) -> None:
        self.engine.activate(Path("/home"))
        self.engine.move_selection(1)

        self.engine.descend()
        self.assertEqual(self.engine.view().virtual_path, Path("/home/bob"))
        self.assertEqual(self.engine.view().selected, 0)

        self.engine.ascend()
        view = self.engine.view()
        self.assertEqual(view.virtual_path, Path("/home"))
        self.assertEqual(view.selected_name, "bob")

    def test_descend_into_leaf_is_noop(self) -> None:
        self.engine.activate(Path("/home/alice/src"))
        self.engine.descend()

        self.assertEqual(self.engine.view().virtual_path, Path("/home/alice/src"))

    def test_ascend_at_root_is_noop(self) -> None:
        self.engine.activate(Path("/"))
        self.engine.move_selection(1)
        self.engine.ascend()

        view = self.engine.view()
        self.assertEqual(view.virtual_path, Path("/"))
        self.assertEqual(view.selected, 1)

    def test_ascend_selects_first_entry_when_child_is_not_listed(self) -> None:
        self.engine.activate(Path("/home/alice/.hidden"))
        self.engine.ascend()

        view = self.engine.view()
        self.assertEqual(view.virtual_path, Path("/home/alice"))
        self.assertEqual(view.selected, 0)

    def test_listing_failure_opens_empty_session(self) -> None:
        self.engine.activate(Path("/missing"))

        view = self.engine.view()
        self.assertTrue(self.engine.is_browsing)
        self.assertEqual(view.entries, ())

    def test_confirm_commits_virtual_path_and_ends_session(self) -> None:
        committed: list[Path] = []
        self.engine.activate(Path("/home"))
        self.engine.descend()

        target = self.engine.confirm(committed.append)

        self.assertEqual(target, Path("/home/alice"))
        self.assertEqual(committed, [Path("/home/alice")])
        self.assertFalse(self.engine.is_browsing)

    def test_failed_commit_keeps_session(self) -> None:
        def failing_commit(path: Path) -> None:
            raise FilesystemError(FilesystemErrorKind.PERMISSION_DENIED, path)

        self.engine.activate(Path("/home"))
        self.engine.descend()
        with self.assertRaises(FilesystemError):
            self.engine.confirm(failing_commit)

        self.assertTrue(self.engine.is_browsing)
        self.assertEqual(self.engine.view().virtual_path, Path("/home/alice"))

    def test_cancel_ends_session_without_commit(self) -> None:
        self.engine.activate(Path("/home"))
        self.engine.descend()
        self.engine.cancel()

        self.assertEqual(self.engine.mode, NavigationMode.INACTIVE)
        self.assertIsNone(self.engine.view())

    def test_reactivate_restarts_from_given_directory(self) -> None:
        self.engine.activate(Path("/home"))
        self.engine.descend()
        self.engine.activate(Path("/"))

        view = self.engine.view()
        self.assertEqual(view.virtual_path, Path("/"))
        self.assertEqual(view.origin_path, Path("/"))

    def test_transitions_outside_browsing_raise(self) -> None:
        for action in (
            lambda: self.engine.move_selection(1),
            self.engine.descend,
            self.engine.ascend,
            self.engine.cancel,
            lambda: self.engine.confirm(lambda _path: None),
        ):
            with self.assertRaises(NavigationStateError):
                action()


if __name__ == "__main__":
    unittest.main()
