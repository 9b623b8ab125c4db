"""Bounded-time ``git`` queries used to build status snapshots.

Every call runs with a timeout. Any spawn error, timeout, non-zero exit, or
malformed output surfaces as ``StatusUnavailable``; callers never see finer
failure kinds.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from ..errors import StatusUnavailable

logger = logging.getLogger(__name__)

DETACHED_HEAD_SENTINEL = "HEAD"


class GitProbe:
    """Run individual ``git`` queries for one directory at a time."""

    def __init__(
        self,
        timeout_seconds: float = 2.0,
        fetch_timeout_seconds: float = 15.0,
        git_executable: str = "git",
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.fetch_timeout_seconds = fetch_timeout_seconds
        self.git_executable = git_executable

    def _run(
        self,
        directory: Path,
        args: list[str],
        timeout_seconds: float | None = None,
    ) -> subprocess.CompletedProcess[str]:
        timeout = self.timeout_seconds if timeout_seconds is None else timeout_seconds
        try:
            return subprocess.run(
                [self.git_executable, "-C", str(directory), *args],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as exc:
            logger.debug("git %s timed out after %.1fs in %s", " ".join(args), timeout, directory)
            raise StatusUnavailable(f"git {args[0]} timed out") from exc
        except OSError as exc:
            logger.debug("git %s could not start in %s: %s", " ".join(args), directory, exc)
            raise StatusUnavailable(f"git {args[0]} failed to start") from exc

    def _output(self, directory: Path, args: list[str]) -> str:
        proc = self._run(directory, args)
        if proc.returncode != 0:
            raise StatusUnavailable(f"git {args[0]} exited with {proc.returncode}")
        return proc.stdout

    def is_repository(self, directory: Path) -> bool:
        """Return whether ``directory`` belongs to a git repository.

        ``rev-parse --git-dir`` succeeds anywhere git finds a repository,
        including bare repositories and the inside of a ``.git`` directory.
        A non-zero exit is the recognized "not a repository" answer, distinct
        from a probe failure.
        """
        proc = self._run(directory, ["rev-parse", "--git-dir"])
        return proc.returncode == 0

    def branch_or_sentinel(self, directory: Path) -> str:
        """Return the current branch, or ``HEAD`` when detached."""
        name = self._output(directory, ["rev-parse", "--abbrev-ref", "HEAD"]).strip()
        if not name or "\n" in name:
            raise StatusUnavailable("unexpected branch output")
        return name

    def short_hash(self, directory: Path) -> str:
        value = self._output(directory, ["rev-parse", "--short", "HEAD"]).strip()
        if not value or any(ch not in "0123456789abcdef" for ch in value):
            raise StatusUnavailable("unexpected commit hash output")
        return value

    def is_dirty(self, directory: Path) -> bool:
        return bool(self._output(directory, ["status", "--porcelain"]).strip())

    def ahead_behind(self, directory: Path) -> tuple[int | None, int | None]:
        """Return ``(ahead, behind)`` relative to upstream, or ``(None, None)``.

        ``None`` means no upstream is configured, which is not the same as a
        count of zero.
        """
        upstream = self._run(directory, ["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{upstream}"])
        if upstream.returncode != 0:
            return None, None

        counts = self._output(directory, ["rev-list", "--left-right", "--count", "HEAD...@{upstream}"])
        parts = counts.split()
        if len(parts) != 2:
            raise StatusUnavailable(f"unexpected ahead/behind output: {counts!r}")
        try:
            ahead, behind = int(parts[0]), int(parts[1])
        except ValueError as exc:
            raise StatusUnavailable(f"unexpected ahead/behind output: {counts!r}") from exc
        if ahead < 0 or behind < 0:
            raise StatusUnavailable(f"unexpected ahead/behind output: {counts!r}")
        return ahead, behind

    def fetch(self, directory: Path) -> bool:
        """Sync remote refs. Returns whether the fetch succeeded."""
        try:
            proc = self._run(directory, ["fetch", "--quiet"], timeout_seconds=self.fetch_timeout_seconds)
        except StatusUnavailable:
            return False
        if proc.returncode != 0:
            logger.debug("git fetch exited with %s in %s", proc.returncode, directory)
            return False
        return True
