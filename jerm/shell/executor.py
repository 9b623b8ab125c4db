"""Directory changes and shell command execution.

Commands run through ``sh -c`` on a background thread so the key loop never
waits on them; completed results are drained by the main loop.
"""

from __future__ import annotations

import logging
import os
import subprocess
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from queue import Empty, Queue

from ..errors import FilesystemError, InvalidPath
from ..navigation.lister import validate_directory

logger = logging.getLogger(__name__)


def resolve_cd_path(text: str | None, current_dir: Path, previous_dir: Path | None = None) -> Path:
    """Resolve a ``cd`` argument to an absolute, validated directory.

    Handles ``~``, ``~/sub``, ``-`` (previous directory), absolute and
    relative paths. ``None`` means the home directory.
    """
    target = (text or "~").strip()
    if len(target) >= 2 and target[0] == target[-1] and target[0] in {"'", '"'}:
        target = target[1:-1]

    if target == "-":
        if previous_dir is None:
            raise InvalidPath("cd: no previous directory")
        expanded = previous_dir
    elif target == "~" or target.startswith("~/"):
        expanded = Path(os.path.expanduser(target))
    else:
        candidate = Path(target)
        expanded = candidate if candidate.is_absolute() else current_dir / candidate

    try:
        resolved = expanded.resolve()
    except (OSError, RuntimeError) as exc:
        raise InvalidPath(f"cd: cannot resolve {target}") from exc
    return validate_directory(resolved)


def set_actual_directory(path: Path) -> None:
    """Make ``path`` the process working directory, or raise ``FilesystemError``."""
    validate_directory(path)
    try:
        os.chdir(path)
    except OSError as exc:
        raise FilesystemError.from_os_error(exc, path) from exc


@dataclass(frozen=True)
class CommandResult:
    command: str
    cwd: Path
    stdout: list[str]
    stderr: list[str]
    exit_code: int

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    def all_lines(self) -> list[str]:
        return [*self.stdout, *self.stderr]


def execute_command(command: str, cwd: Path, timeout_seconds: float | None = None) -> CommandResult:
    """Run ``command`` with ``sh -c`` in ``cwd`` and capture its output."""
    try:
        proc = subprocess.run(
            ["sh", "-c", command],
            cwd=str(cwd),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout_seconds,
        )
    except subprocess.TimeoutExpired:
        logger.info("command timed out after %ss: %s", timeout_seconds, command)
        return CommandResult(command, cwd, [], [f"Error: command timed out after {timeout_seconds:g}s"], -1)
    except OSError as exc:
        return CommandResult(command, cwd, [], [f"Error: {exc}"], -1)
    return CommandResult(
        command=command,
        cwd=cwd,
        stdout=proc.stdout.splitlines(),
        stderr=proc.stderr.splitlines(),
        exit_code=proc.returncode,
    )


class CommandRunner:
    """Run one shell command at a time off the key loop."""

    def __init__(
        self,
        timeout_seconds: float | None = None,
        execute: Callable[[str, Path, float | None], CommandResult] = execute_command,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._execute = execute
        self._lock = threading.Lock()
        self._running = False
        self._results: Queue[CommandResult] = Queue()

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    def _worker(self, command: str, cwd: Path) -> None:
        try:
            result = self._execute(command, cwd, self._timeout_seconds)
        except Exception as exc:
            logger.exception("command runner failed for %r", command)
            result = CommandResult(command, cwd, [], [f"Error: {exc}"], -1)
        self._results.put(result)

    def submit(self, command: str, cwd: Path) -> bool:
        """Start ``command`` unless one is already running."""
        with self._lock:
            if self._running:
                return False
            self._running = True
        worker = threading.Thread(
            target=self._worker,
            args=(command, cwd),
            name="jerm-command",
            daemon=True,
        )
        worker.start()
        return True

    def drain_results(self) -> list[CommandResult]:
        """Drain completed commands; the runner accepts new work once drained."""
        out: list[CommandResult] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        if out:
            with self._lock:
                self._running = False
        return out
