"""Background status computation with generation-tagged results.

Each scheduled request runs on its own daemon thread and posts a completed
result to a bounded inbox. The main loop calls ``drain`` once per iteration;
only there is the cache mutated, and only when the result's generation still
matches the coordinator's generation read at that moment.
"""

from __future__ import annotations

import enum
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from queue import Empty, Queue

from ..errors import StatusUnavailable
from .status import NOT_A_REPOSITORY, StatusOutcome, StatusProbe, StatusSnapshot, collect_status

logger = logging.getLogger(__name__)

STATUS_INBOX_MAX = 64
# Upper bound on local queries one collection may run.
_LOCAL_QUERY_COUNT = 6


class RequestKind(enum.Enum):
    LOCAL_ONLY = "local"
    WITH_REMOTE_SYNC = "sync"


@dataclass(frozen=True)
class PendingRequest:
    """One in-flight status computation."""

    request_id: int
    directory: Path
    kind: RequestKind
    generation: int
    deadline: float


@dataclass(frozen=True)
class StatusResult:
    """Completed computation; ``outcome`` is ``None`` when status was unavailable."""

    request: PendingRequest
    outcome: StatusOutcome | None


@dataclass(frozen=True)
class CachedStatus:
    """Cache entry for one directory.

    ``snapshot`` is what the prompt shows. ``last_known`` keeps the most
    recent good snapshot even after a failed refresh cleared ``snapshot``.
    """

    snapshot: StatusSnapshot | None
    last_known: StatusSnapshot | None
    not_a_repository: bool
    generation: int


def _start_daemon_thread(target: Callable[[], None], name: str) -> None:
    threading.Thread(target=target, name=name, daemon=True).start()


class StatusService:
    """Schedule status probes and expose the latest applied snapshot."""

    def __init__(
        self,
        probe: StatusProbe,
        current_generation: Callable[[], int],
        *,
        timeout_seconds: float = 2.0,
        fetch_timeout_seconds: float = 15.0,
        monotonic: Callable[[], float] = time.monotonic,
        start_worker: Callable[[Callable[[], None], str], None] = _start_daemon_thread,
    ) -> None:
        self._probe = probe
        self._current_generation = current_generation
        self._timeout_seconds = timeout_seconds
        self._fetch_timeout_seconds = fetch_timeout_seconds
        self._monotonic = monotonic
        self._start_worker = start_worker
        self._lock = threading.Lock()
        self._cache: dict[Path, CachedStatus] = {}
        self._inbox: Queue[StatusResult] = Queue(maxsize=STATUS_INBOX_MAX)
        self._next_request_id = 1
        self._sync_in_flight: PendingRequest | None = None

    @property
    def sync_in_flight(self) -> PendingRequest | None:
        return self._sync_in_flight

    def _new_request(self, directory: Path, kind: RequestKind, generation: int) -> PendingRequest:
        budget = self._timeout_seconds * _LOCAL_QUERY_COUNT
        if kind is RequestKind.WITH_REMOTE_SYNC:
            budget += self._fetch_timeout_seconds
        request = PendingRequest(
            request_id=self._next_request_id,
            directory=directory,
            kind=kind,
            generation=generation,
            deadline=self._monotonic() + budget,
        )
        self._next_request_id += 1
        return request

    def _compute(self, request: PendingRequest) -> None:
        try:
            outcome: StatusOutcome | None = collect_status(
                self._probe,
                request.directory,
                request.generation,
                with_sync=request.kind is RequestKind.WITH_REMOTE_SYNC,
            )
        except StatusUnavailable as exc:
            logger.debug("status unavailable for %s: %s", request.directory, exc)
            outcome = None
        except Exception:
            logger.debug("status computation crashed for %s", request.directory, exc_info=True)
            outcome = None
        self._inbox.put(StatusResult(request=request, outcome=outcome))

    def _schedule(self, request: PendingRequest) -> PendingRequest:
        self._start_worker(lambda: self._compute(request), f"jerm-status-{request.kind.value}-{request.request_id}")
        return request

    def refresh_local(self, directory: Path, generation: int, *, force: bool = False) -> PendingRequest | None:
        """Schedule a local-only computation. Never blocks.

        Directories already known not to be repositories in this generation
        are not probed again unless ``force`` is set (a command may have just
        created the repository).
        """
        entry = self._cache.get(directory)
        if not force and entry is not None and entry.not_a_repository and entry.generation == generation:
            return None
        return self._schedule(self._new_request(directory, RequestKind.LOCAL_ONLY, generation))

    def refresh_with_sync(self, directory: Path, generation: int) -> PendingRequest | None:
        """Schedule a fetch followed by local collection.

        Only one such request may be outstanding; while it is, this returns
        ``None`` without scheduling.
        """
        in_flight = self._sync_in_flight
        if in_flight is not None and self._monotonic() < in_flight.deadline:
            return None
        request = self._new_request(directory, RequestKind.WITH_REMOTE_SYNC, generation)
        self._sync_in_flight = request
        return self._schedule(request)

    def current_snapshot(self, directory: Path, generation: int | None = None) -> StatusSnapshot | None:
        """Displayable snapshot for ``directory``.

        With ``generation``, snapshots computed under an earlier generation
        (a previous visit to the directory) are not returned.
        """
        entry = self._cache.get(directory)
        snapshot = entry.snapshot if entry is not None else None
        if snapshot is not None and generation is not None and snapshot.computed_at_generation != generation:
            return None
        return snapshot

    def last_known_snapshot(self, directory: Path) -> StatusSnapshot | None:
        entry = self._cache.get(directory)
        return entry.last_known if entry is not None else None

    def is_known_non_repository(self, directory: Path) -> bool:
        entry = self._cache.get(directory)
        return entry is not None and entry.not_a_repository

    def _apply(self, result: StatusResult) -> bool:
        with self._lock:
            if result.request.generation != self._current_generation():
                return False
            directory = result.request.directory
            previous = self._cache.get(directory)
            last_known = previous.last_known if previous is not None else None
            outcome = result.outcome
            if isinstance(outcome, StatusSnapshot):
                entry = CachedStatus(outcome, outcome, False, result.request.generation)
            elif outcome is NOT_A_REPOSITORY:
                entry = CachedStatus(None, last_known, True, result.request.generation)
            else:
                entry = CachedStatus(None, last_known, False, result.request.generation)
            self._cache[directory] = entry
            return previous is None or previous.snapshot != entry.snapshot

    def drain(self) -> bool:
        """Apply every completed result in completion order.

        Returns whether the displayable snapshot of any directory changed.
        """
        changed = False
        while True:
            try:
                result = self._inbox.get_nowait()
            except Empty:
                break
            if self._sync_in_flight is not None and result.request.request_id == self._sync_in_flight.request_id:
                self._sync_in_flight = None
            if self._apply(result):
                changed = True
        return changed


__all__ = [
    "CachedStatus",
    "PendingRequest",
    "RequestKind",
    "StatusResult",
    "StatusService",
]
