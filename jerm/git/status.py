"""Repository status snapshots and their collection from a probe."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Union

from .probe import DETACHED_HEAD_SENTINEL


@dataclass(frozen=True)
class StatusSnapshot:
    """Complete status for one directory, replaced as a whole value.

    ``ahead``/``behind`` are ``None`` when no upstream is configured.
    """

    identifier: str
    detached: bool
    dirty: bool
    ahead: int | None
    behind: int | None
    computed_at_generation: int

    @property
    def has_upstream(self) -> bool:
        return self.ahead is not None and self.behind is not None


class NotARepository(enum.Enum):
    """Recognized negative probe result."""

    MARKER = "not-a-repository"


NOT_A_REPOSITORY = NotARepository.MARKER

StatusOutcome = Union[StatusSnapshot, NotARepository]


class StatusProbe(Protocol):
    def is_repository(self, directory: Path) -> bool: ...

    def branch_or_sentinel(self, directory: Path) -> str: ...

    def short_hash(self, directory: Path) -> str: ...

    def is_dirty(self, directory: Path) -> bool: ...

    def ahead_behind(self, directory: Path) -> tuple[int | None, int | None]: ...

    def fetch(self, directory: Path) -> bool: ...


def collect_status(
    probe: StatusProbe,
    directory: Path,
    generation: int,
    *,
    with_sync: bool = False,
) -> StatusOutcome:
    """Query ``probe`` and package the answers as one snapshot.

    Raises ``StatusUnavailable`` when any query fails. A failed remote sync
    does not abort collection; local refs are reported as they are.
    """
    if not probe.is_repository(directory):
        return NOT_A_REPOSITORY

    if with_sync:
        probe.fetch(directory)

    identifier = probe.branch_or_sentinel(directory)
    detached = identifier == DETACHED_HEAD_SENTINEL
    if detached:
        identifier = probe.short_hash(directory)

    dirty = probe.is_dirty(directory)
    ahead, behind = probe.ahead_behind(directory)
    return StatusSnapshot(
        identifier=identifier,
        detached=detached,
        dirty=dirty,
        ahead=ahead,
        behind=behind,
        computed_at_generation=generation,
    )
