"""Repository status: probing, snapshots, and the background service."""

from .probe import DETACHED_HEAD_SENTINEL, GitProbe
from .service import CachedStatus, PendingRequest, RequestKind, StatusResult, StatusService
from .status import NOT_A_REPOSITORY, NotARepository, StatusSnapshot, collect_status

__all__ = [
    "CachedStatus",
    "DETACHED_HEAD_SENTINEL",
    "GitProbe",
    "NOT_A_REPOSITORY",
    "NotARepository",
    "PendingRequest",
    "RequestKind",
    "StatusResult",
    "StatusService",
    "StatusSnapshot",
    "collect_status",
]
