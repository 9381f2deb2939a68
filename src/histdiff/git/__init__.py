"""Git interface layer — adapter, name-status parsing, models, history service."""

from histdiff.git.errors import (
    FileNotChangedError,
    GitError,
    PredecessorNotFoundError,
    RevisionNotFoundError,
    SnapshotNotFoundError,
)
from histdiff.git.models import (
    FileChangeEntry,
    FileReference,
    FileStatus,
    HistoryEntry,
    RevisionId,
)
from histdiff.git.service import GitHistoryService

__all__ = [
    "FileChangeEntry",
    "FileNotChangedError",
    "FileReference",
    "FileStatus",
    "GitError",
    "GitHistoryService",
    "HistoryEntry",
    "PredecessorNotFoundError",
    "RevisionId",
    "RevisionNotFoundError",
    "SnapshotNotFoundError",
]
