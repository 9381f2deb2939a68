"""Data models for commits, file references and per-commit file changes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import Optional

DEFAULT_SHORT_LENGTH = 7


@dataclass(frozen=True, slots=True)
class RevisionId:
    """A commit hash in its full (lookup) and short (display) forms."""

    full: str
    short: str

    def __post_init__(self) -> None:
        if not self.full:
            raise ValueError("revision hash must not be empty")
        if not self.short or not self.full.startswith(self.short):
            raise ValueError(f"short hash {self.short!r} is not a prefix of {self.full!r}")

    @classmethod
    def from_full(cls, full: str, length: int = DEFAULT_SHORT_LENGTH) -> "RevisionId":
        return cls(full=full, short=full[:length])

    def __str__(self) -> str:
        return self.short


class FileStatus(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    TYPE_CHANGED = "type_changed"
    UNMERGED = "unmerged"
    UNKNOWN = "unknown"

    @classmethod
    def from_letter(cls, letter: str) -> "FileStatus":
        """Map a git name-status letter (``R086``, ``M``, ...) to a status."""
        return _LETTER_STATUS.get(letter[:1].upper(), cls.UNKNOWN)


_LETTER_STATUS = {
    "A": FileStatus.ADDED,
    "M": FileStatus.MODIFIED,
    "D": FileStatus.DELETED,
    "R": FileStatus.RENAMED,
    "C": FileStatus.COPIED,
    "T": FileStatus.TYPE_CHANGED,
    "U": FileStatus.UNMERGED,
}


@dataclass(frozen=True)
class FileReference:
    """A repository-relative path, plus the path it had before a rename."""

    path: str
    old_path: Optional[str] = None  # set on renames / copies

    @property
    def previous_path(self) -> str:
        return self.old_path or self.path

    @property
    def name(self) -> str:
        return PurePosixPath(self.path).name


@dataclass(frozen=True)
class FileChangeEntry:
    """One file changed by one commit."""

    revision: RevisionId
    file: FileReference
    status: FileStatus = FileStatus.MODIFIED


@dataclass(frozen=True)
class HistoryEntry:
    """A row of a file's history listing."""

    change: FileChangeEntry
    subject: str = ""
    author: str = ""
    date: str = ""
