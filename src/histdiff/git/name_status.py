"""Parsers for git ``--name-status`` output.

Two shapes are handled: the NUL-separated records produced by
``git diff-tree -z`` / ``git diff -z``, and the line-oriented output of
``git log --name-status`` with a custom header format.
"""

from __future__ import annotations

import re
from typing import Generator, List, Optional

from histdiff.git.models import (
    DEFAULT_SHORT_LENGTH,
    FileChangeEntry,
    FileReference,
    FileStatus,
    HistoryEntry,
    RevisionId,
)

# --- git log header emitted by LOG_FORMAT ---

LOG_HEADER_MARK = "\x01"
LOG_FIELD_SEP = "\x1f"
LOG_FORMAT = "%x01%H%x1f%h%x1f%an%x1f%ad%x1f%s"

_STATUS_RE = re.compile(r"^[ACDMRTUX]\d*$")


def _has_two_paths(letter: str) -> bool:
    """Renames and copies carry a source and a destination path."""
    return letter[:1] in ("R", "C")


def _entry(revision: RevisionId, letter: str, paths: List[str]) -> FileChangeEntry:
    if _has_two_paths(letter):
        old_path, path = paths
        file = FileReference(path=path, old_path=old_path)
    else:
        file = FileReference(path=paths[0])
    return FileChangeEntry(revision=revision, file=file, status=FileStatus.from_letter(letter))


class NameStatusParser:
    """Parse ``--name-status -z`` output into FileChangeEntry objects.

    Every entry is stamped with *revision*. Usage::

        for entry in NameStatusParser(output, revision).parse():
            ...
    """

    def __init__(self, output: str, revision: RevisionId) -> None:
        # The record list ends with a NUL, not an empty field
        self._fields = output.rstrip("\0").split("\0")
        self._revision = revision

    def parse(self) -> Generator[FileChangeEntry, None, None]:
        idx = 0
        total = len(self._fields)

        while idx < total:
            letter = self._fields[idx].strip()
            if not letter:
                idx += 1
                continue
            if not _STATUS_RE.match(letter):
                # Not a status token: a commit id line or stray output
                idx += 1
                continue

            width = 2 if _has_two_paths(letter) else 1
            paths = self._fields[idx + 1: idx + 1 + width]
            if len(paths) < width or not all(paths):
                break  # truncated record
            yield _entry(self._revision, letter, paths)
            idx += 1 + width


def parse_file_log(output: str, short_length: int = DEFAULT_SHORT_LENGTH) -> List[HistoryEntry]:
    """Parse ``git log --name-status --format=LOG_FORMAT`` output, newest first."""
    entries: List[HistoryEntry] = []
    header: Optional[List[str]] = None

    for line in output.splitlines():
        if line.startswith(LOG_HEADER_MARK):
            header = line[len(LOG_HEADER_MARK):].split(LOG_FIELD_SEP, 4)
            continue
        if header is None or not line.strip():
            continue

        parts = line.split("\t")
        letter = parts[0]
        width = 2 if _has_two_paths(letter) else 1
        if not _STATUS_RE.match(letter) or len(parts) < 1 + width:
            continue
        full, short, author, date, subject = (header + ["", "", "", ""])[:5]
        if short and full.startswith(short):
            revision = RevisionId(full=full, short=short)
        else:
            revision = RevisionId.from_full(full, short_length)
        entries.append(
            HistoryEntry(
                change=_entry(revision, letter, parts[1:1 + width]),
                subject=subject,
                author=author,
                date=date,
            )
        )
        # --follow lists one file per commit
        header = None

    return entries
