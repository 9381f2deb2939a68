"""Git-backed history service used by the command handler."""

from __future__ import annotations

import logging
import shutil
import tempfile
import threading
from pathlib import Path
from typing import List, Optional

from histdiff.git import adapter
from histdiff.git.errors import FileNotChangedError
from histdiff.git.models import (
    DEFAULT_SHORT_LENGTH,
    FileChangeEntry,
    FileReference,
    HistoryEntry,
    RevisionId,
)

logger = logging.getLogger("histdiff.git.service")


def _find(entries: List[FileChangeEntry], path: str) -> Optional[FileChangeEntry]:
    """Match *path* against the current path first, then the previous one."""
    for entry in entries:
        if entry.file.path == path:
            return entry
    for entry in entries:
        if entry.file.old_path == path:
            return entry
    return None


class GitHistoryService:
    """History lookups and snapshot extraction for one repository.

    Snapshots are written under a private temporary directory as
    ``<tmp>/<short-hash>/<path>``. Use as a context manager to remove them::

        with GitHistoryService(repo_root) as service:
            service.get_commit_file(revision, "src/app.py")
    """

    def __init__(
        self,
        repo_root: Path,
        *,
        short_length: int = DEFAULT_SHORT_LENGTH,
        timeout: int = adapter.DEFAULT_TIMEOUT,
    ) -> None:
        self.repo_root = repo_root
        self.short_length = short_length
        self.timeout = timeout
        self._tmp_dir: Optional[Path] = None
        self._lock = threading.Lock()

    def __enter__(self) -> "GitHistoryService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.cleanup()

    @property
    def tmp_dir(self) -> Path:
        with self._lock:
            if self._tmp_dir is None:
                self._tmp_dir = Path(tempfile.mkdtemp(prefix="histdiff-"))
            return self._tmp_dir

    def cleanup(self) -> None:
        with self._lock:
            if self._tmp_dir is not None:
                shutil.rmtree(self._tmp_dir, ignore_errors=True)
                self._tmp_dir = None

    # --- revisions ---

    def resolve_revision(self, ref: str) -> RevisionId:
        return adapter.resolve_revision(self.repo_root, ref, self.short_length, self.timeout)

    def get_previous_revision(self, revision: RevisionId, file: FileReference) -> RevisionId:
        return adapter.get_previous_revision(
            self.repo_root, revision, file, self.short_length, self.timeout
        )

    # --- snapshots ---

    def get_commit_file(self, revision: RevisionId, path: str) -> Path:
        content = adapter.show_file(self.repo_root, revision, path, self.timeout)
        target = self.tmp_dir / revision.short / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        logger.debug("wrote %s@%s to %s", path, revision.short, target)
        return target

    # --- workspace ---

    def workspace_path(self, path: str) -> Path:
        return self.repo_root / path

    def workspace_file_exists(self, path: str) -> bool:
        return self.workspace_path(path).is_file()

    # --- change sets ---

    def find_change(self, revision: RevisionId, path: str) -> FileChangeEntry:
        """Return how *revision* changed *path*."""
        entry = _find(adapter.get_commit_changes(self.repo_root, revision, self.timeout), path)
        if entry is None:
            raise FileNotChangedError(f"'{path}' was not changed in {revision.short}")
        return entry

    def find_range_change(self, left: RevisionId, right: RevisionId, path: str) -> FileChangeEntry:
        """Return how *path* differs between *left* and *right*."""
        changes = adapter.get_range_changes(self.repo_root, left, right, self.timeout)
        entry = _find(changes, path)
        if entry is None:
            raise FileNotChangedError(
                f"'{path}' does not differ between {left.short} and {right.short}"
            )
        return entry

    def file_history(self, path: str, limit: Optional[int] = None) -> List[HistoryEntry]:
        return adapter.get_file_history(
            self.repo_root, path, limit, self.short_length, self.timeout
        )
