"""Shared test fixtures — revisions, fake history services, temp git repos."""

from __future__ import annotations

import subprocess
import threading
from pathlib import Path
from types import SimpleNamespace
from typing import Dict, List, Optional, Tuple

import pytest

from histdiff.git.models import FileChangeEntry, FileReference, FileStatus, RevisionId


def rev(full: str, short: Optional[str] = None) -> RevisionId:
    return RevisionId(full=full, short=short or full[:4])


def entry(
    path: str,
    status: FileStatus = FileStatus.MODIFIED,
    revision: Optional[RevisionId] = None,
    old_path: Optional[str] = None,
) -> FileChangeEntry:
    return FileChangeEntry(
        revision=revision or rev("deadbeef"),
        file=FileReference(path=path, old_path=old_path),
        status=status,
    )


class FakeHistory:
    """In-memory history service.

    ``snapshots`` maps (full hash, path) to file content. Every call is
    recorded in ``calls`` so tests can assert which lookups happened.
    """

    def __init__(
        self,
        tmp_path: Path,
        *,
        previous: Optional[RevisionId] = None,
        workspace: Tuple[str, ...] = (),
        snapshots: Optional[Dict[Tuple[str, str], str]] = None,
    ) -> None:
        self.tmp_path = tmp_path
        self.previous = previous or rev("cafef00d")
        self.workspace = set(workspace)
        self.snapshots = snapshots or {}
        self.calls: List[tuple] = []
        self.gates: Dict[str, threading.Event] = {}
        self.completed: List[str] = []
        self._lock = threading.Lock()

    def get_previous_revision(self, revision, file):
        self.calls.append(("previous", revision.full, file))
        return self.previous

    def workspace_file_exists(self, path):
        self.calls.append(("exists", path))
        return path in self.workspace

    def workspace_path(self, path):
        return self.tmp_path / "workspace" / path

    def get_commit_file(self, revision, path):
        gate = self.gates.get(revision.full)
        if gate is not None:
            assert gate.wait(timeout=5), "gate never opened"
        key = (revision.full, path)
        if key not in self.snapshots:
            from histdiff.git.errors import SnapshotNotFoundError

            raise SnapshotNotFoundError(revision.full, path)
        target = self.tmp_path / "snapshots" / revision.short / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.snapshots[key])
        with self._lock:
            self.completed.append(revision.full)
        return target


class RecordingPresenter:
    def __init__(self) -> None:
        self.events: List[tuple] = []

    def show_file(self, path):
        self.events.append(("file", path))

    def show_diff(self, left, right, title, *, preview=True):
        self.events.append(("diff", left, right, title, preview))

    def show_warning(self, message):
        self.events.append(("warning", message))


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


def _git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, check=True
    )
    return result.stdout.strip()


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create an empty temporary git repository."""
    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init")
    _git(repo, "config", "user.email", "test@test.com")
    _git(repo, "config", "user.name", "Test")
    _git(repo, "config", "commit.gpgsign", "false")
    return repo


@pytest.fixture
def history_repo(tmp_git_repo: Path) -> SimpleNamespace:
    """A repository whose four commits add, modify, rename and delete files.

    added:    a.txt, b.txt
    modified: a.txt
    renamed:  b.txt -> c.txt
    deleted:  a.txt
    """
    repo = tmp_git_repo

    def commit(message: str) -> str:
        _git(repo, "commit", "-q", "-m", message)
        return _git(repo, "rev-parse", "HEAD")

    (repo / "a.txt").write_text("one\n")
    (repo / "b.txt").write_text("bee\nbee\nbee\nbee\n")
    _git(repo, "add", ".")
    added = commit("add a and b")

    (repo / "a.txt").write_text("one\ntwo\n")
    _git(repo, "add", "a.txt")
    modified = commit("extend a")

    _git(repo, "mv", "b.txt", "c.txt")
    renamed = commit("rename b to c")

    _git(repo, "rm", "-q", "a.txt")
    deleted = commit("drop a")

    return SimpleNamespace(
        root=repo,
        added=added,
        modified=modified,
        renamed=renamed,
        deleted=deleted,
    )


@pytest.fixture
def merge_repo(tmp_git_repo: Path) -> SimpleNamespace:
    """A side branch that edits m.txt, merged with --no-ff.

    base:   m.txt
    main:   o.txt (first parent of the merge)
    side:   m.txt gains a line
    merge:  side merged into main
    """
    repo = tmp_git_repo

    def commit(message: str) -> str:
        _git(repo, "commit", "-q", "-m", message)
        return _git(repo, "rev-parse", "HEAD")

    (repo / "m.txt").write_text("base\n")
    _git(repo, "add", "m.txt")
    base = commit("base")
    trunk = _git(repo, "rev-parse", "--abbrev-ref", "HEAD")

    _git(repo, "checkout", "-q", "-b", "side")
    (repo / "m.txt").write_text("base\nside\n")
    _git(repo, "add", "m.txt")
    side = commit("side edit")

    _git(repo, "checkout", "-q", trunk)
    (repo / "o.txt").write_text("other\n")
    _git(repo, "add", "o.txt")
    main = commit("main edit")

    _git(repo, "merge", "-q", "--no-ff", "-m", "merge side", "side")
    merge = _git(repo, "rev-parse", "HEAD")

    return SimpleNamespace(root=repo, base=base, side=side, main=main, merge=merge)
