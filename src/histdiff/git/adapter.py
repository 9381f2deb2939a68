"""Git subprocess wrapper — revisions, predecessors, snapshots, change sets."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from histdiff.git.errors import (
    GitError,
    PredecessorNotFoundError,
    RevisionNotFoundError,
    SnapshotNotFoundError,
)
from histdiff.git.models import (
    DEFAULT_SHORT_LENGTH,
    FileChangeEntry,
    FileReference,
    HistoryEntry,
    RevisionId,
)
from histdiff.git.name_status import LOG_FORMAT, NameStatusParser, parse_file_log

logger = logging.getLogger("histdiff.git.adapter")

DEFAULT_TIMEOUT = 30

_MISSING_PATH_MARKERS = ("does not exist in", "exists on disk, but not in")
_UNKNOWN_REVISION_MARKERS = ("unknown revision", "bad revision", "ambiguous argument", "bad object")


def _run_git_raw(args: list[str], cwd: Path, timeout: int = DEFAULT_TIMEOUT) -> bytes:
    """Run a git command and return raw stdout. Raises GitError on failure."""
    logger.debug("git %s (cwd=%s)", " ".join(args), cwd)
    try:
        result = subprocess.run(
            ["git", "-c", "core.quotepath=false", *args],
            cwd=cwd,
            capture_output=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        raise GitError("git is not installed or not on PATH")
    except subprocess.TimeoutExpired:
        raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}")

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        raise GitError(f"git error: {stderr or f'exit status {result.returncode}'}")
    return result.stdout


def _run_git(args: list[str], cwd: Path, timeout: int = DEFAULT_TIMEOUT) -> str:
    """Run a git command and return decoded stdout."""
    return _run_git_raw(args, cwd, timeout).decode("utf-8", errors="replace")


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the root of the current git repository."""
    cwd = cwd or Path.cwd()
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    return Path(out.strip())


def _is_unknown_revision(exc: GitError) -> bool:
    message = str(exc).lower()
    return any(marker in message for marker in _UNKNOWN_REVISION_MARKERS)


def _parse_revision_line(out: str, short_length: int) -> Optional[RevisionId]:
    line = out.strip()
    if not line:
        return None
    full, _, short = line.partition("\0")
    short = short or full[:short_length]
    return RevisionId(full=full, short=short)


def resolve_revision(
    repo_root: Path,
    ref: str,
    short_length: int = DEFAULT_SHORT_LENGTH,
    timeout: int = DEFAULT_TIMEOUT,
) -> RevisionId:
    """Resolve *ref* (branch, tag, hash prefix, HEAD~2 ...) to a commit."""
    try:
        out = _run_git(
            ["log", "-1", "--format=%H%x00%h", f"--abbrev={short_length}", ref, "--"],
            cwd=repo_root,
            timeout=timeout,
        )
    except GitError as exc:
        if not _is_unknown_revision(exc):
            raise
        raise RevisionNotFoundError(f"Unknown revision: {ref}") from exc
    revision = _parse_revision_line(out, short_length)
    if revision is None:
        raise RevisionNotFoundError(f"Unknown revision: {ref}")
    return revision


def get_previous_revision(
    repo_root: Path,
    revision: RevisionId,
    file: FileReference,
    short_length: int = DEFAULT_SHORT_LENGTH,
    timeout: int = DEFAULT_TIMEOUT,
) -> RevisionId:
    """Return the last commit before *revision* that touched the file.

    The search starts at the first parent and follows the path the file had
    before *revision* (its previous path when renamed).
    """
    path = file.previous_path
    try:
        out = _run_git(
            [
                "log", "-1", "--format=%H%x00%h", f"--abbrev={short_length}",
                f"{revision.full}^", "--", path,
            ],
            cwd=repo_root,
            timeout=timeout,
        )
    except GitError as exc:
        if not _is_unknown_revision(exc):
            raise
        # Root commits have no parent to start from
        raise PredecessorNotFoundError(
            f"No previous revision of '{path}' before {revision.short}"
        ) from exc

    previous = _parse_revision_line(out, short_length)
    if previous is None:
        raise PredecessorNotFoundError(f"No previous revision of '{path}' before {revision.short}")
    logger.debug("previous revision of %s before %s is %s", path, revision.short, previous.short)
    return previous


def show_file(
    repo_root: Path,
    revision: RevisionId,
    path: str,
    timeout: int = DEFAULT_TIMEOUT,
) -> bytes:
    """Return the content of *path* as of *revision*."""
    try:
        return _run_git_raw(["show", f"{revision.full}:{path}"], cwd=repo_root, timeout=timeout)
    except GitError as exc:
        message = str(exc)
        if any(marker in message for marker in _MISSING_PATH_MARKERS):
            raise SnapshotNotFoundError(revision.full, path) from exc
        raise


def get_commit_changes(
    repo_root: Path,
    revision: RevisionId,
    timeout: int = DEFAULT_TIMEOUT,
) -> List[FileChangeEntry]:
    """Return every file changed by *revision* (first parent, renames detected).

    A merge commit is diffed against its first parent, the same parent
    ``get_previous_revision`` starts from.
    """
    out = _run_git(
        [
            "diff-tree", "--root", "--no-commit-id", "-r", "-m", "--first-parent",
            "-M", "--name-status", "-z", revision.full,
        ],
        cwd=repo_root,
        timeout=timeout,
    )
    return list(NameStatusParser(out, revision).parse())


def get_range_changes(
    repo_root: Path,
    left: RevisionId,
    right: RevisionId,
    timeout: int = DEFAULT_TIMEOUT,
) -> List[FileChangeEntry]:
    """Return files that differ between two commits, stamped with *left*."""
    out = _run_git(
        ["diff", "-M", "--name-status", "-z", left.full, right.full, "--"],
        cwd=repo_root,
        timeout=timeout,
    )
    return list(NameStatusParser(out, left).parse())


def get_file_history(
    repo_root: Path,
    path: str,
    limit: Optional[int] = None,
    short_length: int = DEFAULT_SHORT_LENGTH,
    timeout: int = DEFAULT_TIMEOUT,
) -> List[HistoryEntry]:
    """Return the commits that touched *path*, newest first, following renames."""
    args = [
        "log", "--follow", "-M", "--name-status", "--date=short",
        f"--abbrev={short_length}", f"--format={LOG_FORMAT}",
    ]
    if limit:
        args.append(f"--max-count={limit}")
    args += ["--", path]
    out = _run_git(args, cwd=repo_root, timeout=timeout)
    return parse_file_log(out, short_length)
