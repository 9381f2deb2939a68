"""Exceptions raised by the git layer."""


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


class RevisionNotFoundError(GitError):
    """A ref or hash does not name a commit."""


class PredecessorNotFoundError(GitError):
    """No earlier commit touched the file (e.g. it starts at the root commit)."""


class SnapshotNotFoundError(GitError):
    """The path did not exist at the requested revision."""

    def __init__(self, revision: str, path: str):
        self.revision = revision
        self.path = path
        super().__init__(f"'{path}' does not exist at revision {revision[:12]}")


class FileNotChangedError(GitError):
    """The path is not part of the change set being inspected."""
