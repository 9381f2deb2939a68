"""Status resolver — decides which snapshots a request needs.

``resolve`` keeps no state and performs no I/O of its own. The two questions
it cannot answer from the request alone (which commit precedes this one for
the file, and whether the working copy of the file exists) are put to a
``HistoryLookup``, and only on the branches that need the answer. Anything
the lookup raises propagates unchanged.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Protocol

from histdiff.git.models import FileChangeEntry, FileReference, FileStatus, RevisionId
from histdiff.history.plan import FetchPlan, FetchRequest
from histdiff.history.requests import ComparisonRequest, Intent

logger = logging.getLogger("histdiff.history.resolver")

MSG_VIEW_DELETED = "File cannot be viewed as it was deleted"
MSG_COMPARE_DELETED = "File cannot be compared with, as it was deleted"
MSG_WORKSPACE_MISSING = "Corresponding workspace file does not exist"
MSG_PREVIOUS_DELETED = "File cannot be compared with, as it was deleted. Showing deleted version."
MSG_PREVIOUS_ADDED = "File cannot be compared with previous, as this is a new file. Showing it."
MSG_VIEW_PREVIOUS_ADDED = "Previous version of the file cannot be opened, as this is a new file"
MSG_ACROSS_ADDED = "File cannot be compared, as this is a new file"


class HistoryLookup(Protocol):
    def get_previous_revision(self, revision: RevisionId, file: FileReference) -> RevisionId:
        """Return the last commit before *revision* that touched *file*."""
        ...

    def workspace_file_exists(self, path: str) -> bool:
        """Return True if the working copy of *path* exists."""
        ...


def _current(entry: FileChangeEntry) -> FetchRequest:
    return FetchRequest(entry.revision, entry.file.path)


def _previous(entry: FileChangeEntry, lookup: HistoryLookup) -> FetchRequest:
    # A renamed file is fetched under the name it had before the rename
    previous = lookup.get_previous_revision(entry.revision, entry.file)
    return FetchRequest(previous, entry.file.previous_path)


def _view_file(request: ComparisonRequest, lookup: HistoryLookup) -> FetchPlan:
    entry = request.entry
    if entry.status is FileStatus.DELETED:
        return FetchPlan.warn(MSG_VIEW_DELETED)
    return FetchPlan.view(_current(entry))


def _compare_with_workspace(request: ComparisonRequest, lookup: HistoryLookup) -> FetchPlan:
    entry = request.entry
    if entry.status is FileStatus.DELETED:
        return FetchPlan.warn(MSG_COMPARE_DELETED)
    if not lookup.workspace_file_exists(entry.file.path):
        return FetchPlan.warn(MSG_WORKSPACE_MISSING)
    return FetchPlan.diff_workspace(_current(entry), entry.file.path)


def _compare_with_previous(request: ComparisonRequest, lookup: HistoryLookup) -> FetchPlan:
    entry = request.entry
    if entry.status is FileStatus.DELETED:
        return FetchPlan.view(_previous(entry, lookup), warning=MSG_PREVIOUS_DELETED)
    if entry.status is FileStatus.ADDED:
        return FetchPlan.view(_current(entry), warning=MSG_PREVIOUS_ADDED)
    return FetchPlan.diff(_previous(entry, lookup), _current(entry))


def _view_previous(request: ComparisonRequest, lookup: HistoryLookup) -> FetchPlan:
    entry = request.entry
    if entry.status is FileStatus.ADDED:
        return FetchPlan.warn(MSG_VIEW_PREVIOUS_ADDED)
    return FetchPlan.view(_previous(entry, lookup))


def _compare_across_revisions(request: ComparisonRequest, lookup: HistoryLookup) -> FetchPlan:
    entry = request.entry
    if entry.status is FileStatus.DELETED:
        return FetchPlan.warn(MSG_COMPARE_DELETED)
    if entry.status is FileStatus.ADDED:
        return FetchPlan.warn(MSG_ACROSS_ADDED)
    # Both sides use the current path, renames included
    path = entry.file.path
    return FetchPlan.diff(
        FetchRequest(entry.revision, path),
        FetchRequest(request.right_revision, path),
    )


_RESOLVERS: Dict[Intent, Callable[[ComparisonRequest, HistoryLookup], FetchPlan]] = {
    Intent.VIEW_FILE: _view_file,
    Intent.COMPARE_WITH_WORKSPACE: _compare_with_workspace,
    Intent.COMPARE_WITH_PREVIOUS: _compare_with_previous,
    Intent.VIEW_PREVIOUS: _view_previous,
    Intent.COMPARE_ACROSS_REVISIONS: _compare_across_revisions,
}


def resolve(request: ComparisonRequest, lookup: HistoryLookup) -> FetchPlan:
    """Return the fetch plan for *request*."""
    plan = _RESOLVERS[request.intent](request, lookup)
    logger.debug(
        "%s %s@%s (%s) -> %s%s",
        request.intent.value,
        request.entry.file.path,
        request.entry.revision.short,
        request.entry.status.value,
        plan.action.value,
        f" [{plan.warning}]" if plan.warning else "",
    )
    return plan
