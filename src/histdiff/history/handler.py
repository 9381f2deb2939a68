"""File history command handler — runs a fetch plan and presents the result."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Protocol

from histdiff.git.models import FileChangeEntry, RevisionId
from histdiff.history.plan import FetchPlan, FetchRequest, PlanAction
from histdiff.history.requests import ComparisonRequest
from histdiff.history.resolver import HistoryLookup, resolve
from histdiff.history.titles import format_comparison_title, format_workspace_title

logger = logging.getLogger("histdiff.history.handler")


class HistoryService(HistoryLookup, Protocol):
    def get_commit_file(self, revision: RevisionId, path: str) -> Path:
        """Write *path* as of *revision* to a temporary file and return it."""
        ...

    def workspace_path(self, path: str) -> Path:
        """Return the working-copy location of *path*."""
        ...


class Presenter(Protocol):
    def show_file(self, path: Path) -> None:
        ...

    def show_diff(self, left: Path, right: Path, title: str, *, preview: bool = True) -> None:
        ...

    def show_warning(self, message: str) -> None:
        ...


class FileHistoryCommandHandler:
    """Carry out the actions available on a file entry of a commit.

    Every request ends in one of: a single file shown, a diff shown, or a
    warning shown. Degraded plans show the file and then the warning.
    Errors from the history service propagate and nothing is shown.
    """

    def __init__(self, service: HistoryService, presenter: Presenter, *, preview: bool = True) -> None:
        self.service = service
        self.presenter = presenter
        self.preview = preview

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def view_file(self, entry: FileChangeEntry) -> FetchPlan:
        return self.execute(ComparisonRequest.view_file(entry))

    def compare_file_with_workspace(self, entry: FileChangeEntry) -> FetchPlan:
        return self.execute(ComparisonRequest.compare_with_workspace(entry))

    def compare_file_with_previous(self, entry: FileChangeEntry) -> FetchPlan:
        return self.execute(ComparisonRequest.compare_with_previous(entry))

    def view_previous_file(self, entry: FileChangeEntry) -> FetchPlan:
        return self.execute(ComparisonRequest.view_previous(entry))

    def compare_file_across_commits(self, entry: FileChangeEntry, right: RevisionId) -> FetchPlan:
        return self.execute(ComparisonRequest.compare_across_revisions(entry, right))

    # ------------------------------------------------------------------
    # Plan execution
    # ------------------------------------------------------------------

    def execute(self, request: ComparisonRequest) -> FetchPlan:
        """Resolve *request*, fetch its snapshots and hand them to the presenter."""
        plan = resolve(request, self.service)

        if plan.is_blocked:
            self.presenter.show_warning(plan.warning)
            return plan

        files = self._fetch(plan.fetches)

        if plan.action is PlanAction.VIEW:
            self.presenter.show_file(files[0])
        elif plan.action is PlanAction.DIFF:
            left, right = plan.title_inputs
            title = format_comparison_title(left, right)
            self.presenter.show_diff(files[0], files[1], title, preview=self.preview)
        elif plan.action is PlanAction.DIFF_WORKSPACE:
            fetch = plan.fetches[0]
            title = format_workspace_title(fetch.path, fetch.revision)
            workspace_file = self.service.workspace_path(plan.workspace_path)
            self.presenter.show_diff(files[0], workspace_file, title, preview=self.preview)

        if plan.is_degraded:
            self.presenter.show_warning(plan.warning)
        return plan

    def _fetch(self, fetches: tuple[FetchRequest, ...]) -> List[Path]:
        """Fetch every snapshot of a plan, in plan order.

        Two snapshots are fetched concurrently. Results are collected in
        submission order, so the left file stays on the left whichever
        finishes first. The first failure propagates.
        """
        if len(fetches) == 1:
            fetch = fetches[0]
            logger.debug("fetching %s@%s", fetch.path, fetch.revision.short)
            return [self.service.get_commit_file(fetch.revision, fetch.path)]

        logger.debug(
            "fetching %s concurrently",
            ", ".join(f"{f.path}@{f.revision.short}" for f in fetches),
        )
        with ThreadPoolExecutor(max_workers=len(fetches)) as executor:
            futures = [
                executor.submit(self.service.get_commit_file, f.revision, f.path)
                for f in fetches
            ]
            return [future.result() for future in futures]
