"""Fetch plans — which snapshots to retrieve and what to do with them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Tuple

from histdiff.git.models import RevisionId


class PlanAction(str, Enum):
    VIEW = "view"  # show one snapshot
    DIFF = "diff"  # compare two snapshots
    DIFF_WORKSPACE = "diff_workspace"  # compare one snapshot with the working file
    WARN = "warn"  # nothing to show, only a message


class FetchRequest(NamedTuple):
    revision: RevisionId
    path: str


class TitleSide(NamedTuple):
    path: str
    revision: RevisionId


_FETCH_COUNT = {
    PlanAction.VIEW: 1,
    PlanAction.DIFF: 2,
    PlanAction.DIFF_WORKSPACE: 1,
    PlanAction.WARN: 0,
}


@dataclass(frozen=True)
class FetchPlan:
    """Resolver output.

    Fetches are ordered left to right. A plan with fetches and a warning
    is *degraded*: the snapshot is still shown and the warning explains why
    the requested comparison did not happen. A ``WARN`` plan shows nothing.
    """

    action: PlanAction
    fetches: Tuple[FetchRequest, ...] = ()
    warning: Optional[str] = None
    title_inputs: Optional[Tuple[TitleSide, TitleSide]] = None
    workspace_path: Optional[str] = None

    def __post_init__(self) -> None:
        expected = _FETCH_COUNT[self.action]
        if len(self.fetches) != expected:
            raise ValueError(
                f"{self.action.value} plan needs {expected} fetch(es), got {len(self.fetches)}"
            )
        if self.action is PlanAction.WARN and not self.warning:
            raise ValueError("a plan without fetches must carry a warning")
        if self.action is PlanAction.DIFF and self.title_inputs is None:
            raise ValueError("a diff plan must carry title inputs")
        if self.action is PlanAction.DIFF_WORKSPACE and not self.workspace_path:
            raise ValueError("a workspace diff plan must name the workspace file")

    @classmethod
    def warn(cls, message: str) -> "FetchPlan":
        return cls(PlanAction.WARN, warning=message)

    @classmethod
    def view(cls, fetch: FetchRequest, warning: Optional[str] = None) -> "FetchPlan":
        return cls(PlanAction.VIEW, (fetch,), warning=warning)

    @classmethod
    def diff(cls, left: FetchRequest, right: FetchRequest) -> "FetchPlan":
        return cls(
            PlanAction.DIFF,
            (left, right),
            title_inputs=(TitleSide(left.path, left.revision), TitleSide(right.path, right.revision)),
        )

    @classmethod
    def diff_workspace(cls, fetch: FetchRequest, workspace_path: str) -> "FetchPlan":
        return cls(PlanAction.DIFF_WORKSPACE, (fetch,), workspace_path=workspace_path)

    @property
    def is_blocked(self) -> bool:
        return self.action is PlanAction.WARN

    @property
    def is_degraded(self) -> bool:
        return bool(self.fetches) and self.warning is not None
