"""Comparison requests — one per user action on a historical file entry."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from histdiff.git.models import FileChangeEntry, RevisionId


class Intent(str, Enum):
    VIEW_FILE = "view_file"
    COMPARE_WITH_WORKSPACE = "compare_with_workspace"
    COMPARE_WITH_PREVIOUS = "compare_with_previous"
    VIEW_PREVIOUS = "view_previous"
    COMPARE_ACROSS_REVISIONS = "compare_across_revisions"


@dataclass(frozen=True)
class ComparisonRequest:
    """What the user asked for, and the file change it applies to.

    ``right_revision`` is the right-hand commit of a cross-revision
    comparison and must be absent for every other intent.
    """

    intent: Intent
    entry: FileChangeEntry
    right_revision: Optional[RevisionId] = None

    def __post_init__(self) -> None:
        across = self.intent is Intent.COMPARE_ACROSS_REVISIONS
        if across and self.right_revision is None:
            raise ValueError("compare_across_revisions requires a right revision")
        if not across and self.right_revision is not None:
            raise ValueError(f"{self.intent.value} does not take a right revision")

    @classmethod
    def view_file(cls, entry: FileChangeEntry) -> "ComparisonRequest":
        return cls(Intent.VIEW_FILE, entry)

    @classmethod
    def compare_with_workspace(cls, entry: FileChangeEntry) -> "ComparisonRequest":
        return cls(Intent.COMPARE_WITH_WORKSPACE, entry)

    @classmethod
    def compare_with_previous(cls, entry: FileChangeEntry) -> "ComparisonRequest":
        return cls(Intent.COMPARE_WITH_PREVIOUS, entry)

    @classmethod
    def view_previous(cls, entry: FileChangeEntry) -> "ComparisonRequest":
        return cls(Intent.VIEW_PREVIOUS, entry)

    @classmethod
    def compare_across_revisions(
        cls, entry: FileChangeEntry, right: RevisionId
    ) -> "ComparisonRequest":
        return cls(Intent.COMPARE_ACROSS_REVISIONS, entry, right)
