"""Comparison titles shown above a diff."""

from __future__ import annotations

from pathlib import PurePosixPath

from histdiff.git.models import RevisionId
from histdiff.history.plan import TitleSide

ARROW = "↔"
WORKING_FILE = "Working File"


def _name(path: str) -> str:
    return PurePosixPath(path).name


def format_comparison_title(left: TitleSide, right: TitleSide) -> str:
    """Label a comparison of two snapshots.

    Same base name: ``"b.txt (1a2b3c4 ↔ 5d6e7f8)"``.
    Different base names (a rename): ``"old.txt (1a2b3c4 ↔ new.txt 5d6e7f8)"``;
    only the right side repeats its name.
    """
    left_name = _name(left.path)
    right_name = _name(right.path)
    if left_name == right_name:
        return f"{left_name} ({left.revision.short} {ARROW} {right.revision.short})"
    return f"{left_name} ({left.revision.short} {ARROW} {right_name} {right.revision.short})"


def format_workspace_title(path: str, revision: RevisionId) -> str:
    return f"{_name(path)} ({revision.short} {ARROW} {WORKING_FILE})"
