"""Comparison requests, fetch plans, status resolution and titles."""

from histdiff.history.handler import FileHistoryCommandHandler, HistoryService, Presenter
from histdiff.history.plan import FetchPlan, FetchRequest, PlanAction, TitleSide
from histdiff.history.requests import ComparisonRequest, Intent
from histdiff.history.resolver import HistoryLookup, resolve
from histdiff.history.titles import format_comparison_title, format_workspace_title

__all__ = [
    "ComparisonRequest",
    "FetchPlan",
    "FetchRequest",
    "FileHistoryCommandHandler",
    "HistoryLookup",
    "HistoryService",
    "Intent",
    "PlanAction",
    "Presenter",
    "TitleSide",
    "format_comparison_title",
    "format_workspace_title",
    "resolve",
]
