"""Presenters — terminal and external diff tool."""

from histdiff.output.external import ExternalToolPresenter
from histdiff.output.terminal import PresenterError, TerminalPresenter

__all__ = ["ExternalToolPresenter", "PresenterError", "TerminalPresenter"]
