"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from histdiff.git.models import DEFAULT_SHORT_LENGTH

ViewerMode = Literal["terminal", "external"]

VIEWER_MODES = ("terminal", "external")
MIN_SHORT_LENGTH = 4
MAX_SHORT_LENGTH = 40


@dataclass
class DisplayConfig:
    short_hash_length: int = DEFAULT_SHORT_LENGTH


@dataclass
class DiffConfig:
    context_lines: int = 3
    preview: bool = True  # hint passed to the viewer; terminal output ignores it


@dataclass
class ViewerConfig:
    mode: ViewerMode = "terminal"
    diff_command: str = "code --wait --diff $LOCAL $REMOTE"


@dataclass
class GitConfig:
    timeout: int = 30


@dataclass
class HistoryConfig:
    limit: int = 50


@dataclass
class HistdiffConfig:
    version: str = "1.0"
    display: DisplayConfig = field(default_factory=DisplayConfig)
    diff: DiffConfig = field(default_factory=DiffConfig)
    viewer: ViewerConfig = field(default_factory=ViewerConfig)
    git: GitConfig = field(default_factory=GitConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
