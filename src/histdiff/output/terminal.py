"""Rich terminal presenter — file snapshots, unified diffs, warnings."""

from __future__ import annotations

import difflib
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax


class PresenterError(Exception):
    """Raised when a snapshot or diff cannot be displayed."""


def _read_lines(path: Path) -> List[str]:
    try:
        text = path.read_bytes().decode("utf-8", errors="replace")
    except OSError as exc:
        raise PresenterError(f"Cannot read {path}: {exc}") from exc
    return text.splitlines(keepends=True)


def unified_diff(left: Path, right: Path, context_lines: int = 3) -> str:
    """Return the unified diff of two files as text."""
    lines = difflib.unified_diff(
        _read_lines(left),
        _read_lines(right),
        fromfile=f"a/{left.name}",
        tofile=f"b/{right.name}",
        n=context_lines,
    )
    out = []
    for line in lines:
        # Keep the diff well-formed when a file has no trailing newline
        out.append(line if line.endswith("\n") else line + "\n")
    return "".join(out)


class TerminalPresenter:
    """Show snapshots and diffs on the terminal."""

    def __init__(self, console: Optional[Console] = None, *, context_lines: int = 3) -> None:
        self.console = console or Console()
        self.context_lines = context_lines

    def show_file(self, path: Path) -> None:
        self.console.rule(f"[bold]{escape(path.name)}[/bold]")
        code = "".join(_read_lines(path))
        lexer = Syntax.guess_lexer(str(path), code=code)
        self.console.print(Syntax(code, lexer, word_wrap=True))

    def show_diff(self, left: Path, right: Path, title: str, *, preview: bool = True) -> None:
        self.console.rule(f"[bold]{escape(title)}[/bold]")
        diff_text = unified_diff(left, right, self.context_lines)
        if not diff_text:
            self.console.print("[dim]No differences.[/dim]")
            return
        self.console.print(Syntax(diff_text, "diff", word_wrap=True))

    def show_warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow]  {escape(message)}")
