"""External diff tool presenter.

Diffs are handed to a command template such as
``code --wait --diff $LOCAL $REMOTE``; single files and warnings still go to
the terminal.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from histdiff.output.terminal import PresenterError, TerminalPresenter

logger = logging.getLogger("histdiff.output.external")


def build_command(template: str, left: Path, right: Path, title: str) -> List[str]:
    """Split *template* and substitute ``$LOCAL``, ``$REMOTE`` and ``$TITLE``."""
    try:
        args = shlex.split(template)
    except ValueError as exc:
        raise PresenterError(f"Invalid diff command {template!r}: {exc}") from exc
    if not args:
        raise PresenterError("Diff command is empty")
    substitutions = {"$LOCAL": str(left), "$REMOTE": str(right), "$TITLE": title}
    out = []
    for arg in args:
        for placeholder, value in substitutions.items():
            arg = arg.replace(placeholder, value)
        out.append(arg)
    return out


class ExternalToolPresenter(TerminalPresenter):
    """Terminal presenter that opens diffs in an external tool."""

    def __init__(
        self,
        command: str,
        console: Optional[Console] = None,
        *,
        context_lines: int = 3,
    ) -> None:
        super().__init__(console, context_lines=context_lines)
        self.command = command

    def show_diff(self, left: Path, right: Path, title: str, *, preview: bool = True) -> None:
        args = build_command(self.command, left, right, title)
        logger.debug("launching diff tool: %s", " ".join(args))
        self.console.print(f"[dim]Opening {escape(title)} in {escape(args[0])}[/dim]")
        try:
            subprocess.run(args, check=True)
        except FileNotFoundError as exc:
            raise PresenterError(f"Diff tool not found: {args[0]}") from exc
        except subprocess.CalledProcessError as exc:
            raise PresenterError(f"Diff tool exited with status {exc.returncode}") from exc
