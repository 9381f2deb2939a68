"""histdiff CLI — Typer application for viewing and comparing file history."""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, NamedTuple, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from histdiff import __version__

app = typer.Typer(
    name="histdiff",
    help="View and compare files as they were in your git history.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s — %(message)s",
        datefmt="%H:%M:%S",
    )


def _resolve_repo_root() -> Path:
    """Find the git repo root, exit 2 on failure."""
    from histdiff.git.adapter import get_repo_root
    from histdiff.git.errors import GitError

    try:
        return get_repo_root()
    except GitError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc


def _repo_path(repo_root: Path, path: str) -> str:
    """Turn a cwd-relative path into a repository-relative POSIX path."""
    absolute = Path(os.path.normpath(Path.cwd().resolve() / path))
    try:
        return absolute.relative_to(repo_root.resolve()).as_posix()
    except ValueError:
        return Path(path).as_posix()


def _load(repo_root: Path, config: Optional[str], viewer: Optional[str]):
    from histdiff.config.loader import ConfigError, load_config
    from histdiff.config.schema import VIEWER_MODES

    try:
        cfg = load_config(repo_root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc

    if viewer:
        if viewer not in VIEWER_MODES:
            console.print(f"[bold red]Invalid viewer:[/bold red] {escape(viewer)}")
            raise typer.Exit(code=2)
        cfg.viewer.mode = viewer  # type: ignore[assignment]
    return cfg


class _Session(NamedTuple):
    service: Any
    handler: Any
    repo_root: Path
    config: Any

    def path(self, path: str) -> str:
        return _repo_path(self.repo_root, path)

    def change(self, revision: str, path: str):
        """The change REVISION made to PATH."""
        return self.service.find_change(self.service.resolve_revision(revision), self.path(path))


@contextmanager
def _session(config: Optional[str], viewer: Optional[str]) -> Iterator[_Session]:
    """Open the repository; report git and viewer errors and exit 2."""
    from histdiff.git.errors import GitError
    from histdiff.git.service import GitHistoryService
    from histdiff.history.handler import FileHistoryCommandHandler
    from histdiff.output import ExternalToolPresenter, PresenterError, TerminalPresenter

    repo_root = _resolve_repo_root()
    cfg = _load(repo_root, config, viewer)

    out = Console()
    if cfg.viewer.mode == "external":
        presenter = ExternalToolPresenter(
            cfg.viewer.diff_command, out, context_lines=cfg.diff.context_lines
        )
    else:
        presenter = TerminalPresenter(out, context_lines=cfg.diff.context_lines)

    with GitHistoryService(
        repo_root,
        short_length=cfg.display.short_hash_length,
        timeout=cfg.git.timeout,
    ) as service:
        handler = FileHistoryCommandHandler(service, presenter, preview=cfg.diff.preview)
        try:
            yield _Session(service, handler, repo_root, cfg)
        except GitError as exc:
            console.print(f"[bold red]Git error:[/bold red] {escape(str(exc))}")
            raise typer.Exit(code=2) from exc
        except PresenterError as exc:
            console.print(f"[bold red]Viewer error:[/bold red] {escape(str(exc))}")
            raise typer.Exit(code=2) from exc


def _finish(plan) -> None:
    """Exit 1 when nothing could be shown, 0 otherwise."""
    if plan.is_blocked:
        raise typer.Exit(code=1)
    raise typer.Exit(code=0)


# ── view ──────────────────────────────────────────────────────────────────────


@app.command()
def view(
    revision: str = typer.Argument(..., help="Commit that changed the file"),
    path: str = typer.Argument(..., help="File path, relative to the current directory"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .histdiff.toml"),
    viewer: Optional[str] = typer.Option(None, "--viewer", help="Diff viewer: terminal | external"),
) -> None:
    """Show the file as it was in REVISION."""
    with _session(config, viewer) as s:
        plan = s.handler.view_file(s.change(revision, path))
    _finish(plan)


# ── compare-workspace ─────────────────────────────────────────────────────────


@app.command("compare-workspace")
def compare_workspace(
    revision: str = typer.Argument(..., help="Commit that changed the file"),
    path: str = typer.Argument(..., help="File path, relative to the current directory"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .histdiff.toml"),
    viewer: Optional[str] = typer.Option(None, "--viewer", help="Diff viewer: terminal | external"),
) -> None:
    """Compare the file in REVISION with the working copy."""
    with _session(config, viewer) as s:
        plan = s.handler.compare_file_with_workspace(s.change(revision, path))
    _finish(plan)


# ── compare-previous ──────────────────────────────────────────────────────────


@app.command("compare-previous")
def compare_previous(
    revision: str = typer.Argument(..., help="Commit that changed the file"),
    path: str = typer.Argument(..., help="File path, relative to the current directory"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .histdiff.toml"),
    viewer: Optional[str] = typer.Option(None, "--viewer", help="Diff viewer: terminal | external"),
) -> None:
    """Compare the file in REVISION with its previous version."""
    with _session(config, viewer) as s:
        plan = s.handler.compare_file_with_previous(s.change(revision, path))
    _finish(plan)


# ── view-previous ─────────────────────────────────────────────────────────────


@app.command("view-previous")
def view_previous(
    revision: str = typer.Argument(..., help="Commit that changed the file"),
    path: str = typer.Argument(..., help="File path, relative to the current directory"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .histdiff.toml"),
    viewer: Optional[str] = typer.Option(None, "--viewer", help="Diff viewer: terminal | external"),
) -> None:
    """Show the version of the file before REVISION changed it."""
    with _session(config, viewer) as s:
        plan = s.handler.view_previous_file(s.change(revision, path))
    _finish(plan)


# ── compare ───────────────────────────────────────────────────────────────────


@app.command()
def compare(
    left: str = typer.Argument(..., help="Left-hand commit"),
    right: str = typer.Argument(..., help="Right-hand commit"),
    path: str = typer.Argument(..., help="File path, relative to the current directory"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .histdiff.toml"),
    viewer: Optional[str] = typer.Option(None, "--viewer", help="Diff viewer: terminal | external"),
) -> None:
    """Compare the file between two commits."""
    with _session(config, viewer) as s:
        left_rev = s.service.resolve_revision(left)
        right_rev = s.service.resolve_revision(right)
        entry = s.service.find_range_change(left_rev, right_rev, s.path(path))
        plan = s.handler.compare_file_across_commits(entry, right_rev)
    _finish(plan)


# ── history ───────────────────────────────────────────────────────────────────


@app.command()
def history(
    path: str = typer.Argument(..., help="File path, relative to the current directory"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Maximum number of commits"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .histdiff.toml"),
) -> None:
    """List the commits that changed a file, following renames."""
    with _session(config, None) as s:
        entries = s.service.file_history(s.path(path), limit or s.config.history.limit)

    if not entries:
        console.print(f"[dim]No history for {escape(path)}.[/dim]")
        raise typer.Exit(code=1)

    out = Console()
    table = Table(title=f"History of {escape(path)}", title_style="bold", border_style="dim")
    table.add_column("Commit", style="yellow", no_wrap=True)
    table.add_column("Date", style="green", no_wrap=True)
    table.add_column("Status", style="cyan", no_wrap=True)
    table.add_column("Path", style="magenta")
    table.add_column("Subject")

    for item in entries:
        change = item.change
        shown = (
            f"{change.file.old_path} → {change.file.path}"
            if change.file.old_path
            else change.file.path
        )
        table.add_row(
            change.revision.short,
            item.date,
            change.status.value,
            escape(shown),
            escape(item.subject),
        )
    out.print(table)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .histdiff.toml in the repo root."""
    from histdiff.config.defaults import DEFAULT_TOML
    from histdiff.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root()
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"histdiff {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """histdiff — view and compare files as they were in your git history."""
    _setup_logging(verbose)
