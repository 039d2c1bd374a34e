import asyncio
from collections.abc import Sequence
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from builder_ide.cli.serve import RootOption
from builder_ide.config import get_settings
from builder_ide.core.issues import IssueCollector, IssueStore, merge_issues
from builder_ide.core.ports.watcher import FileWatcherPort
from builder_ide.models import Issue

issues_app = typer.Typer(help="Inspect linter, compiler and AI issues.")
console = Console()

_SEVERITY_STYLE = {"error": "red", "warning": "yellow", "info": "cyan"}


def _render_issues(issues: Sequence[Issue]) -> None:
    table = Table(show_lines=False)
    for h in ("type", "severity", "file", "line", "message"):
        table.add_column(h)
    for issue in issues:
        style = _SEVERITY_STYLE.get(issue.severity, "")
        table.add_row(issue.kind, f"[{style}]{issue.severity}[/{style}]", issue.file, str(issue.line), issue.message)
    console.print(table)
    console.print(f"({len(issues)} issues)")


async def _collect(root: Path, timeout: float) -> list[Issue]:
    found = await IssueCollector(root, timeout).collect()
    return merge_issues(found, IssueStore.for_project(root).load())


@issues_app.command("list")
def list_issues(root: RootOption = None) -> None:
    """Run the linter and type-checker and show them with stored AI issues."""
    settings = get_settings(root)
    _render_issues(asyncio.run(_collect(settings.project_root, settings.analyzer_timeout)))


@issues_app.command("clear")
def clear(root: RootOption = None) -> None:
    """Remove stored AI issues."""
    store = IssueStore.for_project(get_settings(root).project_root)
    store.clear()
    console.print(f"[green]Cleared {store.path}[/green]")


@issues_app.command("watch")
def watch(root: RootOption = None) -> None:
    """Re-run analyzers whenever a source file changes."""
    from builder_ide.watcher.watchfiles_adapter import WatchfilesWatcher

    settings = get_settings(root)
    source = settings.project_root / settings.source_dir

    async def _on_change(paths: set[Path]) -> None:
        _render_issues(await _collect(settings.project_root, settings.analyzer_timeout))

    async def _run() -> None:
        watcher: FileWatcherPort = WatchfilesWatcher(source, _on_change)
        await watcher.start()
        try:
            await watcher.wait()
        finally:
            await watcher.stop()

    console.print(f"[green]Watching {source} (Ctrl+C to stop)[/green]")
    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        console.print("Stopped.")
