from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.tree import Tree

from builder_ide.cli.serve import RootOption
from builder_ide.config import get_settings
from builder_ide.core.archive import export_project, safe_archive_name
from builder_ide.core.errors import WorkspaceError
from builder_ide.core.workspace import ProjectWorkspace
from builder_ide.models import FileNode

console = Console()


def _get_workspace(root: Path | None) -> ProjectWorkspace:
    settings = get_settings(root)
    try:
        return ProjectWorkspace(settings.project_root, settings.source_dir)
    except WorkspaceError as exc:
        console.print(f"[red]{exc.message}[/red]")
        raise typer.Exit(code=1) from exc


def _add_nodes(branch: Tree, nodes: list[FileNode]) -> None:
    for node in nodes:
        if node.kind == "folder":
            _add_nodes(branch.add(f"[bold blue]{node.name}/[/bold blue]"), node.children or [])
        else:
            branch.add(node.name)


def tree(root: RootOption = None) -> None:
    """Show the project tree (ignored and hidden entries excluded)."""
    workspace = _get_workspace(root)
    view = Tree(f"[bold]{workspace.root.name or workspace.root}[/bold]")
    _add_nodes(view, workspace.tree())
    console.print(view)


def files(root: RootOption = None) -> None:
    """List files under the source directory."""
    workspace = _get_workspace(root)
    paths = workspace.list_source_files()
    for path in paths:
        console.print(path, highlight=False)
    console.print(f"({len(paths)} files)")


def export(
    name: Annotated[str, typer.Argument(help="Project name used for the archive and its top-level folder.")],
    root: RootOption = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Zip file to write.")] = None,
) -> None:
    """Write the project's source tree to a zip archive."""
    workspace = _get_workspace(root)
    archive_name = safe_archive_name(name)
    target = output or Path(f"{archive_name}.zip")
    with target.open("wb") as fh:
        for chunk in export_project(workspace.source_root, archive_name, workspace.ignore):
            fh.write(chunk)
    console.print(f"[green]Wrote {target}[/green]")
