"""FastMCP server exposing builder-ide workspace tools."""

from __future__ import annotations

from typing import Any

from fastmcp import FastMCP

from builder_ide.core.analysis import analyze_source
from builder_ide.core.errors import InvalidRequestError, WorkspaceError
from builder_ide.core.issues import IssueStore
from builder_ide.core.workspace import ProjectWorkspace


def create_mcp_server(workspace: ProjectWorkspace) -> FastMCP:
    """Create a FastMCP server bound to the given project workspace."""

    mcp = FastMCP("builder-ide", instructions="Browse, edit and analyze files of a sandboxed web project.")
    issue_store = IssueStore.for_project(workspace.root)

    @mcp.tool()
    def list_files() -> list[str]:
        """List files under the project's source directory."""
        return workspace.list_source_files()

    @mcp.tool()
    def read_file(path: str) -> str:
        """Read a file relative to the project root."""
        try:
            return workspace.read_file(path)
        except WorkspaceError as exc:
            return f"Error: {exc.message}"

    @mcp.tool()
    def create_file(path: str, content: str | None = None) -> str:
        """Create (or overwrite) a source file; without content a default scaffold is written."""
        try:
            workspace.create_file(path, content)
        except WorkspaceError as exc:
            return f"Error: {exc.message}"
        return f"Created {path}"

    @mcp.tool()
    def edit_file(
        path: str,
        content: str | None = None,
        find: str | None = None,
        replace: str | None = None,
    ) -> str:
        """Overwrite a source file, or replace the first occurrence of *find* with *replace*."""
        try:
            if content is not None and find is None and replace is None:
                workspace.write_file(path, content)
                return f"Edited {path}"
            if content is None and find is not None and replace is not None:
                changed = workspace.replace_in_file(path, find, replace)
                return f"Edited {path}" if changed else f"No change: text not found in {path}"
            raise InvalidRequestError("provide either content or find+replace")
        except WorkspaceError as exc:
            return f"Error: {exc.message}"

    @mcp.tool()
    def delete_file(path: str) -> str:
        """Delete a source file."""
        try:
            workspace.delete_file(path)
        except WorkspaceError as exc:
            return f"Error: {exc.message}"
        return f"Deleted {path}"

    @mcp.tool()
    def explain_file(path: str) -> dict[str, Any] | str:
        """Summarize a source file: language, line count and exports."""
        try:
            summary = workspace.explain_file(path)
        except WorkspaceError as exc:
            return f"Error: {exc.message}"
        return {"path": path, **summary.model_dump(by_alias=True)}

    @mcp.tool()
    def analyze_file(path: str) -> list[dict[str, Any]] | str:
        """Run the static analyzer on a source file and store its findings as AI issues."""
        try:
            found = analyze_source(path, workspace.read_source_file(path))
        except WorkspaceError as exc:
            return f"Error: {exc.message}"
        if found:
            issue_store.add(issue.to_issue(path, idx) for idx, issue in enumerate(found))
        return [issue.model_dump(by_alias=True, exclude_none=True) for issue in found]

    return mcp
