from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from builder_ide.api.dependencies import get_app_settings, get_workspace
from builder_ide.api.schemas import (
    ContentResponse,
    CreatedResponse,
    CreateFileRequest,
    DeletedResponse,
    DeleteFileRequest,
    EditedResponse,
    EditFileRequest,
    ExplainResponse,
    PlanRequest,
    PlanResponse,
    PreviewResponse,
    TreeResponse,
)
from builder_ide.config import Settings
from builder_ide.core.archive import export_project, safe_archive_name
from builder_ide.core.errors import InvalidRequestError
from builder_ide.core.plan import build_plan
from builder_ide.core.workspace import ProjectWorkspace, require_path

router = APIRouter(prefix="/ide", tags=["ide"])


@router.get("/files", response_model=TreeResponse, response_model_exclude_none=True)
async def tree(workspace: ProjectWorkspace = Depends(get_workspace)) -> TreeResponse:
    """Folder tree of the project root, folders first."""
    return TreeResponse(tree=await asyncio.to_thread(workspace.tree))


@router.get("/file", response_model=ContentResponse)
async def read_file(
    path: str | None = Query(None),
    workspace: ProjectWorkspace = Depends(get_workspace),
) -> ContentResponse:
    return ContentResponse(content=await asyncio.to_thread(workspace.read_file, path))


@router.post("/fs/create", response_model=CreatedResponse)
async def create_file(
    body: CreateFileRequest,
    workspace: ProjectWorkspace = Depends(get_workspace),
) -> CreatedResponse:
    """Create a file; without content it gets a scaffold picked by extension."""
    await asyncio.to_thread(workspace.create_file, body.path, body.content)
    return CreatedResponse(created=body.path)


@router.post("/fs/edit", response_model=EditedResponse)
async def edit_file(
    body: EditFileRequest,
    workspace: ProjectWorkspace = Depends(get_workspace),
) -> EditedResponse:
    """Overwrite an existing file, or replace the first occurrence of ``find``."""
    if body.find is not None and body.replace is not None:
        changed = await asyncio.to_thread(workspace.replace_in_file, body.path, body.find, body.replace)
        return EditedResponse(edited=body.path, changed=changed)
    await asyncio.to_thread(workspace.write_file, body.path, body.content or "", must_exist=True)
    return EditedResponse(edited=body.path)


@router.post("/fs/delete", response_model=DeletedResponse)
async def delete_file(
    body: DeleteFileRequest,
    workspace: ProjectWorkspace = Depends(get_workspace),
) -> DeletedResponse:
    await asyncio.to_thread(workspace.delete_file, body.path)
    return DeletedResponse(deleted=body.path)


@router.get("/fs/explain", response_model=ExplainResponse)
async def explain_file(
    path: str | None = Query(None),
    workspace: ProjectWorkspace = Depends(get_workspace),
) -> ExplainResponse:
    rel_path = require_path(path)
    summary = await asyncio.to_thread(workspace.explain_file, rel_path)
    return ExplainResponse(
        path=rel_path,
        language=summary.language,
        line_count=summary.line_count,
        summary=summary.summary,
        exports=summary.exports,
    )


@router.get("/download")
async def download(
    name: str = Query("project"),
    workspace: ProjectWorkspace = Depends(get_workspace),
) -> StreamingResponse:
    """Stream the source tree as ``<name>.zip``."""
    project_name = safe_archive_name(name)
    return StreamingResponse(
        export_project(workspace.source_root, project_name, workspace.ignore),
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{project_name}.zip"'},
    )


@router.post("/plan", response_model=PlanResponse)
async def plan(body: PlanRequest) -> PlanResponse:
    if not body.idea or not body.idea.strip():
        raise InvalidRequestError("Invalid idea")
    return PlanResponse(plan=build_plan(body.idea))


@router.post("/preview", response_model=PreviewResponse)
async def preview(settings: Settings = Depends(get_app_settings)) -> PreviewResponse:
    return PreviewResponse(url=settings.preview_url)
