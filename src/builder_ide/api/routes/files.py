import asyncio

from fastapi import APIRouter, Depends, Query

from builder_ide.api.dependencies import get_workspace
from builder_ide.api.schemas import CreateFileRequest, FilesResponse, PathResponse, UpdateFileRequest
from builder_ide.core.workspace import ProjectWorkspace, require_path

router = APIRouter(prefix="/files", tags=["files"])


@router.get("", response_model=FilesResponse)
async def list_files(workspace: ProjectWorkspace = Depends(get_workspace)) -> FilesResponse:
    """Flat list of source files, ``/``-separated and relative to ``src``."""
    return FilesResponse(files=await asyncio.to_thread(workspace.list_source_files))


@router.post("", response_model=PathResponse)
async def create_file(
    body: CreateFileRequest,
    workspace: ProjectWorkspace = Depends(get_workspace),
) -> PathResponse:
    await asyncio.to_thread(workspace.create_file, body.path, body.content if body.content is not None else "")
    return PathResponse(path=body.path)


@router.put("", response_model=PathResponse)
async def update_file(
    body: UpdateFileRequest,
    workspace: ProjectWorkspace = Depends(get_workspace),
) -> PathResponse:
    """Write the content verbatim, creating the file if needed."""
    await asyncio.to_thread(workspace.write_file, body.path, body.content)
    return PathResponse(path=body.path)


@router.delete("", response_model=PathResponse)
async def delete_file(
    path: str | None = Query(None),
    workspace: ProjectWorkspace = Depends(get_workspace),
) -> PathResponse:
    rel_path = require_path(path)
    await asyncio.to_thread(workspace.delete_file, rel_path)
    return PathResponse(path=rel_path)
