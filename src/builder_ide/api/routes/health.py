from fastapi import APIRouter, Depends, Response, status

from builder_ide.api.dependencies import get_workspace
from builder_ide.api.schemas import HealthResponse
from builder_ide.core.workspace import ProjectWorkspace

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse()


@router.get("/healthz/live", response_model=HealthResponse)
async def liveness() -> HealthResponse:
    """Liveness probe: is the process alive?"""
    return HealthResponse()


@router.get("/healthz/ready", response_model=HealthResponse)
async def readiness(
    response: Response,
    workspace: ProjectWorkspace = Depends(get_workspace),
) -> HealthResponse:
    """Readiness probe: is the project root a directory?"""
    if workspace.root.is_dir():
        return HealthResponse()
    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(status="degraded")
