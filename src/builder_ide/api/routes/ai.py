from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse

from builder_ide.api.dependencies import GeneratorFactory, get_app_settings, get_generator_factory, get_http_client
from builder_ide.api.schemas import GenerateProjectRequest, VerifyRequest, VerifyResponse
from builder_ide.config import Settings
from builder_ide.core.archive import stream_entries
from builder_ide.core.errors import InvalidRequestError, MissingFieldError, UpstreamError, WorkspaceError
from builder_ide.core.generation import generate_project
from builder_ide.llm import DEFAULT_GEMINI_MODEL, GeminiGenerator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ai"])


@router.post("/ai/verify", response_model=VerifyResponse, response_model_exclude_none=True)
async def verify(
    body: VerifyRequest,
    client: httpx.AsyncClient = Depends(get_http_client),
) -> VerifyResponse | JSONResponse:
    """Check a Gemini key. Upstream rejections are soft failures: 200 with ``ok: false``."""
    if not body.api_key or not body.model:
        return JSONResponse({"ok": False, "error": "Missing apiKey or model"}, status_code=400)
    generator = GeminiGenerator(client, body.api_key, body.model)
    try:
        details = await generator.verify()
    except InvalidRequestError as exc:
        return JSONResponse({"ok": False, "error": exc.message}, status_code=400)
    except UpstreamError as exc:
        logger.info("Gemini key verification failed: %s", exc.message)
        return VerifyResponse(ok=False, error=exc.message)
    return VerifyResponse(ok=True, details=details)


@router.post("/generate-project")
async def generate(
    body: GenerateProjectRequest,
    factory: GeneratorFactory = Depends(get_generator_factory),
    settings: Settings = Depends(get_app_settings),
) -> StreamingResponse:
    """Generate a project from a description with Gemini and stream it as a zip."""
    if not body.description or not body.description.strip():
        raise MissingFieldError("Description")
    if not settings.gemini_api_key:
        raise WorkspaceError("GEMINI_API_KEY is not configured")

    project = await generate_project(factory(settings.gemini_api_key, DEFAULT_GEMINI_MODEL), body.description)
    entries = project.archive_entries()
    return StreamingResponse(
        stream_entries(entries),
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{project.archive_name}.zip"'},
    )
