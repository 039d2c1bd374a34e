from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse

from builder_ide.api.dependencies import (
    GeneratorFactory,
    get_app_settings,
    get_generator_factory,
    get_issue_store,
    get_workspace,
)
from builder_ide.api.errors import error_body
from builder_ide.api.schemas import AgentRequest
from builder_ide.config import Settings
from builder_ide.core.errors import MissingFieldError, WorkspaceError
from builder_ide.core.intents import IntentExecutor, run_agent_command
from builder_ide.core.issues import IssueStore
from builder_ide.core.workspace import ProjectWorkspace
from builder_ide.llm import provider_for_model

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/agent", tags=["agent"])


def _api_key_for(model: str | None, explicit: str | None, settings: Settings) -> str | None:
    if explicit:
        return explicit
    if provider_for_model(model) == "gemini":
        return settings.gemini_api_key
    return settings.openai_api_key


@router.post("/execute", response_model=None)
async def execute(
    body: AgentRequest,
    workspace: ProjectWorkspace = Depends(get_workspace),
    store: IssueStore = Depends(get_issue_store),
    factory: GeneratorFactory = Depends(get_generator_factory),
    settings: Settings = Depends(get_app_settings),
    x_ai_key: str | None = Header(None),
    x_ai_model: str | None = Header(None),
) -> dict[str, Any] | JSONResponse:
    """Let the model turn a natural-language command into one workspace action and run it."""
    try:
        if not body.command or not body.command.strip():
            raise MissingFieldError("command")
        model = body.model or x_ai_model
        api_key = _api_key_for(model, body.api_key or x_ai_key, settings)
        if not api_key:
            raise MissingFieldError("API key")

        generator = factory(api_key, model)
        result = await run_agent_command(generator, IntentExecutor(workspace, store), body.command)
    except WorkspaceError as exc:
        logger.info("Agent command failed: %s", exc.message)
        return JSONResponse({**error_body(exc), "action": "ERROR"}, status_code=exc.status_code)
    return result.to_response()
