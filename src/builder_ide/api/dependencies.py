from __future__ import annotations

from collections.abc import AsyncIterator, Callable

import httpx
from fastapi import Depends

from builder_ide.config import Settings, get_settings
from builder_ide.core.issues import IssueCollector, IssueStore
from builder_ide.core.packages import PackageManager
from builder_ide.core.ports.generator import CodeGenerator
from builder_ide.core.workspace import ProjectWorkspace
from builder_ide.llm import create_generator

GeneratorFactory = Callable[[str, str | None], CodeGenerator]

_settings: Settings | None = None
_workspace: ProjectWorkspace | None = None
_http_client: httpx.AsyncClient | None = None


def configure(settings: Settings) -> None:
    """Pin the settings the app serves with (used by the CLI before starting uvicorn)."""
    global _settings, _workspace  # noqa: PLW0603
    _settings = settings
    _workspace = None


def get_app_settings() -> Settings:
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = get_settings()
    return _settings


async def get_workspace(settings: Settings = Depends(get_app_settings)) -> AsyncIterator[ProjectWorkspace]:
    """Yield the ``ProjectWorkspace``, creating it lazily on first call."""
    global _workspace  # noqa: PLW0603
    if _workspace is None:
        _workspace = ProjectWorkspace(settings.project_root, settings.source_dir)
    yield _workspace


def get_issue_store(workspace: ProjectWorkspace = Depends(get_workspace)) -> IssueStore:
    return IssueStore.for_project(workspace.root)


def get_issue_collector(
    workspace: ProjectWorkspace = Depends(get_workspace),
    settings: Settings = Depends(get_app_settings),
) -> IssueCollector:
    return IssueCollector(workspace.root, settings.analyzer_timeout)


def get_package_manager(
    workspace: ProjectWorkspace = Depends(get_workspace),
    settings: Settings = Depends(get_app_settings),
) -> PackageManager:
    return PackageManager(workspace.root, settings.package_timeout)


def get_http_client() -> httpx.AsyncClient:
    global _http_client  # noqa: PLW0603
    if _http_client is None:
        _http_client = httpx.AsyncClient(timeout=httpx.Timeout(60.0, connect=10.0))
    return _http_client


def get_generator_factory(client: httpx.AsyncClient = Depends(get_http_client)) -> GeneratorFactory:
    """Return ``(api_key, model) -> CodeGenerator``."""

    def factory(api_key: str, model: str | None) -> CodeGenerator:
        return create_generator(client, api_key, model)

    return factory


async def shutdown_http_client() -> None:
    global _http_client  # noqa: PLW0603
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
