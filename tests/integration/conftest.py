"""Fixtures for end-to-end tests against the fully wired API."""

import json
from collections.abc import Generator
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from builder_ide.api.app import create_app
from builder_ide.api.dependencies import configure, get_http_client, get_issue_collector
from builder_ide.config import get_settings
from builder_ide.core.issues import IssueCollector


class ScriptedOpenAI:
    """Replays canned chat completions, one per request."""

    def __init__(self) -> None:
        self.replies: list[str] = []
        self.requests: list[dict[str, object]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        content = self.replies.pop(0)
        return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


class _OfflineCollector(IssueCollector):
    async def _output_of(self, args: object) -> str:
        return ""


@pytest.fixture
def llm() -> ScriptedOpenAI:
    return ScriptedOpenAI()


@pytest.fixture
def api(
    project_root: Path,
    llm: ScriptedOpenAI,
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[TestClient, None, None]:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-integration")
    configure(get_settings(project_root))

    client = httpx.AsyncClient(transport=httpx.MockTransport(llm))

    def collector() -> IssueCollector:
        return _OfflineCollector(project_root)

    app = create_app()
    app.dependency_overrides[get_http_client] = lambda: client
    app.dependency_overrides[get_issue_collector] = collector
    with TestClient(app) as test_client:
        yield test_client
