"""Structured agent intents and their execution against a workspace."""

from __future__ import annotations

import asyncio
import json
import logging
import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from builder_ide.core.analysis import analyze_source
from builder_ide.core.errors import MissingFieldError
from builder_ide.core.issues import IssueStore
from builder_ide.core.packages import validate_package
from builder_ide.core.ports.generator import CodeGenerator
from builder_ide.core.workspace import ProjectWorkspace
from builder_ide.models import AnalysisIssue

logger = logging.getLogger(__name__)


class IntentAction(str, Enum):
    CREATE_FILE = "CREATE_FILE"
    EDIT_FILE = "EDIT_FILE"
    DELETE_FILE = "DELETE_FILE"
    ANALYZE_CODE = "ANALYZE_CODE"
    INSTALL_PACKAGE = "INSTALL_PACKAGE"
    UNINSTALL_PACKAGE = "UNINSTALL_PACKAGE"
    LIST_FILES = "LIST_FILES"
    EXPLAIN = "EXPLAIN"


AGENT_SYSTEM_PROMPT = """You are a coding assistant integrated into an IDE. You can execute the following operations:

1. CREATE_FILE: Create a new file with content
2. EDIT_FILE: Modify existing file content (send the whole new "content", or "find" and "replace" for one change)
3. DELETE_FILE: Delete a file
4. ANALYZE_CODE: Analyze code for issues
5. INSTALL_PACKAGE: Install an npm package
6. UNINSTALL_PACKAGE: Uninstall an npm package
7. LIST_FILES: List all project files

When the user asks you to perform an action, respond with a JSON object containing:
{
  "action": "CREATE_FILE" | "EDIT_FILE" | "DELETE_FILE" | "ANALYZE_CODE" | "INSTALL_PACKAGE" | "UNINSTALL_PACKAGE" | "LIST_FILES" | "EXPLAIN",
  "path": "relative/path/to/file" (for file operations),
  "content": "file content" (for CREATE_FILE or EDIT_FILE),
  "package": "package-name" (for package operations),
  "message": "explanation for the user"
}

Examples:
- "Create a Button component" -> {"action": "CREATE_FILE", "path": "components/Button.tsx", "content": "...", "message": "Created Button component"}
- "Install axios" -> {"action": "INSTALL_PACKAGE", "package": "axios", "message": "Installing axios..."}
- "Analyze src/app/page.tsx" -> {"action": "ANALYZE_CODE", "path": "app/page.tsx", "message": "Analyzing code..."}

Be concise and always provide helpful explanations."""  # noqa: E501

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{[\s\S]*\})\s*```")
_BARE_JSON = re.compile(r"(\{[\s\S]*\})")


class AgentIntent(BaseModel):
    """An action requested by the model. ``action`` stays a string so unknown verbs survive parsing."""

    model_config = ConfigDict(extra="ignore")

    action: str = IntentAction.EXPLAIN.value
    path: str | None = None
    content: str | None = None
    find: str | None = None
    replace: str | None = None
    package: str | None = None
    message: str | None = None


class IntentResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    action: str
    message: str | None = None
    created: str | None = None
    edited: str | None = None
    deleted: str | None = None
    analyzed: str | None = None
    issues: list[AnalysisIssue] | None = None
    package: str | None = None
    needs_execution: bool | None = Field(default=None, alias="needsExecution")
    files: list[str] | None = None
    full_response: str | None = Field(default=None, alias="fullResponse")

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def parse_intent(text: str) -> AgentIntent | None:
    """Pull a JSON intent out of a model reply; None when there is none."""
    match = _FENCED_JSON.search(text) or _BARE_JSON.search(text)
    candidate = match.group(1) if match else text
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    try:
        return AgentIntent.model_validate(data)
    except ValidationError:
        logger.debug("Model reply JSON does not describe an intent")
        return None


class IntentExecutor:
    """Dispatches intents to the workspace, the analyzer and the issue store.

    Package intents are only validated and flagged with ``needsExecution``; the
    install itself is a separate, explicit request.
    """

    def __init__(self, workspace: ProjectWorkspace, issue_store: IssueStore | None = None) -> None:
        self._workspace = workspace
        self._issue_store = issue_store

    def execute(self, intent: AgentIntent) -> IntentResult:
        try:
            action = IntentAction(intent.action)
        except ValueError:
            logger.info("Unknown intent action %r, answering as explanation", intent.action)
            action = IntentAction.EXPLAIN

        if action is IntentAction.CREATE_FILE:
            path = self._require_path(intent, action)
            self._workspace.create_file(path, intent.content or "")
            return IntentResult(action=action.value, message=intent.message, created=path)

        if action is IntentAction.EDIT_FILE:
            path = self._require_path(intent, action)
            if intent.find is not None and intent.replace is not None:
                self._workspace.replace_in_file(path, intent.find, intent.replace)
            else:
                self._workspace.write_file(path, intent.content or "")
            return IntentResult(action=action.value, message=intent.message, edited=path)

        if action is IntentAction.DELETE_FILE:
            path = self._require_path(intent, action)
            self._workspace.delete_file(path)
            return IntentResult(action=action.value, message=intent.message, deleted=path)

        if action is IntentAction.ANALYZE_CODE:
            path = self._require_path(intent, action)
            issues = analyze_source(path, self._workspace.read_source_file(path))
            if self._issue_store is not None and issues:
                self._issue_store.add(issue.to_issue(path, idx) for idx, issue in enumerate(issues))
            return IntentResult(action=action.value, message=intent.message, analyzed=path, issues=issues)

        if action in (IntentAction.INSTALL_PACKAGE, IntentAction.UNINSTALL_PACKAGE):
            if not intent.package:
                raise MissingFieldError("package", action.value)
            verb = "install" if action is IntentAction.INSTALL_PACKAGE else "uninstall"
            package, _ = validate_package(intent.package, verb)
            return IntentResult(action=action.value, message=intent.message, package=package, needs_execution=True)

        if action is IntentAction.LIST_FILES:
            return IntentResult(action=action.value, message=intent.message, files=self._workspace.list_source_files())

        return IntentResult(action=IntentAction.EXPLAIN.value, message=intent.message)

    @staticmethod
    def _require_path(intent: AgentIntent, action: IntentAction) -> str:
        if not intent.path:
            raise MissingFieldError("path", action.value)
        return intent.path


async def run_agent_command(generator: CodeGenerator, executor: IntentExecutor, command: str) -> IntentResult:
    """Ask the model what to do with *command* and carry it out.

    A reply without a usable JSON intent comes back as an ``EXPLAIN`` result
    holding the raw text.
    """
    reply = await generator.complete(command, system=AGENT_SYSTEM_PROMPT, temperature=0.3, max_tokens=2000)
    intent = parse_intent(reply)
    if intent is None:
        return IntentResult(action=IntentAction.EXPLAIN.value, message=reply, full_response=reply)
    result = await asyncio.to_thread(executor.execute, intent)
    result.full_response = reply
    return result
