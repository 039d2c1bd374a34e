"""Issue aggregation across the linter, the type-checker and AI analysis.

Linter and compiler issues are recomputed on every request; only the AI
subset is persisted, in ``<root>/.ide/ai-issues.json``.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from builder_ide.core.errors import CommandTimeoutError
from builder_ide.core.files import atomic_write_text, path_lock
from builder_ide.core.process import run_command
from builder_ide.models import Issue

logger = logging.getLogger(__name__)

AI_ISSUES_FILE = Path(".ide") / "ai-issues.json"

_ISSUE_LIST = TypeAdapter(list[Issue])

_LINE_START_BRACKET = re.compile(r"^\s*\[", re.MULTILINE)
_TSC_ERROR = re.compile(r"(.+?)\((\d+),(\d+)\):\s+(error|warning)\s+TS\d+:\s+(.+)")


def merge_issues(existing: Iterable[Issue], incoming: Iterable[Issue]) -> list[Issue]:
    """Concatenate and drop later issues whose id was already seen."""
    seen: set[str] = set()
    merged: list[Issue] = []
    for issue in [*existing, *incoming]:
        if issue.id in seen:
            continue
        seen.add(issue.id)
        merged.append(issue)
    return merged


def dump_issues(issues: Sequence[Issue]) -> list[dict[str, Any]]:
    return [issue.model_dump(by_alias=True, exclude_none=True) for issue in issues]


class IssueStore:
    """JSON-file store for AI-reported issues; writers are serialized."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @classmethod
    def for_project(cls, root: str | Path) -> IssueStore:
        return cls(Path(root) / AI_ISSUES_FILE)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[Issue]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        try:
            return _ISSUE_LIST.validate_json(raw)
        except ValidationError as exc:
            logger.warning("Ignoring unreadable AI issues file %s: %s", self._path, exc.errors()[:1])
            return []

    def add(self, issues: Iterable[Issue]) -> list[Issue]:
        with path_lock(self._path):
            merged = merge_issues(self.load(), issues)
            self._write(merged)
        return merged

    def clear(self) -> None:
        with path_lock(self._path):
            self._write([])

    def _write(self, issues: Sequence[Issue]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        atomic_write_text(self._path, json.dumps(dump_issues(issues), indent=2))


# ---------------------------------------------------------------------------
# Analyzer output parsing
# ---------------------------------------------------------------------------


def _relative_file(file_path: str, root: str | Path) -> str:
    return file_path.replace(str(root), "", 1).lstrip("/\\")


def _first_json_array(output: str) -> list[Any] | None:
    """Find the JSON report in output that may be wrapped by npm's own banner lines."""
    decoder = json.JSONDecoder()
    for match in _LINE_START_BRACKET.finditer(output):
        try:
            value, _ = decoder.raw_decode(output, match.end() - 1)
        except json.JSONDecodeError:
            continue
        if isinstance(value, list):
            return value
    return None


def parse_eslint_output(output: str, root: str | Path) -> list[Issue]:
    """Parse ``eslint --format json`` output; anything unparseable yields no issues."""
    results = _first_json_array(output)
    if results is None:
        logger.debug("ESLint output holds no JSON report")
        return []

    issues: list[Issue] = []
    for file_result in results:
        if not isinstance(file_result, dict):
            continue
        file_path = str(file_result.get("filePath", ""))
        messages = file_result.get("messages")
        if not isinstance(messages, list):
            continue
        for idx, msg in enumerate(messages):
            if not isinstance(msg, dict):
                continue
            line = msg.get("line") or 0
            suggestions = msg.get("suggestions") or []
            suggestion = suggestions[0].get("desc") if suggestions and isinstance(suggestions[0], dict) else None
            issues.append(
                Issue(
                    id=f"lint-{file_path}-{line}-{idx}",
                    kind="linter",
                    severity="error" if msg.get("severity") == 2 else "warning",
                    file=_relative_file(file_path, root),
                    line=max(int(line), 0),
                    column=msg.get("column"),
                    message=str(msg.get("message", "")),
                    suggestion=suggestion,
                )
            )
    return issues


def parse_tsc_output(output: str, root: str | Path) -> list[Issue]:
    """Parse ``file.ts(line,col): error TS1234: message`` lines."""
    issues: list[Issue] = []
    for idx, match in enumerate(_TSC_ERROR.finditer(output)):
        file_path, line, column, severity, message = match.groups()
        issues.append(
            Issue(
                id=f"compiler-{file_path}-{line}-{idx}",
                kind="compiler",
                severity="error" if severity == "error" else "warning",
                file=_relative_file(file_path, root),
                line=int(line),
                column=int(column),
                message=message.strip(),
            )
        )
    return issues


# ---------------------------------------------------------------------------
# Collector
# ---------------------------------------------------------------------------


class IssueCollector:
    """Runs the project's linter and type-checker and parses their findings."""

    LINT_COMMAND: tuple[str, ...] = ("npm", "run", "lint", "--", "--format", "json")
    TSC_COMMAND: tuple[str, ...] = ("npx", "tsc", "--noEmit")

    def __init__(self, root: str | Path, timeout: float = 30.0) -> None:
        self._root = Path(root)
        self._timeout = timeout

    async def _output_of(self, args: Sequence[str]) -> str:
        try:
            result = await run_command(args, self._root, self._timeout)
        except (CommandTimeoutError, OSError) as exc:
            logger.warning("Analyzer %s unavailable: %s", args[0], exc)
            return ""
        return f"{result.stdout}\n{result.stderr}"

    async def lint(self) -> list[Issue]:
        return parse_eslint_output(await self._output_of(self.LINT_COMMAND), self._root)

    async def typecheck(self) -> list[Issue]:
        return parse_tsc_output(await self._output_of(self.TSC_COMMAND), self._root)

    async def collect(self) -> list[Issue]:
        lint_issues, compiler_issues = await asyncio.gather(self.lint(), self.typecheck())
        return merge_issues(lint_issues, compiler_issues)
