"""Tests for shared models, errors and settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from builder_ide.config import get_settings
from builder_ide.core.errors import (
    CommandTimeoutError,
    MissingFieldError,
    NotFoundError,
    UpstreamError,
    WorkspaceError,
)
from builder_ide.models import FileNode, Issue


class TestIssue:
    def test_accepts_wire_names(self) -> None:
        issue = Issue.model_validate(
            {"id": "lint-a-1-0", "type": "linter", "severity": "error", "file": "a.ts", "line": 1, "message": "x"}
        )
        assert issue.kind == "linter"
        assert issue.model_dump(by_alias=True, exclude_none=True)["type"] == "linter"

    def test_negative_line_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Issue(id="a", kind="ai", severity="info", file="a.ts", line=-1, message="x")

    def test_unknown_severity_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Issue.model_validate({"id": "a", "type": "ai", "severity": "fatal", "file": "a.ts", "message": "x"})


def test_file_node_nests() -> None:
    child = {"name": "a.ts", "path": "src/a.ts", "type": "file"}
    node = FileNode.model_validate({"name": "src", "path": "src", "type": "folder", "children": [child]})
    assert node.children is not None
    assert node.children[0].kind == "file"


class TestErrors:
    @pytest.mark.parametrize(
        ("error", "status"),
        [
            (WorkspaceError("x"), 500),
            (NotFoundError("x"), 404),
            (MissingFieldError("path"), 400),
            (UpstreamError("x"), 502),
            (CommandTimeoutError("x"), 504),
        ],
    )
    def test_status_codes(self, error: WorkspaceError, status: int) -> None:
        assert error.status_code == status

    def test_missing_field_message(self) -> None:
        assert MissingFieldError("path", "EDIT_FILE").message == "path required for EDIT_FILE"

    def test_upstream_body_is_truncated(self) -> None:
        assert len(UpstreamError("x", "y" * 2000).body or "") == 500


class TestSettings:
    def test_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("BUILDER_IDE_SOURCE_DIR", "OPENAI_API_KEY", "GEMINI_API_KEY", "BUILDER_IDE_PACKAGE_TIMEOUT"):
            monkeypatch.delenv(name, raising=False)
        settings = get_settings(tmp_path)
        assert settings.project_root == tmp_path.resolve()
        assert settings.source_dir == "src"
        assert settings.openai_api_key is None
        assert settings.package_timeout == 120.0

    def test_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BUILDER_IDE_ROOT", str(tmp_path))
        monkeypatch.setenv("GEMINI_API_KEY", "g")
        monkeypatch.setenv("BUILDER_IDE_ANALYZER_TIMEOUT", "5")
        settings = get_settings()
        assert settings.project_root == tmp_path.resolve()
        assert settings.gemini_api_key == "g"
        assert settings.analyzer_timeout == 5.0

    def test_bad_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BUILDER_IDE_PACKAGE_TIMEOUT", "soon")
        with pytest.raises(ValueError):
            get_settings()
