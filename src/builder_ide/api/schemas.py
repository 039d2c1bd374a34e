from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, model_validator

from builder_ide.models import FileNode, Issue

# --- File mutation requests ---


class CreateFileRequest(BaseModel):
    path: StrictStr
    content: StrictStr | None = None


class UpdateFileRequest(BaseModel):
    """PUT /files: the content must be a string."""

    path: StrictStr
    content: StrictStr


class EditFileRequest(BaseModel):
    """Either full ``content`` or a ``find``/``replace`` pair, never both."""

    path: StrictStr
    content: StrictStr | None = None
    find: StrictStr | None = None
    replace: StrictStr | None = None

    @model_validator(mode="after")
    def _one_mode(self) -> EditFileRequest:
        has_content = self.content is not None
        has_pair = self.find is not None and self.replace is not None
        if has_content == has_pair:
            raise ValueError("provide either content or find+replace")
        return self


class DeleteFileRequest(BaseModel):
    path: StrictStr


# --- Responses ---


class TreeResponse(BaseModel):
    tree: list[FileNode]


class FilesResponse(BaseModel):
    files: list[str]


class ContentResponse(BaseModel):
    content: str


class PathResponse(BaseModel):
    ok: bool = True
    path: str


class CreatedResponse(BaseModel):
    ok: bool = True
    created: str


class EditedResponse(BaseModel):
    ok: bool = True
    edited: str
    changed: bool = True


class DeletedResponse(BaseModel):
    ok: bool = True
    deleted: str


class ExplainResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    path: str
    language: str
    line_count: int = Field(alias="lineCount")
    summary: str
    exports: list[str]


class HealthResponse(BaseModel):
    status: str = "ok"


# --- Packages ---


class PackageRequest(BaseModel):
    package: str | None = None
    action: str | None = "install"


# --- Issues ---


class IssuesRequest(BaseModel):
    issues: list[Issue]


class IssuesResponse(BaseModel):
    issues: list[Issue]
    count: int


class IssuesSavedResponse(BaseModel):
    ok: bool = True
    count: int


class OkResponse(BaseModel):
    ok: bool = True


# --- Agent / AI ---


class AgentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    command: str | None = None
    api_key: str | None = Field(default=None, alias="apiKey")
    model: str | None = None


class VerifyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    api_key: str | None = Field(default=None, alias="apiKey")
    model: str | None = None


class VerifyResponse(BaseModel):
    ok: bool
    error: str | None = None
    details: dict[str, Any] | None = None


class GenerateProjectRequest(BaseModel):
    description: str | None = None


class PlanRequest(BaseModel):
    idea: str | None = None


class PlanResponse(BaseModel):
    plan: list[str]


class PreviewResponse(BaseModel):
    ok: bool = True
    url: str
