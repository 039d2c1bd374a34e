from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

NodeKind = Literal["file", "folder"]
IssueKind = Literal["linter", "compiler", "ai"]
Severity = Literal["error", "warning", "info"]
AnalysisKind = Literal["bug", "warning", "suggestion"]


class FileNode(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    path: str
    kind: NodeKind = Field(alias="type")
    children: list["FileNode"] | None = None


FileNode.model_rebuild()  # necessary for recursive types


class Issue(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    kind: IssueKind = Field(alias="type")
    severity: Severity
    file: str
    line: int = Field(default=0, ge=0)
    column: int | None = None
    message: str
    suggestion: str | None = None


class AnalysisIssue(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: AnalysisKind = Field(alias="type")
    line: int = 0
    message: str
    suggestion: str

    def to_issue(self, file: str, index: int) -> Issue:
        return Issue(
            id=f"ai-{file}-{self.line}-{index}",
            kind="ai",
            severity=_ANALYSIS_SEVERITY[self.kind],
            file=file,
            line=max(self.line, 0),
            message=self.message,
            suggestion=self.suggestion,
        )


_ANALYSIS_SEVERITY: dict[str, Severity] = {
    "bug": "error",
    "warning": "warning",
    "suggestion": "info",
}


class FileSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    language: str
    line_count: int = Field(alias="lineCount")
    summary: str
    exports: list[str]


class ArchiveEntry(BaseModel):
    name: str
    content: bytes
