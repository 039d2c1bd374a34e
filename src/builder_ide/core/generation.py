"""Whole-project generation: ask the model for a file set, archive it."""

from __future__ import annotations

import json
import logging
import re

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from builder_ide.core.archive import safe_archive_name
from builder_ide.core.errors import InvalidPathError, UpstreamError
from builder_ide.core.paths import normalize_relative
from builder_ide.core.ports.generator import CodeGenerator
from builder_ide.models import ArchiveEntry

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"^```(?:json)?\s*\n?|\n?```\s*$")

PROJECT_PROMPT = """You are an expert full-stack software engineer. Generate a complete project structure with actual working code based on the user's description.

The project should include:
1. Frontend: React + TypeScript with modern hooks and components
2. Backend: Node.js + Express.js with RESTful API endpoints
3. Package.json files for both frontend and backend
4. README.md with setup instructions

Return ONLY a valid JSON object with this structure:
{
  "projectName": "kebab-case-name",
  "files": [
    {
      "path": "frontend/src/App.tsx",
      "content": "actual file content here"
    }
  ]
}

Generate complete, working code that can be run immediately after npm install. Include all necessary imports, proper TypeScript types, error handling, and modern best practices.

User Request: {description}"""  # noqa: E501


class GeneratedFile(BaseModel):
    path: str
    content: str = ""


class GeneratedProject(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project_name: str = Field(default="generated-project", alias="projectName")
    files: list[GeneratedFile]

    def archive_entries(self) -> list[ArchiveEntry]:
        """Archive entries with every path normalized; unsafe paths raise ``InvalidPathError``."""
        entries: list[ArchiveEntry] = []
        for file in self.files:
            name = normalize_relative(file.path)
            if name == ".":
                raise InvalidPathError(f"Invalid path: {file.path}")
            entries.append(ArchiveEntry(name=name, content=file.content.encode("utf-8")))
        return entries

    @property
    def archive_name(self) -> str:
        return safe_archive_name(self.project_name, default="generated-project")


def parse_generated_project(text: str) -> GeneratedProject:
    stripped = _FENCE.sub("", text.strip())
    try:
        return GeneratedProject.model_validate(json.loads(stripped))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise UpstreamError("Model did not return a valid project description", text) from exc


async def generate_project(generator: CodeGenerator, description: str) -> GeneratedProject:
    reply = await generator.complete(PROJECT_PROMPT.replace("{description}", description), max_tokens=8192)
    project = parse_generated_project(reply)
    logger.info("Generated project %s with %d file(s)", project.project_name, len(project.files))
    return project
