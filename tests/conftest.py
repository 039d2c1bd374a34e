"""Shared fixtures and helpers for tests."""

from pathlib import Path

import pytest

from builder_ide.core.issues import IssueStore
from builder_ide.core.workspace import ProjectWorkspace

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """A small Next.js-style project with files the walker must skip."""
    root = tmp_path / "project"
    (root / "src" / "app").mkdir(parents=True)
    (root / "src" / "components").mkdir()
    (root / "src" / "app" / "page.tsx").write_text("export default function Page() { return null }\n")
    (root / "src" / "components" / "Button.tsx").write_text("export const Button = () => null;\n")
    (root / "src" / "index.ts").write_text("export const answer = 42;\n")
    (root / "node_modules" / "react").mkdir(parents=True)
    (root / "node_modules" / "react" / "index.js").write_text("module.exports = {};\n")
    (root / ".git").mkdir()
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    (root / "package.json").write_text('{"name": "project"}\n')
    return root


@pytest.fixture
def workspace(project_root: Path) -> ProjectWorkspace:
    return ProjectWorkspace(project_root)


@pytest.fixture
def issue_store(project_root: Path) -> IssueStore:
    return IssueStore.for_project(project_root)
