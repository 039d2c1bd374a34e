from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from builder_ide.core.errors import InvalidRequestError, MissingFieldError, UpstreamError
from builder_ide.core.process import run_command

logger = logging.getLogger(__name__)

PackageAction = Literal["install", "uninstall"]

# npm package spec: optional @scope/, a name, and an optional @version/range/tag.
_PACKAGE_SPEC = re.compile(r"^(@[a-z0-9][a-z0-9._~-]*/)?[a-z0-9][a-z0-9._~-]*(@[a-zA-Z0-9._~^<>=*|+ -]+)?$")


class PackageResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    package: str
    action: PackageAction
    stdout: str
    stderr: str
    dependencies: dict[str, Any] = Field(default_factory=dict)
    dev_dependencies: dict[str, Any] = Field(default_factory=dict, alias="devDependencies")


def validate_package(package: str | None, action: str | None = "install") -> tuple[str, PackageAction]:
    if action not in ("install", "uninstall"):
        raise InvalidRequestError("action must be install or uninstall")
    if not package or not isinstance(package, str) or not package.strip():
        raise MissingFieldError("package")
    package = package.strip()
    if not _PACKAGE_SPEC.match(package) or package.startswith("-"):
        raise InvalidRequestError(f"Invalid package name: {package}")
    return package, action  # type: ignore[return-value]


def read_manifest_dependencies(root: Path) -> tuple[dict[str, Any], dict[str, Any]]:
    try:
        manifest = json.loads((root / "package.json").read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}, {}
    except json.JSONDecodeError as exc:
        raise UpstreamError(f"package.json is not valid JSON: {exc}") from None
    if not isinstance(manifest, dict):
        return {}, {}
    return manifest.get("dependencies") or {}, manifest.get("devDependencies") or {}


class PackageManager:
    """Installs or removes npm packages in the project root."""

    def __init__(self, root: str | Path, timeout: float = 120.0, executable: str = "npm") -> None:
        self._root = Path(root)
        self._timeout = timeout
        self._executable = executable

    async def run(self, package: str | None, action: str | None = "install") -> PackageResult:
        name, verb = validate_package(package, action)
        logger.info("Running %s %s %s in %s", self._executable, verb, name, self._root)
        try:
            result = await run_command([self._executable, verb, name], self._root, self._timeout)
        except FileNotFoundError:
            raise UpstreamError(f"{self._executable} is not available on this host") from None

        if result.returncode != 0:
            logger.warning("%s %s %s exited with %d", self._executable, verb, name, result.returncode)
            raise UpstreamError(
                f"{self._executable} {verb} {name} failed with exit code {result.returncode}",
                result.stderr,
            )

        dependencies, dev_dependencies = read_manifest_dependencies(self._root)
        return PackageResult(
            package=name,
            action=verb,
            stdout=result.stdout,
            stderr=result.stderr,
            dependencies=dependencies,
            dev_dependencies=dev_dependencies,
        )
