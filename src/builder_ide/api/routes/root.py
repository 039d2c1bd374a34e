from __future__ import annotations

from typing import Any

from fastapi import APIRouter

router = APIRouter()


@router.get("/")
async def root() -> dict[str, Any]:
    """Root discovery endpoint: API directory for programmatic and human clients."""
    return {
        "meta": {
            "title": "Builder IDE API",
            "description": "Sandboxed project files, packages, issues and AI actions for the builder IDE.",
            "version": "0.1.0",
        },
        "links": {
            "self": "/",
            "tree": "/api/ide/files",
            "files": "/api/files",
            "download": "/api/ide/download",
            "issues": "/api/issues",
            "packages": "/api/packages/install",
            "agent": "/api/agent/execute",
            "openapi": "/openapi.json",
            "docs": "/docs",
        },
    }
