from __future__ import annotations

from fastapi import FastAPI

from builder_ide.api.errors import install_exception_handlers
from builder_ide.api.lifespan import lifespan
from builder_ide.api.routes.agent import router as agent_router
from builder_ide.api.routes.ai import router as ai_router
from builder_ide.api.routes.files import router as files_router
from builder_ide.api.routes.health import router as health_router
from builder_ide.api.routes.ide import router as ide_router
from builder_ide.api.routes.issues import router as issues_router
from builder_ide.api.routes.packages import router as packages_router
from builder_ide.api.routes.root import router as root_router

API_PREFIX = "/api"


def create_app() -> FastAPI:
    app = FastAPI(
        title="Builder IDE API",
        description="Sandboxed project files, packages, issues and AI actions for the builder IDE.",
        version="0.1.0",
        lifespan=lifespan,
    )

    install_exception_handlers(app)

    app.include_router(root_router, include_in_schema=False)
    app.include_router(health_router, include_in_schema=False)

    app.include_router(files_router, prefix=API_PREFIX)
    app.include_router(ide_router, prefix=API_PREFIX)
    app.include_router(packages_router, prefix=API_PREFIX)
    app.include_router(issues_router, prefix=API_PREFIX)
    app.include_router(agent_router, prefix=API_PREFIX)
    app.include_router(ai_router, prefix=API_PREFIX)

    return app
