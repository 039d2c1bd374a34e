from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from builder_ide.api.dependencies import get_app_settings, shutdown_http_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    settings = get_app_settings()
    logger.info("Serving project %s (sources in %s/)", settings.project_root, settings.source_dir)
    yield
    await shutdown_http_client()
