"""FastAPI application -- NaC Copilot entrypoint."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

import copilot.deps as deps
from copilot.annotations.overlay import OverlayRegistry
from copilot.api.validate import router as validate_router
from copilot.config import load_settings
from copilot.llm.factory import create_backend
from copilot.orchestrator.engine import ValidationOrchestrator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: init resources on startup, clean up on shutdown."""
    log_level = logging.DEBUG if os.environ.get("COPILOT_DEV_MODE") else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    settings = load_settings()
    logger.info("NaC Copilot starting with options: %s", settings.redacted())

    deps._settings = settings
    deps._llm_backend = create_backend(settings)
    deps._orchestrator = ValidationOrchestrator.from_settings(settings, deps._llm_backend)
    deps._overlays = OverlayRegistry()

    yield

    # Shutdown
    if deps._llm_backend is not None:
        await deps._llm_backend.close()
    deps._settings = None
    deps._llm_backend = None
    deps._orchestrator = None
    deps._overlays = None


app = FastAPI(
    title="NaC Copilot",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(validate_router)
