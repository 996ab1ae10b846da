"""FastAPI server exposing the game over a JSON REST API.

Provides:
- Catalog endpoints for habitats, categories and traits
- Session endpoints driving one game controller per player
- Health check
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from evoroulette import __version__
from evoroulette.api.catalog import router as catalog_router
from evoroulette.api.sessions import router as sessions_router
from evoroulette.generation.config import get_generation_config
from evoroulette.logging_config import configure_logging
from evoroulette.server.sessions import get_session_store

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager: configure logging and report config."""
    configure_logging()
    config = get_generation_config()
    try:
        config.validate_config()
    except ValueError as e:
        logger.warning("%s; generation will degrade until a key is supplied", e)
    logger.info("Evolution Roulette server started (provider=%s)", config.llm_provider)
    yield
    logger.info("Shutting down with %d active sessions", len(get_session_store()))


# Create FastAPI app
app = FastAPI(
    title="Evolution Roulette",
    description="Spin a habitat, pick adaptations and see whether your species survives",
    version=__version__,
    lifespan=lifespan,
)

# Include routers
app.include_router(catalog_router)
app.include_router(sessions_router)


# Health check endpoint
@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
