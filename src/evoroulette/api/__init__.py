"""REST API routers for Evolution Roulette."""

from evoroulette.api.catalog import router as catalog_router
from evoroulette.api.sessions import router as sessions_router

__all__ = ["catalog_router", "sessions_router"]
