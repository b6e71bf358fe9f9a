"""API routes package.

This module contains all route handlers for the HTTP API.
"""

from carousel_engine.api.routes.carousels import router as carousels_router
from carousel_engine.api.routes.health import router as health_router
from carousel_engine.api.routes.websocket import router as websocket_router

__all__ = [
    "carousels_router",
    "health_router",
    "websocket_router",
]
