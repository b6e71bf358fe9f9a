"""HTTP API package for remote carousel renderers.

This module provides a FastAPI-based HTTP and WebSocket API that hosts
carousel engines and streams their render frames to clients.
"""

from carousel_engine.api.app import create_app
from carousel_engine.api.dependencies import get_app_state, get_session_registry

__all__ = [
    "create_app",
    "get_app_state",
    "get_session_registry",
]
