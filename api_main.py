"""Entry point for the carousel API server.

Usage:
    # Development (with auto-reload):
    API_RELOAD=true python api_main.py

    # Or directly with uvicorn:
    uvicorn carousel_engine.api.app:app --reload --host 0.0.0.0 --port 8000

Sessions live in process memory, so run a single worker.
"""

import os

import uvicorn

from carousel_engine.core.logging import configure_logging

# Configure structured logging before importing app
configure_logging()

if __name__ == "__main__":
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    reload = os.getenv("API_RELOAD", "false").lower() == "true"

    uvicorn.run(
        "carousel_engine.api.app:app",
        host=host,
        port=port,
        reload=reload,
    )
