"""The carousel session service as a FastAPI app.

The lifespan builds the session registry (sized by ``MAX_SESSIONS``) and the
health checker; shutdown disposes every engine so no timer outlives the app.
``api_main.py`` serves the module-level ``app`` with uvicorn.
"""

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carousel_engine import __version__
from carousel_engine.api.dependencies import AppState, get_app_state
from carousel_engine.api.routes import (
    carousels_router,
    health_router,
    websocket_router,
)
from carousel_engine.api.websocket import get_connection_manager
from carousel_engine.core.health import (
    HealthChecker,
    ServiceCheck,
    ServiceStatus,
    capacity_check,
    engine_check,
)
from carousel_engine.core.logging import get_logger

logger = get_logger(__name__)

APP_VERSION = os.getenv("APP_VERSION", __version__)
DEFAULT_MAX_SESSIONS = 1000


def _cors_origins_from_env() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", "*").strip()
    if raw == "*":
        return ["*"]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _create_health_checker(app_state: AppState) -> HealthChecker:
    """Register the session service checks."""
    checker = HealthChecker(version=APP_VERSION)

    def check_sessions() -> ServiceCheck:
        if not app_state.is_initialized:
            return ServiceCheck(
                name="sessions",
                status=ServiceStatus.UNHEALTHY,
                message="App state not initialized",
            )
        registry = app_state.registry
        check = capacity_check(len(registry), registry.max_sessions)
        check.details["active"] = registry.active_count()
        check.details["connections"] = get_connection_manager().get_connection_count()
        return check

    def check_engines() -> ServiceCheck:
        if not app_state.is_initialized:
            return engine_check([])
        return engine_check(app_state.registry.engines())

    checker.add_check("sessions", check_sessions)
    checker.add_check("engines", check_engines)

    return checker


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_state = get_app_state()
    max_sessions = int(os.getenv("MAX_SESSIONS", str(DEFAULT_MAX_SESSIONS)))
    await app_state.initialize(max_sessions=max_sessions)
    app.state.health_checker = _create_health_checker(app_state)
    logger.info("carousel_service_started", version=APP_VERSION, max_sessions=max_sessions)

    yield

    sessions = len(app_state.registry) if app_state.is_initialized else 0
    await app_state.shutdown()
    logger.info("carousel_service_stopped", disposed_sessions=sessions)


def create_app(
    title: str = "Carousel Engine API",
    description: str = "Hosts carousel interaction engines for remote renderers",
    cors_origins: list[str] | None = None,
) -> FastAPI:
    """Build the app with the carousel, WebSocket and health routers.

    ``cors_origins`` defaults to the comma-separated ``CORS_ORIGINS`` env var
    (``*`` when unset). Renderers are anonymous, so credentials are only
    allowed for an explicit origin list.
    """
    app = FastAPI(
        title=title,
        description=description,
        version=APP_VERSION,
        lifespan=lifespan,
    )

    if cors_origins is None:
        cors_origins = _cors_origins_from_env()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials="*" not in cors_origins,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["*"],
    )

    for router in (health_router, carousels_router, websocket_router):
        app.include_router(router)

    logger.debug("carousel_app_configured", cors_origins=cors_origins)

    return app


app = create_app()
