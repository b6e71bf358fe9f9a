"""FastAPI dependency injection for shared API state.

Example:
    from fastapi import Depends
    from carousel_engine.api.dependencies import get_session_registry
    from carousel_engine.api.sessions import SessionRegistry

    @router.get("/carousels/{session_id}/frame")
    async def frame(
        session_id: str,
        registry: SessionRegistry = Depends(get_session_registry),
    ):
        return registry.get(session_id).engine.get_render_frame().to_dict()
"""

from typing import AsyncGenerator

from carousel_engine.api.sessions import SessionRegistry
from carousel_engine.api.websocket import ConnectionManager, get_connection_manager
from carousel_engine.core.logging import get_logger
from carousel_engine.core.timers import TimerBackend

logger = get_logger(__name__)


class AppState:
    """Application state container for shared resources."""

    def __init__(self) -> None:
        self._registry: SessionRegistry | None = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        """Check if the app state has been initialized."""
        return self._initialized

    async def initialize(
        self,
        max_sessions: int = 1000,
        timers: TimerBackend | None = None,
        manager: ConnectionManager | None = None,
    ) -> None:
        """Create the session registry.

        Args:
            max_sessions: Sessions kept before the oldest is evicted.
            timers: Timer backend for new engines; defaults to asyncio.
            manager: WebSocket manager frames are published through.
        """
        if self._initialized:
            logger.warning("app_state_already_initialized")
            return

        manager = manager or get_connection_manager()
        self._registry = SessionRegistry(
            max_sessions=max_sessions,
            timers=timers,
            publisher=manager.publish_frame,
            on_evict=manager.schedule_close,
        )
        logger.info("session_registry_initialized", max_sessions=max_sessions)

        self._initialized = True
        logger.info("app_state_initialized")

    async def shutdown(self) -> None:
        """Dispose every live session."""
        if self._registry is not None:
            self._registry.close_all()
            logger.info("sessions_closed")
        self._registry = None
        self._initialized = False
        logger.info("app_state_shutdown")

    @property
    def registry(self) -> SessionRegistry:
        """Get the session registry."""
        if self._registry is None:
            raise RuntimeError("App state not initialized")
        return self._registry


# Global app state instance
_app_state = AppState()


def get_app_state() -> AppState:
    """Get the global app state instance."""
    return _app_state


async def get_session_registry() -> AsyncGenerator[SessionRegistry, None]:
    """FastAPI dependency for the session registry."""
    yield _app_state.registry
