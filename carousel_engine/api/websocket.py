"""Frame fan-out to WebSocket renderers.

A carousel session can be watched by several renderers (a kiosk screen and a
preview pane, say). Engine listeners run synchronously, so they call
``publish_frame``/``schedule_close``, which queue the actual sends as tasks on
the running loop. The route in ``routes/websocket.py`` owns the receive side.

Outbound messages are JSON envelopes::

    {"type": "frame", "payload": {"session_id": "...", "frame": {...}},
     "timestamp": "2026-01-01T00:00:00+00:00"}
"""

import asyncio
import json
from collections.abc import Coroutine
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fastapi import WebSocket

from carousel_engine.core.logging import get_logger
from carousel_engine.core.types import RenderFrame

logger = get_logger(__name__)

# Normal closure after the session is deleted or evicted
CLOSE_NORMAL = 1000


class MessageTypes:
    """Envelope ``type`` values."""

    # Server to client
    FRAME = "frame"
    CLICK = "click"
    SESSION_CLOSED = "session_closed"
    PONG = "pong"
    ERROR = "error"

    # Client to server
    EVENT = "event"
    PING = "ping"


@dataclass
class WebSocketMessage:
    """One outbound envelope."""

    type: str
    payload: dict[str, Any]
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_json(self) -> str:
        return json.dumps(
            {"type": self.type, "payload": self.payload, "timestamp": self.timestamp.isoformat()}
        )


class ConnectionManager:
    """Renderers connected to each carousel session.

    All sends go through ``send_to_session``; a socket that fails a send is
    dropped from its session.
    """

    def __init__(self) -> None:
        self._watchers: dict[str, list[WebSocket]] = {}
        self._lock = asyncio.Lock()
        self._pending: set[asyncio.Task[Any]] = set()

    async def connect(self, websocket: WebSocket, session_id: str) -> None:
        await websocket.accept()
        async with self._lock:
            watchers = self._watchers.setdefault(session_id, [])
            watchers.append(websocket)
            count = len(watchers)
        logger.info("renderer_connected", session_id=session_id, renderers=count)

    async def disconnect(self, websocket: WebSocket, session_id: str) -> None:
        async with self._lock:
            watchers = self._watchers.get(session_id, [])
            if websocket in watchers:
                watchers.remove(websocket)
            if not watchers:
                self._watchers.pop(session_id, None)
            count = len(watchers)
        logger.info("renderer_disconnected", session_id=session_id, renderers=count)

    async def send_to_session(self, session_id: str, message: WebSocketMessage) -> int:
        """Send ``message`` to every renderer of a session.

        Returns:
            How many renderers received it.
        """
        text = message.to_json()
        async with self._lock:
            watchers = list(self._watchers.get(session_id, []))

        delivered = 0
        for websocket in watchers:
            try:
                await websocket.send_text(text)
            except Exception as ex:
                logger.warning(
                    "renderer_send_failed",
                    session_id=session_id,
                    message_type=message.type,
                    error=str(ex),
                )
                await self.disconnect(websocket, session_id)
            else:
                delivered += 1
        return delivered

    def publish_frame(self, session_id: str, frame: RenderFrame) -> None:
        """Queue a frame push; a no-op when nobody watches the session."""
        if self._watchers.get(session_id):
            self._spawn(self.send_to_session(session_id, create_frame_event(session_id, frame)))

    def schedule_close(self, session_id: str) -> None:
        """Queue ``close_session`` from synchronous code, e.g. an eviction."""
        if self._watchers.get(session_id):
            self._spawn(self.close_session(session_id))

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def close_session(self, session_id: str) -> None:
        """Send ``session_closed`` to each renderer and close its socket."""
        async with self._lock:
            watchers = self._watchers.pop(session_id, [])
        if not watchers:
            return

        notice = WebSocketMessage(
            type=MessageTypes.SESSION_CLOSED, payload={"session_id": session_id}
        ).to_json()
        for websocket in watchers:
            try:
                await websocket.send_text(notice)
                await websocket.close(code=CLOSE_NORMAL)
            except Exception as ex:
                logger.debug("renderer_close_failed", session_id=session_id, error=str(ex))
        logger.info("renderers_released", session_id=session_id, renderers=len(watchers))

    def get_connection_count(self, session_id: str | None = None) -> int:
        """Renderers on one session, or on all sessions when None."""
        if session_id is None:
            return sum(map(len, self._watchers.values()))
        return len(self._watchers.get(session_id, []))

    def get_active_sessions(self) -> list[str]:
        return list(self._watchers)


manager = ConnectionManager()


def get_connection_manager() -> ConnectionManager:
    return manager


def create_frame_event(session_id: str, frame: RenderFrame) -> WebSocketMessage:
    return WebSocketMessage(
        type=MessageTypes.FRAME,
        payload={"session_id": session_id, "frame": frame.to_dict()},
    )


def create_click_event(session_id: str, item: dict[str, Any] | None) -> WebSocketMessage:
    """Click result; ``item`` is None when the click was suppressed by a drag."""
    return WebSocketMessage(
        type=MessageTypes.CLICK,
        payload={"session_id": session_id, "item": item},
    )


def create_error_event(error: str, code: str | None = None) -> WebSocketMessage:
    return WebSocketMessage(type=MessageTypes.ERROR, payload={"error": error, "code": code})
