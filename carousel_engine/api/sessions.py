"""Carousel sessions hosted by the API.

Each session owns one ``CarouselEngine``. Frames produced by an engine
(including autoplay ticks) are handed to a publisher callback so connected
WebSocket clients receive them without polling.
"""

from collections import OrderedDict
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from carousel_engine.api.schemas import InputEvent, InputEventType
from carousel_engine.core.engine import CarouselEngine, create
from carousel_engine.core.errors import SessionNotFoundError
from carousel_engine.core.logging import get_logger
from carousel_engine.core.timers import TimerBackend
from carousel_engine.core.types import CarouselItem, RenderFrame

logger = get_logger(__name__)

FramePublisher = Callable[[str, RenderFrame], None]
EvictionHook = Callable[[str], None]


@dataclass
class CarouselSession:
    """A live carousel and its bookkeeping."""

    id: str
    engine: CarouselEngine
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    unsubscribe: Callable[[], None] | None = None


class SessionRegistry:
    """Creates, looks up and disposes carousel sessions.

    When ``max_sessions`` is reached the oldest session is closed to make
    room for the new one, and ``on_evict`` is told its id so clients still
    watching it can be disconnected.
    """

    def __init__(
        self,
        max_sessions: int = 1000,
        timers: TimerBackend | None = None,
        publisher: FramePublisher | None = None,
        on_evict: EvictionHook | None = None,
    ) -> None:
        self._sessions: OrderedDict[str, CarouselSession] = OrderedDict()
        self._max_sessions = max(1, max_sessions)
        self._timers = timers
        self._publisher = publisher
        self._on_evict = on_evict

    @property
    def max_sessions(self) -> int:
        return self._max_sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def create(
        self,
        items: Iterable[CarouselItem],
        config: Mapping[str, Any] | None = None,
    ) -> CarouselSession:
        """Create a session.

        Raises:
            ConfigurationError: If ``config`` is invalid.
        """
        session_id = uuid4().hex
        engine = create(items, config, timers=self._timers, carousel_id=session_id)
        session = CarouselSession(id=session_id, engine=engine)

        if self._publisher is not None:
            publisher = self._publisher
            session.unsubscribe = engine.subscribe(
                lambda frame: publisher(session_id, frame)
            )

        while len(self._sessions) >= self._max_sessions:
            oldest = next(iter(self._sessions))
            logger.warning("session_evicted", session_id=oldest)
            self.close(oldest)
            if self._on_evict is not None:
                self._on_evict(oldest)

        self._sessions[session_id] = session
        logger.info(
            "session_created",
            session_id=session_id,
            active=engine.is_active,
            total_sessions=len(self._sessions),
        )
        return session

    def get(self, session_id: str) -> CarouselSession:
        """Look up a session.

        Raises:
            SessionNotFoundError: If the id is unknown.
        """
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def close(self, session_id: str) -> None:
        """Dispose a session's engine and forget it.

        Raises:
            SessionNotFoundError: If the id is unknown.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFoundError(session_id)
        if session.unsubscribe is not None:
            session.unsubscribe()
        session.engine.dispose()
        logger.info("session_closed", session_id=session_id)

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.close(session_id)

    def active_count(self) -> int:
        return sum(1 for s in self._sessions.values() if s.engine.is_active)

    def engines(self) -> list[CarouselEngine]:
        return [s.engine for s in self._sessions.values()]


def apply_input(engine: CarouselEngine, event: InputEvent) -> None:
    """Dispatch one client input event to the engine.

    Required payload fields are enforced by ``InputEvent`` validation.
    """
    kind = event.type
    if kind == InputEventType.POINTER_DOWN:
        engine.on_pointer_down(event.x)
    elif kind == InputEventType.POINTER_MOVE:
        engine.on_pointer_move(event.x)
    elif kind == InputEventType.POINTER_UP:
        engine.on_pointer_up()
    elif kind == InputEventType.POINTER_CANCEL:
        engine.on_pointer_cancel()
    elif kind == InputEventType.POINTER_LEAVE:
        engine.on_pointer_leave_while_active()
    elif kind == InputEventType.HOVER_ENTER:
        engine.on_hover_enter()
    elif kind == InputEventType.HOVER_LEAVE:
        engine.on_hover_leave()
    elif kind == InputEventType.GO_TO:
        engine.go_to(event.index)
    elif kind == InputEventType.NEXT:
        engine.next()
    elif kind == InputEventType.PREV:
        engine.prev()
    elif kind == InputEventType.SET_AUTO_PLAY:
        engine.set_auto_play(event.enable)
    elif kind == InputEventType.RESIZE:
        engine.set_viewport_width(event.width, event.screen_width)
    elif kind == InputEventType.FRAME_COMMITTED:
        engine.on_frame_committed()
