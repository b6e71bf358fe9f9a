"""Carousel engine handle.

``CarouselEngine`` wires the state store, gesture tracker, loop indexer,
auto-advance scheduler and layout calculator together for one carousel. It is
the only object a renderer talks to: raw pointer and hover input goes in,
``RenderFrame`` snapshots come out.

All work happens synchronously on the calling event loop. The only deferred
work is the autoplay timer, the ``has_dragged`` reset and the one-frame
transition re-enable after a wrap; ``dispose()`` cancels all three, and any
callback that still fires afterwards is counted and ignored.

With the default asyncio timers the engine can be created outside an event
loop. Autoplay then waits until ``start()`` (or any input) runs inside a
loop; see ``ErrorCategory.TIMER_UNAVAILABLE``.

Example:
    engine = create(items, {"autoSlideInterval": 4000, "size": "1/3"})
    engine.set_viewport_width(1200)
    engine.on_pointer_down(500)
    engine.on_pointer_move(440)
    engine.on_pointer_up()           # offset -60 => next card
    frame = engine.get_render_frame()
    ...
    engine.dispose()
"""

import math
from collections.abc import Callable, Iterable, Mapping
from typing import Any
from uuid import uuid4

from carousel_engine.core.config import CarouselConfig, coerce_config
from carousel_engine.core.errors import ErrorCategory, TimerUnavailableError
from carousel_engine.core.gesture import GestureTracker
from carousel_engine.core.layout import LayoutConfig, calculate_layout
from carousel_engine.core.logging import get_logger
from carousel_engine.core.loop_indexer import (
    LoopIndexer,
    logical_for_slot,
    physical_slot,
)
from carousel_engine.core.scheduler import AutoAdvanceScheduler
from carousel_engine.core.state_store import StateStore, Transition
from carousel_engine.core.timers import AsyncioTimerBackend, TimerBackend, TimerHandle
from carousel_engine.core.types import (
    EMPTY_FRAME,
    CancelDragReset,
    CarouselItem,
    CarouselState,
    RenderFrame,
    ScheduleDragReset,
    SyncAutoAdvance,
)

logger = get_logger(__name__)

MIN_ITEMS = 3
PRELOAD_BUFFER = 1

FrameListener = Callable[[RenderFrame], None]


class CarouselEngine:
    """Interaction engine for a single carousel.

    Prefer :func:`create` over calling the constructor directly.
    """

    def __init__(
        self,
        items: Iterable[CarouselItem],
        config: CarouselConfig,
        timers: TimerBackend | None = None,
        carousel_id: str | None = None,
    ) -> None:
        self.id = carousel_id or uuid4().hex
        self._log = logger.bind(carousel_id=self.id)
        self._items: tuple[CarouselItem, ...] = tuple(items)
        self._config = config
        self._timers: TimerBackend = timers or AsyncioTimerBackend()

        self._store = StateStore(
            len(self._items),
            min_drag_distance=config.min_drag_distance,
            drag_flag_threshold=config.drag_flag_threshold,
            grace_period_ms=config.click_grace_period,
        )
        self._tracker = GestureTracker(self._store, self._apply)
        self._indexer = LoopIndexer(len(self._items))
        self._scheduler = AutoAdvanceScheduler(
            self._timers, config.auto_slide_interval, self._advance
        )

        self._live_viewport_width: float | None = None
        self._screen_width: float | None = None
        self._layout = self._compute_layout()

        self._drag_reset_handle: TimerHandle | None = None
        self._drag_reset_token = 0
        self._restore_handle: TimerHandle | None = None
        self._restore_token = 0
        self._transition_suppressed = False

        self._listeners: list[FrameListener] = []
        self._disposed = False
        self._ignored_callbacks = 0
        self.inactive_reason: ErrorCategory | None = None

        if len(self._items) < MIN_ITEMS:
            self._deactivate()
        else:
            self._scheduler.sync(self._store.state.should_auto_advance)
            self._log.info(
                "carousel_created",
                item_count=len(self._items),
                interval_ms=config.auto_slide_interval,
                size=config.size,
            )

    # Introspection

    @property
    def is_active(self) -> bool:
        return self.inactive_reason is None and not self._disposed

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def state(self) -> CarouselState:
        return self._store.state

    @property
    def items(self) -> tuple[CarouselItem, ...]:
        return self._items

    @property
    def config(self) -> CarouselConfig:
        return self._config

    @property
    def layout(self) -> LayoutConfig:
        return self._layout

    @property
    def is_auto_advancing(self) -> bool:
        return self._scheduler.is_running

    @property
    def is_auto_advance_pending(self) -> bool:
        """Autoplay is on but waits for an event loop."""
        return self._scheduler.is_pending

    @property
    def transition_suppressed(self) -> bool:
        return self._transition_suppressed

    @property
    def ignored_callbacks(self) -> int:
        """Deferred callbacks that fired after dispose and were dropped."""
        return self._ignored_callbacks

    def start(self) -> bool:
        """Arm autoplay that was requested before an event loop was running.

        Returns:
            True if autoplay is running afterwards.
        """
        if not self.is_active:
            return False
        return self._scheduler.resume()

    # Pointer input

    def on_pointer_down(self, x: float) -> None:
        if self._accepts_input("pointer_down"):
            self._tracker.start(x)

    def on_pointer_move(self, x: float) -> None:
        if self._accepts_input("pointer_move"):
            self._tracker.move(x)

    def on_pointer_up(self) -> None:
        if self._accepts_input("pointer_up"):
            self._tracker.end()

    def on_pointer_cancel(self) -> None:
        if self._accepts_input("pointer_cancel"):
            self._tracker.cancel()

    def on_pointer_leave_while_active(self) -> None:
        if self._accepts_input("pointer_leave"):
            self._tracker.leave()

    # Hover and playback

    def on_hover_enter(self) -> None:
        if self._accepts_input("hover_enter"):
            self._apply(self._store.set_hovered(True))

    def on_hover_leave(self) -> None:
        if self._accepts_input("hover_leave"):
            self._apply(self._store.set_hovered(False))

    def set_auto_play(self, enable: bool) -> None:
        if self._accepts_input("set_auto_play"):
            self._apply(self._store.set_auto_play(enable))

    # Navigation

    def go_to(self, index: int) -> None:
        if self._accepts_input("go_to"):
            self._apply(self._store.go_to_slide(index))

    def next(self) -> None:
        if self._accepts_input("next"):
            self._apply(self._store.next())

    def prev(self) -> None:
        if self._accepts_input("prev"):
            self._apply(self._store.prev())

    def _advance(self) -> None:
        # Looked up on every tick so reconfiguration is picked up
        self.next()

    # Clicks

    def resolve_click(self, slot: int) -> CarouselItem | None:
        """Report which item a click on physical ``slot`` targets.

        Returns None when the click should be ignored: during a drag, within
        the grace period after a drag, or for a slot outside the strip.
        """
        if not self.is_active:
            return None
        state = self._store.state
        if state.is_dragging or state.has_dragged:
            self._log.debug("click_suppressed", slot=slot, has_dragged=state.has_dragged)
            return None
        if not 0 <= slot < len(self._indexer.sequence(self._layout.visible_count)):
            return None
        item = self._items[logical_for_slot(slot, len(self._items))]
        self._log.info("card_clicked", slot=slot, item_id=item.id)
        return item

    # Layout and configuration

    def set_viewport_width(self, width: float, screen_width: float | None = None) -> bool:
        """Report the live container width.

        Returns:
            True if the resulting layout differs from the previous one.
        """
        if self._disposed:
            return False
        self._live_viewport_width = width
        self._screen_width = screen_width
        return self._refresh_layout()

    def configure(self, **changes: Any) -> None:
        """Apply config changes in place.

        Raises:
            ConfigurationError: If the merged config is invalid.
        """
        if self._disposed:
            return
        config = self._config.with_changes(**changes)
        if config == self._config:
            return
        self._config = config
        self._store.min_drag_distance = config.min_drag_distance
        self._store.drag_flag_threshold = config.drag_flag_threshold
        self._store.grace_period_ms = config.click_grace_period
        self._scheduler.set_interval(config.auto_slide_interval)
        self._log.info("carousel_reconfigured", changes=sorted(changes))
        if not self._refresh_layout():
            self._notify()

    def set_items(self, items: Iterable[CarouselItem]) -> None:
        """Replace the item collection."""
        if self._disposed:
            return
        self._items = tuple(items)
        count = len(self._items)
        was_active = self.inactive_reason is None
        transition = self._store.set_item_count(count)
        self._indexer.reset(count, transition.state.current_index)

        if count < MIN_ITEMS:
            if was_active:
                self._deactivate()
            self._notify()
            return

        self.inactive_reason = None
        self._apply(transition)
        if not was_active:
            self._scheduler.sync(self._store.state.should_auto_advance)
            self._log.info("carousel_activated", item_count=count)
        self._notify()

    # Frames

    def subscribe(self, listener: FrameListener) -> Callable[[], None]:
        """Call ``listener`` with a fresh frame after every change.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def get_render_frame(self) -> RenderFrame:
        if not self.is_active:
            return EMPTY_FRAME

        state = self._store.state
        layout = self._layout
        sequence = self._indexer.sequence(layout.visible_count)
        active_slot = physical_slot(state.current_index)

        offset = -active_slot * layout.stride + state.drag_offset
        if self._config.alignment == "center":
            offset += layout.viewport_width / 2 - layout.card_width / 2

        cards_in_viewport = (
            math.ceil(layout.viewport_width / layout.stride) if layout.stride > 0 else 0
        )

        return RenderFrame(
            transform_offset_px=offset,
            transition_enabled=not (state.is_dragging or self._transition_suppressed),
            card_width_px=layout.card_width,
            spacing_px=layout.spacing,
            current_logical_index=state.current_index,
            padded_sequence_indices=sequence,
            card_height_px=layout.card_height,
            visible_count=layout.visible_count,
            active_slot=active_slot,
            item_count=len(self._items),
            is_dragging=state.is_dragging,
            has_dragged=state.has_dragged,
            preload_slots=self._indexer.slots_to_preload(
                state.current_index,
                cards_in_viewport,
                layout.visible_count,
                buffer=PRELOAD_BUFFER,
            ),
        )

    def on_frame_committed(self) -> None:
        """Renderer finished painting a frame; restore animation after a wrap."""
        if self._disposed or not self._transition_suppressed:
            return
        self._cancel_restore()
        self._restore_transition()

    # Teardown

    def dispose(self) -> None:
        """Cancel all timers and detach listeners. Safe to call twice."""
        if self._disposed:
            return
        self._disposed = True
        self._scheduler.dispose()
        self._cancel_drag_reset()
        self._cancel_restore()
        self._tracker.reset()
        self._listeners.clear()
        self._log.info("carousel_disposed")

    # Internals

    def _accepts_input(self, event: str) -> bool:
        if self.is_active:
            self._scheduler.resume()
            return True
        self._log.debug(
            "input_ignored",
            input_event=event,
            disposed=self._disposed,
            reason=self.inactive_reason.name if self.inactive_reason else None,
        )
        return False

    def _apply(self, transition: Transition) -> None:
        if not (transition.changed or transition.effects):
            return

        for effect in transition.effects:
            if isinstance(effect, SyncAutoAdvance):
                self._scheduler.sync(effect.should_run)
            elif isinstance(effect, ScheduleDragReset):
                self._schedule_drag_reset(effect.delay_ms)
            elif isinstance(effect, CancelDragReset):
                self._cancel_drag_reset()

        change = transition.changed_index
        if change is not None:
            self._log.debug("slide_changed", previous=change.previous, current=change.current)

        if self._indexer.observe(transition.state):
            self._suppress_transition()

        self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return
        frame = self.get_render_frame()
        for listener in list(self._listeners):
            listener(frame)

    def _compute_layout(self) -> LayoutConfig:
        config = self._config
        viewport = (
            self._live_viewport_width
            if self._live_viewport_width is not None
            else config.viewport_width
        )
        layout = calculate_layout(
            size=config.size,
            spacing=config.spacing,
            viewport_width=viewport,
            card_width=config.card_width,
            card_height=config.card_height,
            screen_width=self._screen_width,
        )
        if not layout.size_valid:
            self._log.warning(
                "invalid_size_fraction",
                size=config.size,
                category=ErrorCategory.INVALID_SIZE_FRACTION.name,
                fallback_card_width=layout.card_width,
            )
        return layout

    def _refresh_layout(self) -> bool:
        layout = self._compute_layout()
        if layout == self._layout:
            return False
        self._layout = layout
        self._log.debug(
            "layout_changed",
            card_width=layout.card_width,
            visible_count=layout.visible_count,
            viewport_width=layout.viewport_width,
        )
        self._notify()
        return True

    def _deactivate(self) -> None:
        self.inactive_reason = ErrorCategory.INSUFFICIENT_ITEMS
        # Settle any drag so a later reactivation starts clean
        self._store.end_drag()
        self._store.clear_has_dragged()
        self._scheduler.stop()
        self._cancel_drag_reset()
        self._cancel_restore()
        self._tracker.reset()
        self._log.warning(
            "carousel_inactive",
            reason=self.inactive_reason.name,
            item_count=len(self._items),
            min_items=MIN_ITEMS,
        )

    def _defer(
        self, delay_ms: int, callback: Callable[[], None], kind: str
    ) -> TimerHandle | None:
        try:
            return self._timers.call_later(delay_ms, callback)
        except TimerUnavailableError:
            self._log.debug(
                "deferred_work_skipped",
                kind=kind,
                category=ErrorCategory.TIMER_UNAVAILABLE.name,
            )
            return None

    def _ignore_stale(self, kind: str) -> None:
        self._ignored_callbacks += 1
        self._log.debug(
            "stale_callback_ignored",
            kind=kind,
            category=ErrorCategory.STALE_CALLBACK.name,
        )

    # has_dragged grace period

    def _schedule_drag_reset(self, delay_ms: int) -> None:
        self._cancel_drag_reset()
        token = self._drag_reset_token
        # Without a loop has_dragged holds until the next pointer down
        self._drag_reset_handle = self._defer(
            delay_ms, lambda: self._on_drag_reset_due(token), "drag_reset"
        )

    def _cancel_drag_reset(self) -> None:
        self._drag_reset_token += 1
        if self._drag_reset_handle is not None:
            self._drag_reset_handle.cancel()
            self._drag_reset_handle = None

    def _on_drag_reset_due(self, token: int) -> None:
        if self._disposed or token != self._drag_reset_token:
            self._ignore_stale("drag_reset")
            return
        self._drag_reset_handle = None
        self._apply(self._store.clear_has_dragged())

    # One-frame transition suppression after a wrap

    def _suppress_transition(self) -> None:
        self._cancel_restore()
        self._transition_suppressed = True
        token = self._restore_token
        self._log.debug("wrap_transition", index=self._store.state.current_index)
        # Without a loop only on_frame_committed restores the transition
        self._restore_handle = self._defer(
            self._config.frame_delay,
            lambda: self._on_restore_due(token),
            "transition_restore",
        )

    def _cancel_restore(self) -> None:
        self._restore_token += 1
        if self._restore_handle is not None:
            self._restore_handle.cancel()
            self._restore_handle = None

    def _on_restore_due(self, token: int) -> None:
        if self._disposed or token != self._restore_token:
            self._ignore_stale("transition_restore")
            return
        self._restore_handle = None
        self._restore_transition()

    def _restore_transition(self) -> None:
        self._transition_suppressed = False
        self._notify()


def create(
    items: Iterable[CarouselItem],
    config: CarouselConfig | Mapping[str, Any] | None = None,
    timers: TimerBackend | None = None,
    carousel_id: str | None = None,
) -> CarouselEngine:
    """Create a carousel engine.

    Fewer than three items produce an inactive handle rather than an error;
    check ``is_active`` / ``inactive_reason``.

    Args:
        items: The cards to show.
        config: A CarouselConfig or a mapping of options (camelCase or
            snake_case).
        timers: Timer backend. Defaults to the running asyncio loop.
        carousel_id: Optional id used in logs.

    Raises:
        ConfigurationError: If ``config`` is a mapping that fails validation.
    """
    return CarouselEngine(items, coerce_config(config), timers=timers, carousel_id=carousel_id)
