"""Carousel state transitions - platform agnostic.

``StateStore`` owns the single ``CarouselState`` of one carousel. Each
operation replaces the snapshot and returns a ``Transition`` holding the new
state plus the effects the host has to execute (restart autoplay, schedule
the ``has_dragged`` reset, handle an index change). The store itself never
touches a timer.

Drag sign convention: the offset is ``pointer_x - drag_start_x``. Dragging the
content to the left gives a negative offset and reveals the next card, so a
committed negative offset navigates forward and a positive one backward.
"""

from dataclasses import dataclass, replace

from carousel_engine.core.config import (
    DEFAULT_CLICK_GRACE_PERIOD_MS,
    DEFAULT_DRAG_FLAG_THRESHOLD,
    DEFAULT_MIN_DRAG_DISTANCE,
)
from carousel_engine.core.types import (
    CancelDragReset,
    CarouselState,
    Effect,
    IndexChanged,
    ScheduleDragReset,
    SyncAutoAdvance,
)


@dataclass(frozen=True)
class Transition:
    """Result of a state operation."""

    state: CarouselState
    effects: tuple[Effect, ...] = ()
    changed: bool = False

    @property
    def changed_index(self) -> IndexChanged | None:
        for effect in self.effects:
            if isinstance(effect, IndexChanged):
                return effect
        return None


def normalize_index(index: int, item_count: int) -> int:
    """Wrap any integer (including negatives) into [0, item_count)."""
    return ((index % item_count) + item_count) % item_count


class StateStore:
    """Holds carousel state and the transitions that mutate it."""

    def __init__(
        self,
        item_count: int,
        min_drag_distance: float = DEFAULT_MIN_DRAG_DISTANCE,
        drag_flag_threshold: float = DEFAULT_DRAG_FLAG_THRESHOLD,
        grace_period_ms: int = DEFAULT_CLICK_GRACE_PERIOD_MS,
        initial: CarouselState | None = None,
    ) -> None:
        self.item_count = item_count
        self.min_drag_distance = min_drag_distance
        self.drag_flag_threshold = drag_flag_threshold
        self.grace_period_ms = grace_period_ms
        self._state = initial or CarouselState()

    @property
    def state(self) -> CarouselState:
        return self._state

    def _commit(self, new: CarouselState, *extra: Effect) -> Transition:
        old = self._state
        self._state = new

        effects: list[Effect] = list(extra)
        if old.current_index != new.current_index:
            effects.insert(0, IndexChanged(old.current_index, new.current_index))
        if (
            old.is_auto_playing != new.is_auto_playing
            or old.is_dragging != new.is_dragging
            or old.is_hovered != new.is_hovered
        ):
            effects.append(SyncAutoAdvance(new.should_auto_advance))
        return Transition(new, tuple(effects), changed=new != old)

    # Navigation

    def go_to_slide(self, index: int) -> Transition:
        """Jump to ``index``, wrapping out-of-range values."""
        if self.item_count == 0:
            return Transition(self._state)
        return self._commit(
            replace(
                self._state,
                current_index=normalize_index(index, self.item_count),
                drag_offset=0.0,
            )
        )

    def next(self) -> Transition:
        return self.go_to_slide(self._state.current_index + 1)

    def prev(self) -> Transition:
        return self.go_to_slide(self._state.current_index - 1)

    # Dragging

    def start_drag(self, position: float) -> Transition:
        """Begin a drag at ``position``; always pauses autoplay."""
        return self._commit(
            replace(
                self._state,
                is_dragging=True,
                drag_start_position=position,
                drag_offset=0.0,
                has_dragged=False,
                is_auto_playing=False,
            ),
            CancelDragReset(),
        )

    def update_drag(self, position: float) -> Transition:
        state = self._state
        if not state.is_dragging:
            return Transition(state)
        offset = position - state.drag_start_position
        return self._commit(
            replace(
                state,
                drag_offset=offset,
                has_dragged=state.has_dragged or abs(offset) > self.drag_flag_threshold,
            )
        )

    def end_drag(self) -> Transition:
        """Finish a drag, committing a slide change past the threshold.

        A second call without an intervening ``start_drag`` is a no-op.
        """
        state = self._state
        if not state.is_dragging:
            return Transition(state)

        index = state.current_index
        if self.item_count > 0 and abs(state.drag_offset) >= self.min_drag_distance:
            step = 1 if state.drag_offset < 0 else -1
            index = normalize_index(index + step, self.item_count)

        extra: tuple[Effect, ...] = ()
        if state.has_dragged:
            extra = (ScheduleDragReset(self.grace_period_ms),)

        return self._commit(
            replace(
                state,
                current_index=index,
                is_dragging=False,
                drag_offset=0.0,
                is_auto_playing=not state.is_hovered,
            ),
            *extra,
        )

    def clear_has_dragged(self) -> Transition:
        """Deferred reset that re-enables click handling after a drag."""
        if not self._state.has_dragged:
            return Transition(self._state)
        return self._commit(replace(self._state, has_dragged=False))

    # Playback

    def set_hovered(self, hovered: bool) -> Transition:
        state = self._state
        return self._commit(
            replace(
                state,
                is_hovered=hovered,
                is_auto_playing=False if hovered else not state.is_dragging,
            )
        )

    def set_auto_play(self, enable: bool) -> Transition:
        """Request autoplay; still gated by hover and drag state."""
        state = self._state
        return self._commit(
            replace(
                state,
                is_auto_playing=enable and not state.is_hovered and not state.is_dragging,
            )
        )

    # Collection changes

    def set_item_count(self, item_count: int) -> Transition:
        """Adopt a new collection size, keeping the index valid."""
        self.item_count = item_count
        if item_count == 0:
            return self._commit(replace(self._state, current_index=0, drag_offset=0.0))
        return self._commit(
            replace(
                self._state,
                current_index=normalize_index(self._state.current_index, item_count),
            )
        )
