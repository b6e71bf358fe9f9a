"""Infinite-loop index virtualization.

The renderer draws a padded strip: one copy of the last item in front of the
real items and one or more copies of the leading items behind them. With
that padding the active card is always a plain contiguous window, and moving
from the last item to the first slides onto a duplicate. Because duplicate
and real item live in different slots, the frame after such a wrap has to
skip its transition animation once.

Nothing here copies items. Slots are mapped back to logical indices with
modulo arithmetic.
"""

import math

from carousel_engine.core.types import CarouselState


def trailing_duplicates(visible_count: float) -> int:
    """Number of leading items repeated after the last real item."""
    return max(1, math.ceil(visible_count) - 1)


def padded_sequence(item_count: int, visible_count: float = 2.0) -> tuple[int, ...]:
    """Logical index drawn in each physical slot.

    For five items and three visible cards this is
    ``(4, 0, 1, 2, 3, 4, 0, 1)``.
    """
    if item_count == 0:
        return ()
    tail = trailing_duplicates(visible_count)
    return (
        (item_count - 1,)
        + tuple(range(item_count))
        + tuple(i % item_count for i in range(tail))
    )


def physical_slot(logical_index: int) -> int:
    """Slot of a logical index, accounting for the prepended duplicate."""
    return logical_index + 1


def logical_for_slot(slot: int, item_count: int) -> int:
    return (slot - 1) % item_count


def is_wrap_transition(previous: int, current: int, item_count: int) -> bool:
    """True for last -> first and first -> last moves."""
    if item_count < 2:
        return False
    last = item_count - 1
    return (previous == last and current == 0) or (previous == 0 and current == last)


class LoopIndexer:
    """Tracks the last settled index and flags wrap transitions.

    ``observe`` is called after every state change. Wrap handling only applies
    to committed, non-dragging state: while a drag is in progress or the drag
    offset is nonzero, the settled index is left untouched.
    """

    def __init__(self, item_count: int, initial_index: int = 0) -> None:
        self.item_count = item_count
        self._settled_index = initial_index

    @property
    def settled_index(self) -> int:
        return self._settled_index

    def observe(self, state: CarouselState) -> bool:
        """Record ``state`` and report whether it completes a wrap."""
        if self.item_count == 0 or state.is_dragging or state.drag_offset != 0:
            return False
        previous = self._settled_index
        self._settled_index = state.current_index
        return is_wrap_transition(previous, state.current_index, self.item_count)

    def reset(self, item_count: int, index: int) -> None:
        self.item_count = item_count
        self._settled_index = index

    def sequence(self, visible_count: float) -> tuple[int, ...]:
        return padded_sequence(self.item_count, visible_count)

    def slots_to_preload(
        self,
        current_index: int,
        cards_in_viewport: int,
        visible_count: float,
        buffer: int = 1,
    ) -> tuple[int, ...]:
        """Slots close enough to the active card to warrant loading."""
        if self.item_count == 0:
            return ()
        active = physical_slot(current_index)
        reach = cards_in_viewport + buffer
        slot_count = len(self.sequence(visible_count))
        return tuple(
            slot for slot in range(slot_count) if abs(slot - active) <= reach
        )
