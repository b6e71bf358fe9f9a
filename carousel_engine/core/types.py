"""Shared carousel types.

Items and state snapshots are immutable: every transition produces a new
``CarouselState`` so a deferred callback can never observe a half-applied
update.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CarouselItem:
    """A single card supplied by the caller."""

    id: int | str
    title: str
    image_ref: str
    link_ref: str


@dataclass(frozen=True)
class CarouselState:
    """Snapshot of one carousel's mutable state.

    Attributes:
        current_index: Logical position in [0, N).
        is_dragging: Whether a pointer drag is in progress.
        drag_start_position: Pointer x recorded at drag start, in pixels.
        drag_offset: Signed displacement from the drag start, 0 when idle.
        is_auto_playing: Whether autoplay is requested.
        is_hovered: Whether the pointer is over the carousel.
        has_dragged: Set once a drag moves past the click threshold; cleared
            after the click grace period.
    """

    current_index: int = 0
    is_dragging: bool = False
    drag_start_position: float = 0.0
    drag_offset: float = 0.0
    is_auto_playing: bool = True
    is_hovered: bool = False
    has_dragged: bool = False

    @property
    def should_auto_advance(self) -> bool:
        return self.is_auto_playing and not self.is_dragging and not self.is_hovered


# Effects requested by state transitions and executed by the engine


@dataclass(frozen=True)
class IndexChanged:
    previous: int
    current: int


@dataclass(frozen=True)
class SyncAutoAdvance:
    should_run: bool


@dataclass(frozen=True)
class ScheduleDragReset:
    delay_ms: int


@dataclass(frozen=True)
class CancelDragReset:
    pass


Effect = IndexChanged | SyncAutoAdvance | ScheduleDragReset | CancelDragReset


@dataclass(frozen=True)
class RenderFrame:
    """Everything a renderer needs to position the card strip.

    ``padded_sequence_indices`` lists, for each physical slot, the logical
    item index drawn there. ``active_slot`` is the slot of the current item.
    """

    transform_offset_px: float
    transition_enabled: bool
    card_width_px: float
    spacing_px: float
    current_logical_index: int
    padded_sequence_indices: tuple[int, ...]
    card_height_px: float = 0.0
    visible_count: float = 0.0
    active_slot: int = 0
    item_count: int = 0
    is_dragging: bool = False
    has_dragged: bool = False
    preload_slots: tuple[int, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a camelCase dictionary for JSON clients."""
        return {
            "transformOffsetPx": self.transform_offset_px,
            "transitionEnabled": self.transition_enabled,
            "cardWidthPx": self.card_width_px,
            "cardHeightPx": self.card_height_px,
            "spacingPx": self.spacing_px,
            "visibleCount": self.visible_count,
            "currentLogicalIndex": self.current_logical_index,
            "paddedSequenceIndices": list(self.padded_sequence_indices),
            "activeSlot": self.active_slot,
            "itemCount": self.item_count,
            "isDragging": self.is_dragging,
            "hasDragged": self.has_dragged,
            "preloadSlots": list(self.preload_slots),
        }


EMPTY_FRAME = RenderFrame(
    transform_offset_px=0.0,
    transition_enabled=True,
    card_width_px=0.0,
    spacing_px=0.0,
    current_logical_index=0,
    padded_sequence_indices=(),
)
