"""Tests for carousel state transitions."""

import pytest

from carousel_engine.core.state_store import StateStore, normalize_index
from carousel_engine.core.types import (
    CancelDragReset,
    CarouselState,
    IndexChanged,
    ScheduleDragReset,
    SyncAutoAdvance,
)


@pytest.fixture
def store() -> StateStore:
    return StateStore(item_count=5)


def drag(store: StateStore, start: float, end: float) -> None:
    store.start_drag(start)
    store.update_drag(end)


class TestNormalizeIndex:
    @pytest.mark.parametrize(
        ("index", "expected"),
        [(0, 0), (4, 4), (5, 0), (7, 2), (-1, 4), (-6, 4), (-10, 0), (123, 3)],
    )
    def test_wraps_into_range(self, index: int, expected: int) -> None:
        assert normalize_index(index, 5) == expected


class TestNavigation:
    """Tests for go_to_slide, next and prev."""

    def test_initial_state(self, store: StateStore) -> None:
        assert store.state == CarouselState()
        assert store.state.should_auto_advance is True

    def test_go_to_negative_wraps_to_last(self, store: StateStore) -> None:
        transition = store.go_to_slide(-1)

        assert store.state.current_index == 4
        assert transition.changed_index == IndexChanged(previous=0, current=4)

    def test_go_to_past_end_wraps(self, store: StateStore) -> None:
        store.go_to_slide(7)
        assert store.state.current_index == 2

    def test_go_to_resets_drag_offset(self) -> None:
        store = StateStore(5, initial=CarouselState(drag_offset=12.0))
        store.go_to_slide(1)
        assert store.state.drag_offset == 0.0

    def test_go_to_same_index_is_unchanged(self, store: StateStore) -> None:
        transition = store.go_to_slide(0)

        assert transition.changed is False
        assert transition.effects == ()

    def test_next_wraps_from_last(self, store: StateStore) -> None:
        store.go_to_slide(4)
        store.next()
        assert store.state.current_index == 0

    def test_prev_wraps_from_first(self, store: StateStore) -> None:
        store.prev()
        assert store.state.current_index == 4

    def test_navigation_does_not_touch_autoplay(self, store: StateStore) -> None:
        transition = store.next()
        assert not any(isinstance(e, SyncAutoAdvance) for e in transition.effects)

    def test_empty_store_ignores_navigation(self) -> None:
        store = StateStore(0)
        transition = store.next()

        assert transition.changed is False
        assert store.state.current_index == 0


class TestDragging:
    """Tests for drag start, update and commit."""

    def test_start_drag_pauses_autoplay(self, store: StateStore) -> None:
        transition = store.start_drag(100)

        state = store.state
        assert state.is_dragging is True
        assert state.drag_start_position == 100
        assert state.drag_offset == 0.0
        assert state.is_auto_playing is False
        assert CancelDragReset() in transition.effects
        assert SyncAutoAdvance(should_run=False) in transition.effects

    def test_start_drag_clears_has_dragged(self) -> None:
        store = StateStore(5, initial=CarouselState(has_dragged=True))
        store.start_drag(0)
        assert store.state.has_dragged is False

    def test_update_drag_tracks_offset(self, store: StateStore) -> None:
        store.start_drag(100)
        transition = store.update_drag(70)

        assert store.state.drag_offset == -30
        assert transition.changed is True
        assert transition.effects == ()

    def test_update_without_drag_is_ignored(self, store: StateStore) -> None:
        transition = store.update_drag(50)

        assert transition.changed is False
        assert store.state.drag_offset == 0.0

    def test_small_move_does_not_set_has_dragged(self, store: StateStore) -> None:
        drag(store, 100, 95)
        assert store.state.has_dragged is False

    def test_move_past_threshold_sets_has_dragged(self, store: StateStore) -> None:
        drag(store, 100, 94)
        assert store.state.has_dragged is True

    def test_has_dragged_sticks_when_moving_back(self, store: StateStore) -> None:
        drag(store, 100, 80)
        store.update_drag(100)
        assert store.state.has_dragged is True

    def test_negative_offset_commits_next(self, store: StateStore) -> None:
        drag(store, 500, 440)
        transition = store.end_drag()

        assert store.state.current_index == 1
        assert transition.changed_index == IndexChanged(0, 1)

    def test_positive_offset_commits_prev(self, store: StateStore) -> None:
        drag(store, 500, 560)
        store.end_drag()
        assert store.state.current_index == 4

    def test_exact_threshold_commits(self, store: StateStore) -> None:
        drag(store, 500, 460)
        store.end_drag()
        assert store.state.current_index == 1

    def test_below_threshold_snaps_back(self, store: StateStore) -> None:
        drag(store, 500, 461)
        store.end_drag()

        assert store.state.current_index == 0
        assert store.state.drag_offset == 0.0

    @pytest.mark.parametrize(
        ("offset", "expected_index"),
        [(-40.0, 1), (-39.99, 0), (39.99, 0), (40.0, 4)],
    )
    def test_commit_boundary(
        self, store: StateStore, offset: float, expected_index: int
    ) -> None:
        drag(store, 0, offset)
        assert store.state.drag_offset == offset

        store.end_drag()
        assert store.state.current_index == expected_index

    def test_end_drag_resumes_autoplay(self, store: StateStore) -> None:
        drag(store, 500, 440)
        transition = store.end_drag()

        assert store.state.is_dragging is False
        assert store.state.is_auto_playing is True
        assert SyncAutoAdvance(should_run=True) in transition.effects

    def test_end_drag_while_hovered_keeps_autoplay_off(self, store: StateStore) -> None:
        store.set_hovered(True)
        drag(store, 500, 440)
        store.end_drag()

        assert store.state.is_auto_playing is False
        assert store.state.should_auto_advance is False

    def test_end_drag_schedules_has_dragged_reset(self, store: StateStore) -> None:
        drag(store, 500, 440)
        transition = store.end_drag()
        assert ScheduleDragReset(delay_ms=100) in transition.effects

    def test_tap_does_not_schedule_reset(self, store: StateStore) -> None:
        store.start_drag(500)
        transition = store.end_drag()
        assert not any(isinstance(e, ScheduleDragReset) for e in transition.effects)

    def test_end_drag_twice_is_noop(self, store: StateStore) -> None:
        drag(store, 500, 440)
        store.end_drag()
        second = store.end_drag()

        assert second.changed is False
        assert second.effects == ()
        assert store.state.current_index == 1

    def test_clear_has_dragged(self, store: StateStore) -> None:
        drag(store, 500, 440)
        store.end_drag()
        transition = store.clear_has_dragged()

        assert store.state.has_dragged is False
        assert transition.changed is True

    def test_clear_has_dragged_when_clear_is_noop(self, store: StateStore) -> None:
        assert store.clear_has_dragged().changed is False

    def test_custom_thresholds(self) -> None:
        store = StateStore(5, min_drag_distance=100, drag_flag_threshold=20)
        drag(store, 500, 410)

        assert store.state.has_dragged is True
        store.end_drag()
        assert store.state.current_index == 0


class TestPlayback:
    """Tests for hover and autoplay toggles."""

    def test_hover_pauses(self, store: StateStore) -> None:
        transition = store.set_hovered(True)

        assert store.state.is_hovered is True
        assert store.state.is_auto_playing is False
        assert SyncAutoAdvance(should_run=False) in transition.effects

    def test_hover_leave_resumes(self, store: StateStore) -> None:
        store.set_hovered(True)
        store.set_hovered(False)

        assert store.state.is_auto_playing is True
        assert store.state.should_auto_advance is True

    def test_hover_leave_while_dragging_stays_paused(self, store: StateStore) -> None:
        store.set_hovered(True)
        store.start_drag(0)
        store.set_hovered(False)
        assert store.state.is_auto_playing is False

    def test_set_auto_play_gated_by_hover(self, store: StateStore) -> None:
        store.set_hovered(True)
        store.set_auto_play(True)
        assert store.state.is_auto_playing is False

    def test_set_auto_play_off_and_on(self, store: StateStore) -> None:
        store.set_auto_play(False)
        assert store.state.should_auto_advance is False

        transition = store.set_auto_play(True)
        assert store.state.should_auto_advance is True
        assert SyncAutoAdvance(should_run=True) in transition.effects


class TestItemCount:
    def test_shrinking_renormalizes_index(self, store: StateStore) -> None:
        store.go_to_slide(4)
        store.set_item_count(3)
        assert store.state.current_index == 1

    def test_empty_resets_index(self, store: StateStore) -> None:
        store.go_to_slide(3)
        store.set_item_count(0)
        assert store.state.current_index == 0
