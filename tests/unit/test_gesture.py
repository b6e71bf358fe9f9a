"""Tests for pointer gesture tracking."""

import pytest

from carousel_engine.core.gesture import GestureTracker
from carousel_engine.core.state_store import StateStore, Transition


@pytest.fixture
def store() -> StateStore:
    return StateStore(item_count=5)


@pytest.fixture
def transitions() -> list[Transition]:
    return []


@pytest.fixture
def tracker(store: StateStore, transitions: list[Transition]) -> GestureTracker:
    return GestureTracker(store, transitions.append)


class TestGestureTracker:
    """Tests for GestureTracker."""

    def test_full_swipe(self, tracker: GestureTracker, store: StateStore) -> None:
        assert tracker.start(300) is True
        assert tracker.move(250) is True
        assert tracker.end() is True

        assert store.state.current_index == 1
        assert tracker.is_active is False

    def test_forwards_every_transition(
        self, tracker: GestureTracker, transitions: list[Transition]
    ) -> None:
        tracker.start(300)
        tracker.move(280)
        tracker.move(250)
        tracker.end()

        assert len(transitions) == 4
        assert transitions[-1].changed_index is not None

    def test_move_without_start_is_ignored(
        self, tracker: GestureTracker, transitions: list[Transition]
    ) -> None:
        assert tracker.move(100) is False
        assert transitions == []

    def test_second_start_is_ignored(
        self, tracker: GestureTracker, store: StateStore
    ) -> None:
        tracker.start(300)
        assert tracker.start(900) is False
        assert store.state.drag_start_position == 300

    def test_end_twice_is_noop(
        self, tracker: GestureTracker, transitions: list[Transition]
    ) -> None:
        tracker.start(300)
        tracker.move(200)
        tracker.end()
        count = len(transitions)

        assert tracker.end() is False
        assert len(transitions) == count

    def test_cancel_commits_like_release(
        self, tracker: GestureTracker, store: StateStore
    ) -> None:
        tracker.start(300)
        tracker.move(360)
        tracker.cancel()

        assert store.state.is_dragging is False
        assert store.state.current_index == 4

    def test_leave_mid_drag_commits(
        self, tracker: GestureTracker, store: StateStore
    ) -> None:
        tracker.start(300)
        tracker.move(200)
        assert tracker.leave() is True
        assert store.state.current_index == 1

    def test_leave_without_drag_is_ignored(self, tracker: GestureTracker) -> None:
        assert tracker.leave() is False

    def test_reset_forgets_active_drag(self, tracker: GestureTracker) -> None:
        tracker.start(300)
        tracker.reset()

        assert tracker.is_active is False
        assert tracker.move(100) is False
