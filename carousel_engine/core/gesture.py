"""Pointer gesture tracking.

Mouse and touch input are both reduced to one ``(start, move, end)`` stream
for the primary contact point, so thresholds and commit rules live in one
place (``StateStore``). Leaving the carousel or cancelling a touch mid-drag
is treated exactly like a release.
"""

from collections.abc import Callable

from carousel_engine.core.state_store import StateStore, Transition

TransitionSink = Callable[[Transition], None]


class GestureTracker:
    """Feeds pointer positions into a StateStore.

    Args:
        store: The store to drive.
        on_transition: Called with every transition the tracker produces, so
            the host can run the requested effects.
    """

    def __init__(self, store: StateStore, on_transition: TransitionSink) -> None:
        self._store = store
        self._on_transition = on_transition
        self._active = False

    @property
    def is_active(self) -> bool:
        return self._active

    def start(self, position: float) -> bool:
        """Begin a drag. Ignored while a drag is already active."""
        if self._active:
            return False
        self._active = True
        self._on_transition(self._store.start_drag(position))
        return True

    def move(self, position: float) -> bool:
        if not self._active:
            return False
        self._on_transition(self._store.update_drag(position))
        return True

    def end(self) -> bool:
        """Release the drag. Redundant calls are no-ops."""
        if not self._active:
            return False
        self._active = False
        self._on_transition(self._store.end_drag())
        return True

    def cancel(self) -> bool:
        return self.end()

    def leave(self) -> bool:
        """Pointer left the surface; only meaningful mid-drag."""
        return self.end()

    def reset(self) -> None:
        """Forget any active drag without touching the store."""
        self._active = False
