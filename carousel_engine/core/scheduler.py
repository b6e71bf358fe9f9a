"""Auto-advance scheduling.

The scheduler runs a repeating timer while autoplay is allowed. It holds the
advance callback explicitly, so swapping the callback or the interval takes
effect on the next tick without rebuilding the scheduler, and every restart
cancels the previous timer first. Ticks from a superseded timer are detected
by a generation counter and dropped.

If the timer backend cannot schedule yet (no running event loop), the
scheduler remembers that autoplay is wanted and arms on ``resume()``.
"""

from collections.abc import Callable

from carousel_engine.core.errors import TimerUnavailableError
from carousel_engine.core.logging import get_logger
from carousel_engine.core.timers import TimerBackend, TimerHandle

logger = get_logger(__name__)


class AutoAdvanceScheduler:
    """Repeating timer that calls ``advance`` every ``interval_ms``."""

    def __init__(
        self,
        timers: TimerBackend,
        interval_ms: int,
        advance: Callable[[], None],
    ) -> None:
        self._timers = timers
        self._interval_ms = interval_ms
        self._advance = advance
        self._handle: TimerHandle | None = None
        self._generation = 0
        self._pending = False
        self._disposed = False

    @property
    def is_running(self) -> bool:
        return self._handle is not None

    @property
    def is_pending(self) -> bool:
        """Autoplay is wanted but no timer could be armed yet."""
        return self._pending

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    def set_advance(self, advance: Callable[[], None]) -> None:
        """Replace the callback used by future ticks."""
        self._advance = advance

    def set_interval(self, interval_ms: int) -> None:
        """Change the period; a running timer restarts with the new value."""
        if interval_ms == self._interval_ms:
            return
        self._interval_ms = interval_ms
        if self._handle is not None or self._pending:
            self.sync(True)

    def sync(self, should_run: bool) -> None:
        """Cancel any running timer and start a fresh one if allowed."""
        self.stop()
        if should_run and not self._disposed:
            self._arm(self._generation)

    def stop(self) -> None:
        self._generation += 1
        self._pending = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def resume(self) -> bool:
        """Arm a timer that could not be armed earlier.

        Returns:
            True if the scheduler is running afterwards.
        """
        if self._pending and not self._disposed:
            self.sync(True)
        return self.is_running

    def dispose(self) -> None:
        """Cancel unconditionally; later syncs are ignored."""
        self.stop()
        self._disposed = True

    def _arm(self, generation: int) -> None:
        try:
            self._handle = self._timers.call_later(
                self._interval_ms, lambda: self._tick(generation)
            )
        except TimerUnavailableError:
            self._handle = None
            self._pending = True
            logger.debug("auto_advance_deferred", interval_ms=self._interval_ms)

    def _tick(self, generation: int) -> None:
        if self._disposed or generation != self._generation:
            logger.debug("stale_auto_advance_tick", generation=generation)
            return
        # Re-arm before advancing: advance may stop or restart us
        self._arm(generation)
        self._advance()
