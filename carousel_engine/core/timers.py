"""Timer backends for deferred and repeating carousel work.

The engine never sleeps; it asks a backend to call it back later. The
asyncio backend is used in production, tests drive a manual clock.
"""

import asyncio
from collections.abc import Callable
from typing import Protocol

from carousel_engine.core.errors import ErrorCategory, TimerUnavailableError


class TimerHandle(Protocol):
    """A pending callback that can be cancelled."""

    def cancel(self) -> None:
        """Cancel the callback. Cancelling twice is harmless."""
        ...


class TimerBackend(Protocol):
    """Protocol for scheduling one-shot callbacks."""

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once after ``delay_ms`` milliseconds.

        Args:
            delay_ms: Delay in milliseconds.
            callback: Zero-argument callable.

        Returns:
            A handle whose ``cancel()`` prevents the callback from running.

        Raises:
            TimerUnavailableError: If there is nothing to schedule on yet.
        """
        ...


class AsyncioTimerBackend:
    """Timer backend on top of ``loop.call_later``.

    If no loop is given, the running loop is looked up on every call. Outside
    a running loop ``call_later`` raises ``TimerUnavailableError``; the engine
    treats that as a reported state and retries autoplay later.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(
        self, delay_ms: float, callback: Callable[[], None]
    ) -> asyncio.TimerHandle:
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError as ex:
                raise TimerUnavailableError.from_exception(
                    ex, ErrorCategory.TIMER_UNAVAILABLE
                ) from ex
        return loop.call_later(max(delay_ms, 0) / 1000.0, callback)
