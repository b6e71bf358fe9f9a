"""Error categories and exceptions for the carousel engine.

Most carousel failure modes are reported states rather than exceptions: a
carousel with too few items comes back as an inactive handle, a bad size
fraction degrades to a default card width, and a timer that fires after
teardown is ignored. Only misuse that the caller must fix (an invalid
configuration, an unknown session) is raised.

Example:
    from carousel_engine.core.errors import (
        ConfigurationError,
        ErrorCategory,
        is_reported_state,
    )

    engine = create(items, {"autoSlideInterval": 2000})
    if not engine.is_active:
        assert is_reported_state(engine.inactive_reason)
"""

from enum import Enum, auto


class ErrorCategory(Enum):
    """Classification of carousel error conditions."""

    # Reported states - surfaced on the handle or frame, never raised
    INSUFFICIENT_ITEMS = auto()  # Fewer than three items supplied
    INVALID_SIZE_FRACTION = auto()  # Size string not "a/b" or b == 0
    STALE_CALLBACK = auto()  # Deferred callback fired after dispose
    TIMER_UNAVAILABLE = auto()  # No event loop to run deferred work on

    # Raised - the caller has to change its input
    INVALID_CONFIG = auto()  # Config values failed validation
    SESSION_NOT_FOUND = auto()  # Unknown or already closed session id


# Categories that never escalate to an exception
REPORTED_CATEGORIES = {
    ErrorCategory.INSUFFICIENT_ITEMS,
    ErrorCategory.INVALID_SIZE_FRACTION,
    ErrorCategory.STALE_CALLBACK,
    ErrorCategory.TIMER_UNAVAILABLE,
}


class CarouselError(Exception):
    """Base error for the carousel engine.

    Attributes:
        category: The error category.
        original_error: The underlying exception, if this wraps one.
    """

    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.original_error = original_error

    @classmethod
    def from_exception(
        cls,
        ex: Exception,
        category: ErrorCategory,
    ) -> "CarouselError":
        """Create an error of this class wrapping an existing exception."""
        return cls(message=str(ex), category=category, original_error=ex)


class ConfigurationError(CarouselError):
    """Raised when a carousel configuration fails validation."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.INVALID_CONFIG,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, category, original_error)


class TimerUnavailableError(CarouselError):
    """Raised by a timer backend that has no event loop to schedule on.

    The engine catches it: autoplay waits for ``start()`` or the next input,
    one-shot deferred work is skipped.
    """

    def __init__(
        self,
        message: str = "No running event loop",
        category: ErrorCategory = ErrorCategory.TIMER_UNAVAILABLE,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, category, original_error)


class SessionNotFoundError(CarouselError):
    """Raised when a session id does not name a live carousel."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            f"Carousel session not found: {session_id}",
            ErrorCategory.SESSION_NOT_FOUND,
        )
        self.session_id = session_id


def is_reported_state(category: ErrorCategory | None) -> bool:
    """Check if an error category is reported on state rather than raised.

    Args:
        category: The error category to check.

    Returns:
        True if the category is surfaced as state.
    """
    return category in REPORTED_CATEGORIES
