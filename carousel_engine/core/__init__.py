"""Core carousel logic.

This package contains the platform-agnostic carousel engine: state
transitions, gesture tracking, loop indexing, autoplay scheduling and layout,
plus the shared logging, error and configuration helpers.
"""

from carousel_engine.core.config import CarouselConfig, coerce_config
from carousel_engine.core.engine import CarouselEngine, create
from carousel_engine.core.errors import (
    CarouselError,
    ConfigurationError,
    ErrorCategory,
    SessionNotFoundError,
    TimerUnavailableError,
    is_reported_state,
)
from carousel_engine.core.gesture import GestureTracker
from carousel_engine.core.health import (
    HealthChecker,
    HealthReport,
    ServiceCheck,
    ServiceStatus,
)
from carousel_engine.core.layout import (
    LayoutConfig,
    calculate_layout,
    effective_visible_count,
    parse_size_fraction,
)
from carousel_engine.core.logging import (
    configure_logging,
    get_logger,
    session_context,
)
from carousel_engine.core.loop_indexer import (
    LoopIndexer,
    is_wrap_transition,
    padded_sequence,
)
from carousel_engine.core.scheduler import AutoAdvanceScheduler
from carousel_engine.core.state_store import StateStore, Transition
from carousel_engine.core.timers import AsyncioTimerBackend, TimerBackend, TimerHandle
from carousel_engine.core.types import CarouselItem, CarouselState, RenderFrame

__all__ = [
    # Engine
    "CarouselEngine",
    "create",
    # Components
    "AutoAdvanceScheduler",
    "GestureTracker",
    "LoopIndexer",
    "StateStore",
    "Transition",
    "is_wrap_transition",
    "padded_sequence",
    # Layout
    "LayoutConfig",
    "calculate_layout",
    "effective_visible_count",
    "parse_size_fraction",
    # Types
    "CarouselItem",
    "CarouselState",
    "RenderFrame",
    # Configuration
    "CarouselConfig",
    "coerce_config",
    # Timers
    "AsyncioTimerBackend",
    "TimerBackend",
    "TimerHandle",
    # Error handling
    "CarouselError",
    "ConfigurationError",
    "ErrorCategory",
    "SessionNotFoundError",
    "TimerUnavailableError",
    "is_reported_state",
    # Health checks
    "HealthChecker",
    "HealthReport",
    "ServiceCheck",
    "ServiceStatus",
    # Logging
    "configure_logging",
    "get_logger",
    "session_context",
]
