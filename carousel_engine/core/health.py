"""Health reporting for hosted carousels.

The session service is healthy when the engines it holds are live and its
session table has room left. ``engine_check`` and ``capacity_check`` turn
that into ``ServiceCheck`` results; ``HealthChecker`` runs the registered
checks and reports the worst status.

Example:
    checker = HealthChecker(version="1.0.0")
    checker.add_check("engines", lambda: engine_check(registry.engines()))
    checker.add_check(
        "sessions", lambda: capacity_check(len(registry), registry.max_sessions)
    )
    report = checker.check_all()
"""

from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from carousel_engine.core.engine import CarouselEngine
from carousel_engine.core.logging import get_logger

logger = get_logger(__name__)

# Share of max_sessions above which new sessions start evicting soon
CAPACITY_WARNING_RATIO = 0.9


class ServiceStatus(Enum):
    """Status of one check, ordered from best to worst."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


_SEVERITY = {
    ServiceStatus.HEALTHY: 0,
    ServiceStatus.DEGRADED: 1,
    ServiceStatus.UNHEALTHY: 2,
}


@dataclass
class ServiceCheck:
    """Result of a single health check."""

    name: str
    status: ServiceStatus
    message: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "details": self.details,
        }


@dataclass
class HealthReport:
    """Aggregated health report."""

    status: ServiceStatus
    timestamp: str
    checks: list[ServiceCheck]
    version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "status": self.status.value,
            "timestamp": self.timestamp,
            "version": self.version,
            "checks": [check.to_dict() for check in self.checks],
        }


def worst_status(checks: Iterable[ServiceCheck]) -> ServiceStatus:
    """Overall status: the most severe check wins; no checks is healthy."""
    return max(
        (check.status for check in checks),
        key=_SEVERITY.__getitem__,
        default=ServiceStatus.HEALTHY,
    )


def engine_check(engines: Iterable[CarouselEngine]) -> ServiceCheck:
    """Summarize the engines held by the session service.

    Carousels with too few items are a normal reported state and are only
    counted. A disposed engine that is still registered has leaked and makes
    the check unhealthy; engines whose autoplay waits for an event loop make
    it degraded.
    """
    counts: Counter[str] = Counter()
    for engine in engines:
        if engine.is_disposed:
            counts["disposed"] += 1
        elif not engine.is_active:
            counts["inactive"] += 1
        else:
            counts["active"] += 1
            if engine.is_auto_advancing:
                counts["auto_advancing"] += 1
            if engine.is_auto_advance_pending:
                counts["waiting_for_loop"] += 1

    details = {
        key: counts[key]
        for key in ("active", "inactive", "auto_advancing", "waiting_for_loop", "disposed")
    }
    if counts["disposed"]:
        return ServiceCheck(
            name="engines",
            status=ServiceStatus.UNHEALTHY,
            message=f"{counts['disposed']} disposed engine(s) still registered",
            details=details,
        )
    if counts["waiting_for_loop"]:
        return ServiceCheck(
            name="engines",
            status=ServiceStatus.DEGRADED,
            message="Autoplay waiting for an event loop",
            details=details,
        )
    return ServiceCheck(name="engines", status=ServiceStatus.HEALTHY, details=details)


def capacity_check(sessions: int, max_sessions: int) -> ServiceCheck:
    """Degraded once the registry is close to evicting the oldest sessions."""
    details = {"sessions": sessions, "max_sessions": max_sessions}
    if max_sessions <= 0 or sessions >= max_sessions * CAPACITY_WARNING_RATIO:
        return ServiceCheck(
            name="sessions",
            status=ServiceStatus.DEGRADED,
            message="Near session limit; oldest sessions will be evicted",
            details=details,
        )
    return ServiceCheck(name="sessions", status=ServiceStatus.HEALTHY, details=details)


HealthCheckFunc = Callable[[], ServiceCheck]


class HealthChecker:
    """Runs named health checks and aggregates their results.

    Checks are plain callables over in-memory state. A check that raises is
    reported as unhealthy under its registered name.
    """

    def __init__(self, version: str | None = None) -> None:
        self._checks: dict[str, HealthCheckFunc] = {}
        self._version = version

    def add_check(self, name: str, check_func: HealthCheckFunc) -> None:
        self._checks[name] = check_func

    def _run(self, name: str, check_func: HealthCheckFunc) -> ServiceCheck:
        try:
            return check_func()
        except Exception as ex:
            logger.warning("health_check_failed", check=name, error=str(ex))
            return ServiceCheck(name=name, status=ServiceStatus.UNHEALTHY, message=str(ex))

    def check_all(self) -> HealthReport:
        checks = [self._run(name, func) for name, func in self._checks.items()]
        return HealthReport(
            status=worst_status(checks),
            timestamp=datetime.now(UTC).isoformat(),
            checks=checks,
            version=self._version,
        )
