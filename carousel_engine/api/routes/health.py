"""Health routes for the carousel session service.

``/health`` reports the session table and engine states, ``/ready`` tells a
load balancer whether new carousels can be created, ``/live`` only proves
the process answers.
"""

from typing import Any

from fastapi import APIRouter, Request, Response, status

from carousel_engine.api.dependencies import get_app_state
from carousel_engine.core.health import HealthReport, ServiceStatus
from carousel_engine.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


def _report(request: Request) -> HealthReport:
    report = request.app.state.health_checker.check_all()
    if report.status != ServiceStatus.HEALTHY:
        logger.warning(
            "carousel_service_not_healthy",
            status=report.status.value,
            checks={c.name: c.status.value for c in report.checks},
        )
    return report


@router.get("/health")
async def health_check(request: Request, response: Response) -> dict[str, Any]:
    """Session and engine report.

    Near capacity is degraded but still 200; a leaked engine or a missing
    registry is 503.
    """
    report = _report(request)
    if report.status == ServiceStatus.UNHEALTHY:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return report.to_dict()


@router.get("/ready")
async def readiness_check(request: Request, response: Response) -> dict[str, Any]:
    """Ready once the session registry exists and nothing is unhealthy."""
    app_state = get_app_state()
    report = _report(request)
    is_ready = app_state.is_initialized and report.status != ServiceStatus.UNHEALTHY

    if not is_ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return {
        "ready": is_ready,
        "status": report.status.value,
        "sessions": len(app_state.registry) if app_state.is_initialized else 0,
    }


@router.get("/live")
async def liveness_check() -> dict[str, bool]:
    return {"alive": True}
