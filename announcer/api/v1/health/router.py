"""Health check endpoints for monitoring."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from announcer import __version__
from announcer.container import get_health_checker
from announcer.models.summary import RunStatus
from announcer.services.health_service import HealthChecker, HealthStatus

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: HealthStatus
    timestamp: datetime
    last_run_status: RunStatus | None
    last_run_finished_at: datetime | None
    consecutive_failures: int
    uptime_seconds: float
    version: str


@router.get("", response_model=HealthResponse)
async def health_check(
    checker: HealthChecker = Depends(get_health_checker),  # noqa: B008
) -> HealthResponse:
    """Health check endpoint.

    Returns:
        HealthResponse with current status
    """
    last_run = checker.last_run
    return HealthResponse(
        status=checker.get_status(),
        timestamp=datetime.now(),
        last_run_status=last_run.status if last_run else None,
        last_run_finished_at=last_run.finished_at if last_run else None,
        consecutive_failures=checker.consecutive_failures,
        uptime_seconds=checker.get_uptime(),
        version=__version__,
    )


@router.get("/ready")
async def readiness_check(
    checker: HealthChecker = Depends(get_health_checker),  # noqa: B008
) -> dict[str, bool | HealthStatus]:
    """Readiness check endpoint.

    Returns:
        Dictionary indicating readiness status

    Raises:
        HTTPException: If too many consecutive runs failed
    """
    health_status = checker.get_status()

    if health_status == HealthStatus.UNHEALTHY:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Service unhealthy: {checker.consecutive_failures} consecutive failed runs",
        )

    return {"ready": True, "status": health_status}


@router.get("/live")
async def liveness_check(
    checker: HealthChecker = Depends(get_health_checker),  # noqa: B008
) -> dict[str, bool | float]:
    """Liveness check endpoint.

    Returns:
        Dictionary indicating liveness status
    """
    return {"alive": True, "uptime_seconds": checker.get_uptime()}
