"""Health monitoring service."""

from datetime import datetime
from enum import Enum

from announcer.config import config
from announcer.models.summary import RunStatus, RunSummary


class HealthStatus(str, Enum):
    """Health status enumeration."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class HealthChecker:
    """Health check manager tracking reconciliation outcomes."""

    def __init__(self, unhealthy_threshold: int | None = None) -> None:
        """Initialize health checker.

        Args:
            unhealthy_threshold: Consecutive failed runs before unhealthy,
                defaults to the configured value
        """
        self.start_time = datetime.now()
        self.unhealthy_threshold = unhealthy_threshold or config.health.unhealthy_threshold
        self.last_run: RunSummary | None = None
        self.consecutive_failures = 0

    def record_run(self, summary: RunSummary) -> None:
        """Update state from a finished run.

        Args:
            summary: Summary of the finished run
        """
        if summary.status == RunStatus.FAILED:
            self.consecutive_failures += 1
        else:
            self.consecutive_failures = 0
        self.last_run = summary

    def get_status(self) -> HealthStatus:
        """Get current health status.

        Returns:
            HealthStatus enum value
        """
        if self.consecutive_failures >= self.unhealthy_threshold:
            return HealthStatus.UNHEALTHY
        if self.last_run is not None and self.last_run.status != RunStatus.SUCCESS:
            return HealthStatus.DEGRADED
        return HealthStatus.HEALTHY

    def get_uptime(self) -> float:
        """Get application uptime in seconds.

        Returns:
            Uptime in seconds
        """
        return (datetime.now() - self.start_time).total_seconds()


health_checker = HealthChecker()
