"""Business logic services."""

from announcer.services.health_service import HealthChecker, HealthStatus, health_checker
from announcer.services.reconcile_service import run_reconciliation
from announcer.services.reconciler import Reconciler
from announcer.services.scheduler_service import SchedulerService

__all__ = [
    "HealthChecker",
    "HealthStatus",
    "health_checker",
    "run_reconciliation",
    "Reconciler",
    "SchedulerService",
]
