"""Entry point shared by every reconciliation trigger."""

from loguru import logger

from announcer.models.summary import RunSummary
from announcer.services.health_service import HealthChecker, health_checker
from announcer.services.reconciler import Reconciler


async def run_reconciliation(
    reconciler: Reconciler, trigger: str, checker: HealthChecker | None = None
) -> RunSummary:
    """Run reconciliation and record the outcome for health checks.

    Args:
        reconciler: Reconciler to run
        trigger: Name of the trigger, for logging
        checker: Health checker to update, defaults to the module singleton

    Returns:
        RunSummary of the run

    Raises:
        ReconcileInProgressError: If a run is already in progress
    """
    logger.info(f"Time to check the feed (trigger: {trigger})")

    summary = await reconciler.run()
    (checker or health_checker).record_run(summary)
    return summary
