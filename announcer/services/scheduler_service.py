"""Scheduled reconciliation."""

import asyncio

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from loguru import logger

from announcer.config import SchedulerConfig
from announcer.exceptions import ReconcileInProgressError
from announcer.services.reconcile_service import run_reconciliation
from announcer.services.reconciler import Reconciler


class SchedulerService:
    """Runs reconciliation on a cron schedule."""

    def __init__(self, reconciler: Reconciler, scheduler_config: SchedulerConfig) -> None:
        """Initialize scheduler service.

        Args:
            reconciler: Reconciler to run on each tick
            scheduler_config: Scheduler configuration
        """
        self.reconciler = reconciler
        self.scheduler_config = scheduler_config
        self.scheduler = AsyncIOScheduler(timezone=scheduler_config.timezone)
        self._running = False
        self._lock = asyncio.Lock()

    async def _trigger_reconcile(self) -> None:
        """Run one scheduled reconciliation."""
        try:
            await run_reconciliation(self.reconciler, trigger="scheduled")
        except ReconcileInProgressError:
            logger.warning("Skipping scheduled reconciliation, a run is already in progress")

    def initialize(self) -> None:
        """Register the reconciliation job."""
        self.scheduler.add_job(
            self._trigger_reconcile,
            trigger=CronTrigger.from_crontab(
                self.scheduler_config.schedule, timezone=self.scheduler_config.timezone
            ),
            id="reconcile_trigger",
            name="Reconcile announcements",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

        logger.info(f"Scheduler initialized: reconcile={self.scheduler_config.schedule}")

    async def start(self) -> None:
        """Start scheduler."""
        async with self._lock:
            if self._running:
                logger.warning("Scheduler already running")
                return

            self.scheduler.start()
            self._running = True
            logger.info("Scheduler started")

    async def stop(self) -> None:
        """Stop scheduler."""
        async with self._lock:
            if not self._running:
                return

            self.scheduler.shutdown(wait=False)
            self._running = False
            logger.info("Scheduler stopped")

    def is_running(self) -> bool:
        """Check if scheduler is running.

        Returns:
            True if running, False otherwise
        """
        return self._running
