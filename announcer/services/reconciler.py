"""Reconciliation of fetched announcements against posted chat messages."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from loguru import logger

from announcer.exceptions import (
    FetchError,
    ReconcileInProgressError,
    SinkError,
    SinkErrorKind,
    StoreError,
)
from announcer.fingerprint import fingerprint
from announcer.models.announcement import Announcement
from announcer.models.state import StateRecord
from announcer.models.summary import Action, IdentityOutcome, RunSummary
from announcer.render import render_message
from announcer.sinks.base import NotificationSink
from announcer.sources.base import AnnouncementSource
from announcer.stores.base import StateStore

T = TypeVar("T")


class Reconciler:
    """Decides, per announcement, whether to create, update or skip a message.

    Runs never overlap: run() refuses to start while another run is active,
    so each identity's read-decide-write sequence is serialized.
    """

    def __init__(
        self,
        source: AnnouncementSource,
        store: StateStore,
        sink: NotificationSink,
        *,
        fetch_timeout: float = 60.0,
        sink_timeout: float = 15.0,
        store_timeout: float = 5.0,
        renderer: Callable[[Announcement], str] = render_message,
        dry_run: bool = False,
    ) -> None:
        """Initialize reconciler.

        Args:
            source: Announcement source
            store: State store
            sink: Notification sink
            fetch_timeout: Timeout for the feed fetch in seconds
            sink_timeout: Timeout for each chat call in seconds
            store_timeout: Timeout for each store call in seconds
            renderer: Announcement to message text function
            dry_run: Whether the collaborators are dry-run stand-ins
        """
        self.source = source
        self.store = store
        self.sink = sink
        self.fetch_timeout = fetch_timeout
        self.sink_timeout = sink_timeout
        self.store_timeout = store_timeout
        self.renderer = renderer
        self.dry_run = dry_run
        self._run_lock = asyncio.Lock()

    def is_running(self) -> bool:
        """Check if a run is in progress.

        Returns:
            True if running, False otherwise
        """
        return self._run_lock.locked()

    async def run(self) -> RunSummary:
        """Run one reconciliation pass.

        Returns:
            RunSummary with per-identity outcomes

        Raises:
            ReconcileInProgressError: If a run is already in progress
        """
        if self._run_lock.locked():
            raise ReconcileInProgressError("Reconciliation already in progress")

        async with self._run_lock:
            return await self._reconcile_all()

    async def _reconcile_all(self) -> RunSummary:
        summary = RunSummary(dry_run=self.dry_run)

        try:
            announcements = await self._fetch()
        except FetchError as e:
            logger.error(f"Failed getting announcements: {e}")
            return summary.finish(error=str(e))

        logger.info(f"Reconciling {len(announcements)} announcements from {self.source.name}")

        for announcement in announcements:
            summary.record(await self.reconcile_one(announcement))

        summary.finish()
        if summary.failed:
            logger.warning(f"Reconciliation finished with failures: {summary}")
        else:
            logger.info(f"Reconciliation finished: {summary}")
        return summary

    async def reconcile_one(self, announcement: Announcement) -> IdentityOutcome:
        """Reconcile a single announcement.

        Args:
            announcement: Fetched announcement

        Returns:
            IdentityOutcome describing the action taken
        """
        identity = announcement.identity
        fp = fingerprint(announcement.title, announcement.body)
        logger.info(
            f"Handling '{announcement.title}' (date: {announcement.published_at}, key: {identity})"
        )

        try:
            record = await self._store_call(self.store.get(identity), f"get {identity}")
        except StoreError as e:
            return self._failed(identity, "store.get", e)

        if record is None:
            return await self._create(announcement, fp)

        if record.fingerprint == fp:
            logger.debug(f"No changes for {identity}")
            return IdentityOutcome(identity=identity, action=Action.UNCHANGED)

        return await self._update(announcement, fp, record)

    async def _create(self, announcement: Announcement, fp: str) -> IdentityOutcome:
        identity = announcement.identity
        logger.info(f"New announcement {identity}, posting message")

        try:
            ref = await self._sink_call(self.sink.create(self.renderer(announcement)), "create")
        except SinkError as e:
            return self._failed(identity, "sink.create", e)

        record = StateRecord(identity=identity, fingerprint=fp, message_ref=ref)
        try:
            await self._store_call(self.store.put(record), f"put {identity}")
        except StoreError as e:
            return self._failed(identity, "store.put", e)

        logger.info(f"Posted {identity} and saved state")
        return IdentityOutcome(identity=identity, action=Action.CREATED)

    async def _update(
        self, announcement: Announcement, fp: str, record: StateRecord
    ) -> IdentityOutcome:
        identity = announcement.identity
        logger.info(f"Announcement {identity} has changed, updating message")

        try:
            await self._sink_call(
                self.sink.update(record.message_ref, self.renderer(announcement)), "update"
            )
        except SinkError as e:
            return self._failed(identity, "sink.update", e)

        updated = StateRecord(identity=identity, fingerprint=fp, message_ref=record.message_ref)
        try:
            await self._store_call(self.store.put(updated), f"put {identity}")
        except StoreError as e:
            return self._failed(identity, "store.put", e)

        logger.info(f"Updated {identity} and saved state")
        return IdentityOutcome(identity=identity, action=Action.UPDATED)

    @staticmethod
    def _failed(identity: str, stage: str, error: Exception) -> IdentityOutcome:
        logger.error(f"Failed {stage} for {identity}: {error}")
        return IdentityOutcome(identity=identity, action=Action.FAILED, stage=stage, error=str(error))

    async def _fetch(self) -> list[Announcement]:
        try:
            return await asyncio.wait_for(self.source.fetch(), timeout=self.fetch_timeout)
        except TimeoutError as e:
            raise FetchError(f"Feed fetch timed out after {self.fetch_timeout}s") from e

    async def _sink_call(self, call: Awaitable[T], operation: str) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self.sink_timeout)
        except TimeoutError as e:
            raise SinkError(
                f"{operation} timed out after {self.sink_timeout}s", kind=SinkErrorKind.TIMEOUT
            ) from e

    async def _store_call(self, call: Awaitable[T], operation: str) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self.store_timeout)
        except TimeoutError as e:
            raise StoreError(f"{operation} timed out after {self.store_timeout}s") from e
