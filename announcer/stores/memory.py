"""In-process state stores."""

from loguru import logger

from announcer.models.state import StateRecord
from announcer.stores.base import StateStore


class InMemoryStateStore(StateStore):
    """State store holding records in a dict."""

    def __init__(self, records: dict[str, StateRecord] | None = None) -> None:
        self.records: dict[str, StateRecord] = dict(records or {})

    async def get(self, identity: str) -> StateRecord | None:
        return self.records.get(identity)

    async def put(self, record: StateRecord) -> None:
        self.records[record.identity] = record


class DryRunStateStore(InMemoryStateStore):
    """Stand-in for Redis in dry-run mode; logs every intended write."""

    async def put(self, record: StateRecord) -> None:
        logger.info(
            f"[dry-run] Would save {record.identity} "
            f"(hash={record.fingerprint[:12]}, ts={record.message_ref.ts})"
        )
        await super().put(record)
