"""Shared test doubles."""

import pytest

from announcer.exceptions import FetchError, SinkError, SinkErrorKind, StoreError
from announcer.models import Announcement, MessageRef, StateRecord
from announcer.sinks.base import NotificationSink
from announcer.sources.base import AnnouncementSource
from announcer.stores.memory import InMemoryStateStore


class StaticSource(AnnouncementSource):
    """Source returning a fixed list, or raising a fixed error."""

    def __init__(self, announcements=None, error: FetchError | None = None) -> None:
        self.announcements = list(announcements or [])
        self.error = error
        self.calls = 0

    @property
    def name(self) -> str:
        return "static"

    async def fetch(self) -> list[Announcement]:
        self.calls += 1
        if self.error:
            raise self.error
        return list(self.announcements)


class RecordingSink(NotificationSink):
    """Sink recording calls; failures can be scripted per message ts."""

    def __init__(self) -> None:
        self.created: list[str] = []
        self.updated: list[tuple[MessageRef, str]] = []
        self.fail_create: SinkError | None = None
        self.stale_refs: set[str] = set()
        self._next_ts = 1

    @property
    def calls(self) -> int:
        return len(self.created) + len(self.updated)

    async def create(self, content: str) -> MessageRef:
        if self.fail_create:
            raise self.fail_create
        self.created.append(content)
        ref = MessageRef(channel="C123", ts=f"{self._next_ts}.000100")
        self._next_ts += 1
        return ref

    async def update(self, ref: MessageRef, content: str) -> None:
        if ref.ts in self.stale_refs:
            raise SinkError("message_not_found", kind=SinkErrorKind.REFERENCE_STALE)
        self.updated.append((ref, content))


class RecordingStore(InMemoryStateStore):
    """In-memory store recording writes; failures can be scripted per identity."""

    def __init__(self, records=None) -> None:
        super().__init__({r.identity: r for r in records or []})
        self.puts: list[StateRecord] = []
        self.fail_get: set[str] = set()
        self.fail_put: set[str] = set()

    async def get(self, identity: str) -> StateRecord | None:
        if identity in self.fail_get:
            raise StoreError(f"connection reset while reading {identity}")
        return await super().get(identity)

    async def put(self, record: StateRecord) -> None:
        if record.identity in self.fail_put:
            raise StoreError(f"connection reset while writing {record.identity}")
        self.puts.append(record)
        await super().put(record)


def make_announcement(identity: str = "post-1", title: str = "New feature", body: str = "Body"):
    return Announcement(
        identity=identity,
        title=title,
        body=body,
        link=f"https://nais.io/log/#{identity}",
    )


@pytest.fixture
def announcement_factory():
    return make_announcement


@pytest.fixture
def source_factory():
    return StaticSource


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def store_factory():
    return RecordingStore
