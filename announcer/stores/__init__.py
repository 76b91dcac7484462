"""State stores."""

from announcer.stores.base import StateStore
from announcer.stores.memory import DryRunStateStore, InMemoryStateStore
from announcer.stores.redis_store import RedisStateStore

__all__ = [
    "StateStore",
    "InMemoryStateStore",
    "DryRunStateStore",
    "RedisStateStore",
]
