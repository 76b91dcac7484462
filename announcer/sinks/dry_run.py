"""Logging stand-in for the chat sink."""

import itertools

from loguru import logger

from announcer.models.state import MessageRef
from announcer.sinks.base import NotificationSink


class DryRunSink(NotificationSink):
    """Sink that logs intended posts and edits instead of performing them."""

    channel = "dry-run"

    def __init__(self) -> None:
        self._counter = itertools.count(1)

    async def create(self, content: str) -> MessageRef:
        ref = MessageRef(channel=self.channel, ts=f"{next(self._counter)}.000000")
        logger.info(f"[dry-run] Would post message {ref.ts}:\n{content}")
        return ref

    async def update(self, ref: MessageRef, content: str) -> None:
        logger.info(f"[dry-run] Would update message {ref.channel}/{ref.ts}:\n{content}")
