"""Base notification sink interface."""

from abc import ABC, abstractmethod

from announcer.models.state import MessageRef


class NotificationSink(ABC):
    """Posts and edits chat messages."""

    @abstractmethod
    async def create(self, content: str) -> MessageRef:
        """Post a new message.

        Args:
            content: Rendered message text

        Returns:
            Reference to the posted message

        Raises:
            SinkError: If the message could not be posted
        """

    @abstractmethod
    async def update(self, ref: MessageRef, content: str) -> None:
        """Replace the text of a previously posted message.

        Args:
            ref: Reference returned by create
            content: Rendered message text

        Raises:
            SinkError: If the message could not be edited; kind is
                REFERENCE_STALE when the message no longer exists
        """
