"""Base state store interface."""

from abc import ABC, abstractmethod

from announcer.models.state import StateRecord


class StateStore(ABC):
    """Key-value persistence of StateRecords keyed by announcement identity."""

    @abstractmethod
    async def get(self, identity: str) -> StateRecord | None:
        """Look up the record for an identity.

        Args:
            identity: Announcement identity

        Returns:
            StateRecord, or None if the identity has never been stored

        Raises:
            StoreError: If the store cannot be read
        """

    @abstractmethod
    async def put(self, record: StateRecord) -> None:
        """Create or replace the record for record.identity.

        Args:
            record: Record to store

        Raises:
            StoreError: If the store cannot be written
        """

    async def close(self) -> None:
        """Release store resources."""
