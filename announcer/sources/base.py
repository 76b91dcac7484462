"""Base announcement source interface."""

from abc import ABC, abstractmethod

from announcer.models.announcement import Announcement


class AnnouncementSource(ABC):
    """Abstract base class for announcement feeds."""

    @abstractmethod
    async def fetch(self) -> list[Announcement]:
        """Fetch the current set of announcements.

        Returns:
            Announcements in source order, possibly empty

        Raises:
            FetchError: If the feed is unreachable or wholly unparsable
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get source identifier.

        Returns:
            Source name string
        """
