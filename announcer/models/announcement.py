"""Announcement domain models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Announcement:
    """Domain model for a published announcement."""

    identity: str
    title: str
    body: str
    link: str
    published_at: datetime | None = None

    def __str__(self) -> str:
        return f"{self.identity}: {self.title}"
