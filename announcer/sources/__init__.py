"""Announcement sources."""

from announcer.sources.base import AnnouncementSource
from announcer.sources.rss import RSSFeedSource

__all__ = [
    "AnnouncementSource",
    "RSSFeedSource",
]
