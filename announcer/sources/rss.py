"""RSS announcement source."""

import calendar
import time
from datetime import UTC, datetime
from typing import Any
from urllib.parse import urldefrag

import aiohttp
import feedparser
from aiohttp import ClientTimeout
from loguru import logger
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from announcer.config import FeedConfig
from announcer.exceptions import FetchError
from announcer.models.announcement import Announcement
from announcer.sources.base import AnnouncementSource


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, aiohttp.ClientResponseError):
        return exc.status >= 500
    return isinstance(exc, (aiohttp.ClientError, TimeoutError))


class RSSFeedSource(AnnouncementSource):
    """Source reading announcements from an RSS/Atom feed."""

    def __init__(self, config: FeedConfig) -> None:
        """Initialize source with configuration.

        Args:
            config: Feed configuration
        """
        self.config = config

    @property
    def name(self) -> str:
        """Source identifier."""
        return self.config.url

    async def fetch(self) -> list[Announcement]:
        """Download and parse the feed.

        Returns:
            Announcements in feed order

        Raises:
            FetchError: If the feed cannot be downloaded or parsed at all
        """
        logger.info(f"Fetching announcements from {self.config.url}")

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.config.retry_attempts),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                retry=retry_if_exception(_is_transient),
                reraise=True,
            ):
                with attempt:
                    document = await self._download()
        except aiohttp.ClientResponseError as e:
            raise FetchError(f"Feed returned HTTP {e.status}: {self.config.url}") from e
        except (aiohttp.ClientError, TimeoutError) as e:
            raise FetchError(f"Failed getting the feed {self.config.url}: {e!r}") from e

        return self.parse(document)

    async def _download(self) -> bytes:
        """Download the raw feed document."""
        async with (
            aiohttp.ClientSession() as session,
            session.get(self.config.url, timeout=ClientTimeout(total=self.config.timeout)) as response,
        ):
            response.raise_for_status()
            return await response.read()

    def parse(self, document: bytes | str) -> list[Announcement]:
        """Parse a feed document into announcements.

        Malformed entries are skipped with a warning.

        Args:
            document: Raw RSS/Atom document

        Returns:
            Announcements in feed order

        Raises:
            FetchError: If the document is not a feed
        """
        if isinstance(document, str):
            document = document.encode("utf-8")

        feed = feedparser.parse(document)
        if not feed.get("entries") and not feed.get("version"):
            exc = feed.get("bozo_exception")
            msg = f"Invalid RSS/Atom feed: {self.config.url}"
            if exc:
                msg += f" ({exc})"
            raise FetchError(msg)

        entries = feed.get("entries", [])
        feed_title = feed.get("feed", {}).get("title", self.config.url)
        logger.info(f"Found {len(entries)} posts in {feed_title}")

        announcements: list[Announcement] = []
        for index, entry in enumerate(entries):
            announcement = self._parse_entry(entry)
            if announcement is None:
                logger.warning(f"Skipping malformed entry #{index} in {self.config.url}")
                continue
            announcements.append(announcement)

        return announcements

    def _parse_entry(self, entry: dict[str, Any]) -> Announcement | None:
        """Map one feed entry to an Announcement."""
        title = (entry.get("title") or "").strip()
        link = (entry.get("link") or "").strip()
        identity = self._identity(entry, link)
        body = self._body(entry)

        if not title or not identity or body is None:
            return None

        return Announcement(
            identity=identity,
            title=title,
            body=body,
            link=link,
            published_at=self._published_at(entry),
        )

    @staticmethod
    def _identity(entry: dict[str, Any], link: str) -> str:
        """Identity is the link fragment, then the guid, then the link."""
        fragment = urldefrag(link).fragment if link else ""
        if fragment:
            return fragment
        guid = entry.get("id")
        if isinstance(guid, str) and guid.strip():
            return guid.strip()
        return link

    @staticmethod
    def _body(entry: dict[str, Any]) -> str | None:
        """Prefer content:encoded, fall back to summary/description."""
        content = entry.get("content")
        if isinstance(content, list) and content:
            value = content[0].get("value")
            if isinstance(value, str):
                return value
        summary = entry.get("summary")
        if isinstance(summary, str):
            return summary
        return None

    @staticmethod
    def _published_at(entry: dict[str, Any]) -> datetime | None:
        for key in ("published_parsed", "updated_parsed"):
            value = entry.get(key)
            if isinstance(value, time.struct_time):
                return datetime.fromtimestamp(calendar.timegm(value), tz=UTC)
        return None
