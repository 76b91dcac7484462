"""Slack notification sink using the Web API chat methods."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from announcer.config import SlackConfig
from announcer.exceptions import SinkError, SinkErrorKind
from announcer.models.state import MessageRef
from announcer.sinks.base import NotificationSink

STALE_REFERENCE_ERRORS = frozenset({"message_not_found", "cant_update_message", "channel_not_found"})


def _is_rate_limited(exc: BaseException) -> bool:
    return isinstance(exc, SinkError) and exc.kind == SinkErrorKind.RATE_LIMITED


class wait_retry_after(wait_base):
    """Wait as long as Slack's Retry-After asks, otherwise use the fallback."""

    def __init__(self, fallback: wait_base) -> None:
        self.fallback = fallback

    def __call__(self, retry_state: RetryCallState) -> float:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        if isinstance(exc, SinkError) and exc.retry_after is not None:
            return exc.retry_after
        return self.fallback(retry_state)


def _retry_after(response: httpx.Response) -> float | None:
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        return None


class SlackSink(NotificationSink):
    """Sink posting to a single Slack channel."""

    def __init__(
        self,
        config: SlackConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        wait: wait_base | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize Slack sink.

        Args:
            config: Slack configuration
            transport: Optional httpx transport
            wait: Backoff between rate-limited attempts when Slack sends no
                Retry-After header
            sleep: Coroutine used to wait between attempts
        """
        self.config = config
        self.transport = transport
        self.wait = wait_retry_after(wait or wait_exponential(multiplier=1, min=1, max=30))
        self.sleep = sleep

    async def create(self, content: str) -> MessageRef:
        response = await self._call(
            "chat.postMessage",
            {"channel": self.config.channel_id, "text": content},
        )

        ts = response.get("ts")
        if not isinstance(ts, str) or not ts:
            raise SinkError("chat.postMessage response lacks ts")

        channel = response.get("channel") or self.config.channel_id
        logger.debug(f"Posted Slack message {channel}/{ts}")
        return MessageRef(channel=channel, ts=ts)

    async def update(self, ref: MessageRef, content: str) -> None:
        try:
            await self._call(
                "chat.update",
                {"channel": ref.channel or self.config.channel_id, "ts": ref.ts, "text": content},
            )
        except SinkError as e:
            if e.kind == SinkErrorKind.API and e.args[0] in STALE_REFERENCE_ERRORS:
                raise SinkError(
                    f"Message {ref.channel}/{ref.ts} no longer exists ({e.args[0]})",
                    kind=SinkErrorKind.REFERENCE_STALE,
                ) from e
            raise

        logger.debug(f"Updated Slack message {ref.channel}/{ref.ts}")

    async def _call(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Call a Slack Web API method, retrying while rate limited."""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.config.max_attempts),
            wait=self.wait,
            sleep=self.sleep,
            retry=retry_if_exception(_is_rate_limited),
            reraise=True,
        ):
            with attempt:
                body = await self._post(method, payload)
        return body

    async def _post(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Send one request and translate the response."""
        url = f"{self.config.api_url.rstrip('/')}/{method}"
        headers = {
            "Authorization": f"Bearer {self.config.token}",
            "Content-Type": "application/json; charset=utf-8",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout, transport=self.transport
            ) as client:
                response = await client.post(url, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise SinkError(f"{method} timed out", kind=SinkErrorKind.TIMEOUT) from e
        except httpx.HTTPError as e:
            raise SinkError(f"{method} failed: {e}", kind=SinkErrorKind.TRANSPORT) from e

        if response.status_code == 429:
            retry_after = _retry_after(response)
            logger.warning(f"Slack rate limited {method}, retry after {retry_after}s")
            raise SinkError("ratelimited", kind=SinkErrorKind.RATE_LIMITED, retry_after=retry_after)

        try:
            body = response.json()
        except ValueError as e:
            raise SinkError(
                f"{method} returned non-JSON response (HTTP {response.status_code})",
                kind=SinkErrorKind.TRANSPORT,
            ) from e

        if not isinstance(body, dict):
            raise SinkError(f"{method} returned unexpected payload")

        if not body.get("ok"):
            error = body.get("error") or "unknown_error"
            if error == "ratelimited":
                raise SinkError(
                    error, kind=SinkErrorKind.RATE_LIMITED, retry_after=_retry_after(response)
                )
            raise SinkError(error)

        return body
