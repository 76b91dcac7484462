"""Test the Slack notification sink."""

import json

import httpx
import pytest
from tenacity import wait_none

from announcer.config import SlackConfig
from announcer.exceptions import SinkError, SinkErrorKind
from announcer.models import MessageRef
from announcer.sinks.slack import SlackSink


async def no_sleep(seconds: float) -> None:
    return None


def make_sink(handler, max_attempts: int = 3, sleep=no_sleep) -> SlackSink:
    config = SlackConfig(
        token="xoxb-test",
        channel_id="C123",
        api_url="https://slack.test/api",
        max_attempts=max_attempts,
    )
    return SlackSink(
        config, transport=httpx.MockTransport(handler), wait=wait_none(), sleep=sleep
    )


@pytest.mark.asyncio
async def test_create_posts_message():
    """Test create calls chat.postMessage and returns the message reference."""
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"ok": True, "channel": "C123", "ts": "1700000000.000100"})

    sink = make_sink(handler)
    ref = await sink.create("<https://nais.io/log/#x|Hello>\nWorld")

    assert ref == MessageRef(channel="C123", ts="1700000000.000100")
    assert len(requests) == 1
    request = requests[0]
    assert str(request.url) == "https://slack.test/api/chat.postMessage"
    assert request.headers["Authorization"] == "Bearer xoxb-test"
    assert json.loads(request.content) == {
        "channel": "C123",
        "text": "<https://nais.io/log/#x|Hello>\nWorld",
    }


@pytest.mark.asyncio
async def test_update_edits_referenced_message():
    """Test update calls chat.update with the stored channel and ts."""
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"ok": True, "channel": "C999", "ts": "42.000000"})

    sink = make_sink(handler)
    await sink.update(MessageRef(channel="C999", ts="42.000000"), "edited")

    assert str(requests[0].url) == "https://slack.test/api/chat.update"
    assert json.loads(requests[0].content) == {"channel": "C999", "ts": "42.000000", "text": "edited"}


@pytest.mark.asyncio
async def test_update_missing_message_is_stale_reference():
    """Test a deleted message is reported as a stale reference."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": False, "error": "message_not_found"})

    sink = make_sink(handler)

    with pytest.raises(SinkError) as exc_info:
        await sink.update(MessageRef(channel="C123", ts="42.000000"), "edited")

    assert exc_info.value.kind == SinkErrorKind.REFERENCE_STALE


@pytest.mark.asyncio
async def test_api_error_raises_sink_error():
    """Test ok=false responses raise SinkError with the Slack error code."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": False, "error": "invalid_auth"})

    sink = make_sink(handler)

    with pytest.raises(SinkError, match="invalid_auth") as exc_info:
        await sink.create("hello")

    assert exc_info.value.kind == SinkErrorKind.API


@pytest.mark.asyncio
async def test_rate_limited_requests_are_retried():
    """Test rate limited calls are retried until they succeed."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) < 3:
            return httpx.Response(429, headers={"Retry-After": "1"})
        return httpx.Response(200, json={"ok": True, "channel": "C123", "ts": "1.000000"})

    sink = make_sink(handler)
    ref = await sink.create("hello")

    assert ref.ts == "1.000000"
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_rate_limit_waits_for_retry_after():
    """Test the Retry-After header sets the wait before the next attempt."""
    calls = []
    sleeps = []

    async def record_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) == 1:
            return httpx.Response(429, headers={"Retry-After": "7"})
        if len(calls) == 2:
            return httpx.Response(429)
        return httpx.Response(200, json={"ok": True, "channel": "C123", "ts": "1.000000"})

    sink = make_sink(handler, sleep=record_sleep)
    await sink.create("hello")

    assert sleeps[0] == 7.0
    assert len(sleeps) == 2
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_rate_limit_retries_are_bounded():
    """Test rate limiting gives up after max_attempts."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"ok": False, "error": "ratelimited"})

    sink = make_sink(handler, max_attempts=2)

    with pytest.raises(SinkError) as exc_info:
        await sink.create("hello")

    assert exc_info.value.kind == SinkErrorKind.RATE_LIMITED
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_transport_failure_is_not_retried():
    """Test connection errors fail immediately to avoid duplicate posts."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    sink = make_sink(handler)

    with pytest.raises(SinkError) as exc_info:
        await sink.create("hello")

    assert exc_info.value.kind == SinkErrorKind.TRANSPORT
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_timeout_is_reported_as_timeout():
    """Test httpx timeouts map to the timeout kind."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    sink = make_sink(handler)

    with pytest.raises(SinkError) as exc_info:
        await sink.create("hello")

    assert exc_info.value.kind == SinkErrorKind.TIMEOUT


@pytest.mark.asyncio
async def test_missing_ts_is_an_error():
    """Test a post response without ts cannot produce a reference."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": True})

    sink = make_sink(handler)

    with pytest.raises(SinkError, match="lacks ts"):
        await sink.create("hello")
