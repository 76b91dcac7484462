"""Redis-backed state store."""

from typing import Any

import redis.asyncio as redis
from loguru import logger
from redis.exceptions import RedisError

from announcer.config import RedisConfig
from announcer.exceptions import StoreError
from announcer.models.state import StateRecord
from announcer.stores.base import StateStore


class RedisStateStore(StateStore):
    """State store keeping one JSON document per announcement identity."""

    def __init__(self, client: Any, default_channel: str = "") -> None:
        """Initialize store.

        Args:
            client: redis.asyncio client with decode_responses enabled
            default_channel: Channel assumed for records stored without one
        """
        self.client = client
        self.default_channel = default_channel

    @classmethod
    def from_config(
        cls, config: RedisConfig, in_cluster: bool, default_channel: str = ""
    ) -> "RedisStateStore":
        """Create store from configuration.

        The connection is opened lazily on first use.

        Args:
            config: Redis configuration
            in_cluster: Whether the service runs inside the NAIS cluster
            default_channel: Channel assumed for records stored without one

        Returns:
            RedisStateStore instance
        """
        client = redis.Redis.from_url(
            config.uri(in_cluster),
            decode_responses=True,
            socket_timeout=config.timeout,
            socket_connect_timeout=config.timeout,
        )
        return cls(client, default_channel=default_channel)

    async def get(self, identity: str) -> StateRecord | None:
        try:
            raw = await self.client.get(identity)
        except RedisError as e:
            raise StoreError(f"Failed getting {identity} from Redis: {e}") from e

        if raw is None:
            return None

        try:
            return StateRecord.from_json(identity, raw, default_channel=self.default_channel)
        except ValueError as e:
            raise StoreError(f"Unreadable record for {identity} in Redis: {e}") from e

    async def put(self, record: StateRecord) -> None:
        try:
            await self.client.set(record.identity, record.to_json())
        except RedisError as e:
            raise StoreError(f"Failed saving {record.identity} to Redis: {e}") from e

        logger.debug(f"Saved {record.identity} to Redis")

    async def close(self) -> None:
        try:
            await self.client.aclose()
        except RedisError as e:
            logger.warning(f"Error closing Redis connection: {e}")
