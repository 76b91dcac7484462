"""Persisted reconciliation state."""

import json
from dataclasses import dataclass


@dataclass(frozen=True)
class MessageRef:
    """Reference to a posted chat message."""

    channel: str
    ts: str


@dataclass(frozen=True)
class StateRecord:
    """Last-seen fingerprint and message reference for one announcement."""

    identity: str
    fingerprint: str
    message_ref: MessageRef

    def to_json(self) -> str:
        """Serialize record for the key-value store.

        Returns:
            JSON document with hash, timestamp and channel keys
        """
        return json.dumps(
            {
                "hash": self.fingerprint,
                "timestamp": self.message_ref.ts,
                "channel": self.message_ref.channel,
            }
        )

    @classmethod
    def from_json(cls, identity: str, raw: str, default_channel: str = "") -> "StateRecord":
        """Deserialize a stored record.

        Records written without a channel use default_channel.

        Args:
            identity: Announcement identity the record is stored under
            raw: Stored JSON document
            default_channel: Channel to assume when the record has none

        Returns:
            StateRecord instance

        Raises:
            ValueError: If the document is not a valid record
        """
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

        fingerprint = data.get("hash")
        ts = data.get("timestamp")
        if not isinstance(fingerprint, str) or not isinstance(ts, str) or not ts:
            raise ValueError("Record lacks hash/timestamp")

        channel = data.get("channel") or default_channel
        return cls(
            identity=identity,
            fingerprint=fingerprint,
            message_ref=MessageRef(channel=channel, ts=ts),
        )
