"""
Models for published messages and publish results.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

import orjson

from pubsub_topology.broker.models import SubscriptionInfo


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T12:00:00.000Z."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class MessageEnvelope:
    """Wire payload wrapping a user message with the time it was published."""

    message: str
    timestamp: str

    @classmethod
    def create(cls, message: str, now: Optional[datetime] = None) -> "MessageEnvelope":
        return cls(message=message, timestamp=utc_timestamp(now))

    def to_bytes(self) -> bytes:
        return orjson.dumps({"message": self.message, "timestamp": self.timestamp})


@dataclass
class PublishReceipt:
    """Result of a publish call."""

    message_id: str
    topic: str
    subscriptions: List[SubscriptionInfo] = field(default_factory=list)
