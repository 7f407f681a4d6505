"""
Value objects exchanged with the Pub/Sub broker.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class TopicHandle:
    """A topic that is known to exist on the broker."""

    name: str
    path: str
    created: bool = field(default=False, compare=False)


@dataclass(frozen=True)
class PushConfig:
    """Push delivery settings forwarded verbatim to the broker."""

    push_endpoint: str
    attributes: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SubscriptionOptions:
    """Options used when creating a subscription."""

    ack_deadline_seconds: int
    message_retention_seconds: int
    push_config: Optional[PushConfig] = None


@dataclass
class SubscriptionInfo:
    """Metadata of a live subscription as reported by the broker."""

    name: str
    topic: str
    ack_deadline_seconds: int = 0
    message_retention_seconds: int = 0
    push_endpoint: Optional[str] = None
    attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def delivery_mode(self) -> str:
        """'push' when the broker calls back an endpoint, 'pull' otherwise."""
        return "push" if self.push_endpoint else "pull"

    def to_dict(self) -> dict:
        """Convert to a dictionary for logging."""
        return {
            "name": self.name,
            "topic": self.topic,
            "delivery_mode": self.delivery_mode,
            "push_endpoint": self.push_endpoint,
            "attributes": self.attributes,
            "ack_deadline_seconds": self.ack_deadline_seconds,
            "message_retention_seconds": self.message_retention_seconds,
        }
