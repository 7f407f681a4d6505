from __future__ import annotations

from typing import TYPE_CHECKING, Callable, List, Optional, Protocol

if TYPE_CHECKING:
    from pubsub_topology.broker.models import SubscriptionInfo, SubscriptionOptions


class ReceivedMessage(Protocol):
    message_id: str
    data: bytes

    def ack(self) -> None:
        """Acknowledge the message so the broker stops redelivering it."""
        ...


class StreamingPull(Protocol):
    def cancel(self) -> bool:
        """Stop the stream and detach the message callback."""
        ...

    def cancelled(self) -> bool: ...

    def exception(self) -> Optional[BaseException]: ...

    def add_done_callback(self, fn: Callable[["StreamingPull"], None]) -> None:
        """Register a callback invoked when the stream terminates."""
        ...


class BrokerClient(Protocol):
    """Capability over which topics and subscriptions are managed.

    Implementations raise BrokerError for every broker-side failure.
    """

    def topic_path(self, topic_name: str) -> str: ...

    def topic_exists(self, topic_name: str) -> bool: ...

    def create_topic(self, topic_name: str) -> None: ...

    def list_topic_subscriptions(self, topic_name: str) -> List[str]:
        """Returns short subscription names attached to the topic."""
        ...

    def subscription_exists(self, subscription_name: str) -> bool: ...

    def create_subscription(
        self, topic_name: str, subscription_name: str, options: Optional[SubscriptionOptions] = None
    ) -> None: ...

    def get_subscription(self, subscription_name: str) -> SubscriptionInfo: ...

    def publish(self, topic_name: str, data: bytes) -> str:
        """Publishes data and returns the broker-assigned message id."""
        ...

    def subscribe(
        self, subscription_name: str, callback: Callable[[ReceivedMessage], None]
    ) -> StreamingPull: ...

    def close(self) -> None: ...
