"""
Google Cloud Pub/Sub implementation of the broker capability.
"""

import logging
import os
from datetime import timedelta
from typing import Callable, List, Optional

from google.api_core.exceptions import AlreadyExists, GoogleAPICallError, NotFound
from google.cloud import pubsub_v1
from google.protobuf import duration_pb2

from pubsub_topology.broker.config import BrokerConfig
from pubsub_topology.broker.models import SubscriptionInfo, SubscriptionOptions
from pubsub_topology.common.exceptions import BrokerError

logger = logging.getLogger(__name__)


def _short_name(path: str) -> str:
    """Strip the 'projects/<id>/<kind>/' prefix from a resource path."""
    return path.rsplit("/", 1)[-1]


def _duration_seconds(value) -> int:
    """Read a protobuf Duration that proto-plus may surface as a timedelta."""
    if value is None:
        return 0
    if isinstance(value, timedelta):
        return int(value.total_seconds())
    return int(getattr(value, "seconds", 0))


def _broker_error(action: str, exc: Exception) -> BrokerError:
    message = getattr(exc, "message", None) or str(exc)
    return BrokerError(
        f"Failed to {action}: {message}",
        code=getattr(exc, "code", None),
        details=getattr(exc, "details", None),
    )


class PubSubBrokerClient:
    """Synchronous Pub/Sub client shared by every component in the process."""

    def __init__(self, config: Optional[BrokerConfig] = None):
        """
        Initialize publisher and subscriber clients.

        Args:
            config: Broker configuration, uses default if None
        """
        self.config = config or BrokerConfig()

        if self.config.emulator_host:
            # The client library switches to an insecure emulator channel based on this variable
            os.environ["PUBSUB_EMULATOR_HOST"] = self.config.emulator_host

        self.publisher = pubsub_v1.PublisherClient()
        self.subscriber = pubsub_v1.SubscriberClient()

        logger.info(
            f"PubSub initialized with projectId={self.config.project_id}, apiEndpoint={self.config.api_endpoint}"
        )
        logger.info(f"Using Pub/Sub Emulator: {self.config.uses_emulator}")

    def topic_path(self, topic_name: str) -> str:
        return self.publisher.topic_path(self.config.project_id, topic_name)

    def subscription_path(self, subscription_name: str) -> str:
        return self.subscriber.subscription_path(self.config.project_id, subscription_name)

    def topic_exists(self, topic_name: str) -> bool:
        try:
            self.publisher.get_topic(request={"topic": self.topic_path(topic_name)})
            return True
        except NotFound:
            return False
        except GoogleAPICallError as e:
            raise _broker_error(f"check topic '{topic_name}'", e) from e

    def create_topic(self, topic_name: str) -> None:
        """
        Create a topic.

        A concurrent creator winning the race is not an error.
        """
        try:
            self.publisher.create_topic(request={"name": self.topic_path(topic_name)})
        except AlreadyExists:
            logger.debug(f"Topic {topic_name} was created concurrently")
        except GoogleAPICallError as e:
            raise _broker_error(f"create topic '{topic_name}'", e) from e

    def list_topic_subscriptions(self, topic_name: str) -> List[str]:
        try:
            pager = self.publisher.list_topic_subscriptions(request={"topic": self.topic_path(topic_name)})
            return [_short_name(path) for path in pager]
        except GoogleAPICallError as e:
            raise _broker_error(f"list subscriptions of topic '{topic_name}'", e) from e

    def subscription_exists(self, subscription_name: str) -> bool:
        try:
            self.subscriber.get_subscription(request={"subscription": self.subscription_path(subscription_name)})
            return True
        except NotFound:
            return False
        except GoogleAPICallError as e:
            raise _broker_error(f"check subscription '{subscription_name}'", e) from e

    def create_subscription(
        self, topic_name: str, subscription_name: str, options: Optional[SubscriptionOptions] = None
    ) -> None:
        """
        Create a subscription attached to a topic.

        Args:
            topic_name: Short topic name
            subscription_name: Short subscription name
            options: Creation options; broker defaults are used when None
        """
        request = {
            "name": self.subscription_path(subscription_name),
            "topic": self.topic_path(topic_name),
        }
        if options is not None:
            request["ack_deadline_seconds"] = options.ack_deadline_seconds
            request["message_retention_duration"] = duration_pb2.Duration(seconds=options.message_retention_seconds)
            if options.push_config is not None:
                request["push_config"] = {
                    "push_endpoint": options.push_config.push_endpoint,
                    "attributes": dict(options.push_config.attributes),
                }

        try:
            self.subscriber.create_subscription(request=request)
        except GoogleAPICallError as e:
            raise _broker_error(f"create subscription '{subscription_name}'", e) from e

    def get_subscription(self, subscription_name: str) -> SubscriptionInfo:
        try:
            subscription = self.subscriber.get_subscription(
                request={"subscription": self.subscription_path(subscription_name)}
            )
        except GoogleAPICallError as e:
            raise _broker_error(f"get subscription '{subscription_name}'", e) from e

        push_config = subscription.push_config
        push_endpoint = push_config.push_endpoint if push_config else None
        return SubscriptionInfo(
            name=_short_name(subscription.name),
            topic=_short_name(subscription.topic),
            ack_deadline_seconds=subscription.ack_deadline_seconds,
            message_retention_seconds=_duration_seconds(subscription.message_retention_duration),
            push_endpoint=push_endpoint or None,
            attributes=dict(push_config.attributes) if push_config else {},
        )

    def publish(self, topic_name: str, data: bytes) -> str:
        try:
            future = self.publisher.publish(self.topic_path(topic_name), data)
            return future.result()
        except Exception as e:
            raise _broker_error(f"publish to topic '{topic_name}'", e) from e

    def subscribe(self, subscription_name: str, callback: Callable):
        """
        Open a streaming pull on a subscription.

        Returns:
            StreamingPullFuture whose cancel() detaches the callback
        """
        try:
            return self.subscriber.subscribe(self.subscription_path(subscription_name), callback=callback)
        except GoogleAPICallError as e:
            raise _broker_error(f"subscribe to '{subscription_name}'", e) from e

    def close(self) -> None:
        """Flush pending publishes and close the subscriber transport."""
        self.publisher.stop()
        self.subscriber.close()
        logger.info("PubSub clients closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
