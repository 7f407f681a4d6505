"""
Publisher that wraps messages in an envelope and relays them to a topic.
"""

import asyncio
import logging
from typing import List, Optional

from pubsub_topology.broker.models import SubscriptionInfo
from pubsub_topology.broker.topics import TopicManager
from pubsub_topology.common.exceptions import BrokerError, PublishError, ValidationError
from pubsub_topology.common.interface import BrokerClient
from pubsub_topology.messaging.models import MessageEnvelope, PublishReceipt

logger = logging.getLogger(__name__)


class Publisher:
    """Publishes envelopes to Pub/Sub topics and reports per-subscription delivery modes."""

    def __init__(
        self,
        broker: BrokerClient,
        topic_manager: Optional[TopicManager] = None,
        post_publish_delay: float = 1.0,
    ):
        """
        Initialize the publisher.

        Args:
            broker: Broker capability
            topic_manager: Shared topic manager, created from broker if None
            post_publish_delay: Seconds to wait after publishing so an emulator can push the
                message before the caller gets its response
        """
        self.broker = broker
        self.topic_manager = topic_manager or TopicManager(broker)
        self.post_publish_delay = post_publish_delay

    async def publish(self, topic_name: str, message: Optional[str]) -> PublishReceipt:
        """
        Publish a message to a topic, creating the topic if needed.

        Args:
            topic_name: Short topic name
            message: Message text, must be non-empty

        Returns:
            PublishReceipt with the broker-assigned message id

        Raises:
            ValidationError: If message is empty; no broker call is made
            PublishError: If ensuring the topic or publishing fails
        """
        if not message:
            raise ValidationError("Message is required")

        envelope = MessageEnvelope.create(message)
        logger.info(f"Publishing to topic {topic_name}: {envelope}")

        try:
            await asyncio.to_thread(self.topic_manager.ensure_topic, topic_name)
            logger.info("Topic exists, publishing message...")
            message_id = await asyncio.to_thread(self.broker.publish, topic_name, envelope.to_bytes())
        except BrokerError as e:
            logger.error(f"Detailed publish error: error={e.message}, code={e.code}, details={e.details}")
            raise PublishError("Failed to publish message", details=e.message) from e

        logger.info(f"Message published successfully with ID: {message_id}")

        subscriptions = await asyncio.to_thread(self._report_delivery_modes, topic_name)

        if self.post_publish_delay > 0:
            await asyncio.sleep(self.post_publish_delay)

        return PublishReceipt(message_id=message_id, topic=topic_name, subscriptions=subscriptions)

    def _report_delivery_modes(self, topic_name: str) -> List[SubscriptionInfo]:
        """Log delivery details of every subscription on the topic. Never raises."""
        try:
            subscriptions = self.topic_manager.describe_subscriptions(topic_name)
        except BrokerError as e:
            logger.warning(f"Could not list subscriptions of {topic_name} after publish: {e}")
            return []

        for info in subscriptions:
            logger.info(f"Subscription details: {info.to_dict()}")
            if info.delivery_mode == "push":
                logger.info(
                    f"This is a push subscription. The broker should attempt to push to: {info.push_endpoint} "
                    f"(attributes={info.attributes})"
                )
        return subscriptions
