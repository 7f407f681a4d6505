"""
Topic management utilities for Pub/Sub.
"""

import logging
from typing import List

from pubsub_topology.broker.models import SubscriptionInfo, TopicHandle
from pubsub_topology.common.exceptions import BrokerError
from pubsub_topology.common.interface import BrokerClient

logger = logging.getLogger(__name__)


class TopicManager:
    """Single create-if-absent path for topics, shared by reconciliation, publishing and activation."""

    def __init__(self, broker: BrokerClient):
        """
        Initialize topic manager.

        Args:
            broker: Broker capability used for every topic operation
        """
        self.broker = broker

    def ensure_topic(self, topic_name: str) -> TopicHandle:
        """
        Ensure a topic exists, creating it if necessary.

        Safe to call repeatedly: an existing topic is left untouched and an
        equal handle is returned.

        Args:
            topic_name: Short topic name

        Returns:
            TopicHandle for the topic

        Raises:
            BrokerError: If the existence check or creation fails
        """
        created = False
        if not self.broker.topic_exists(topic_name):
            logger.info(f"Topic {topic_name} does not exist, creating it...")
            self.broker.create_topic(topic_name)
            created = True
            logger.info(f"Topic {topic_name} created successfully")
        else:
            logger.info(f"Topic {topic_name} already exists")

        try:
            subscriptions = self.broker.list_topic_subscriptions(topic_name)
            logger.info(f"Topic {topic_name} has {len(subscriptions)} subscriptions: {subscriptions}")
        except BrokerError as e:
            logger.warning(f"Could not list subscriptions of topic {topic_name}: {e}")

        return TopicHandle(name=topic_name, path=self.broker.topic_path(topic_name), created=created)

    def describe_subscriptions(self, topic_name: str) -> List[SubscriptionInfo]:
        """
        Fetch metadata for every subscription currently attached to a topic.

        Subscriptions whose metadata cannot be fetched are logged and left out.

        Args:
            topic_name: Short topic name

        Returns:
            List of SubscriptionInfo in broker listing order
        """
        infos = []
        for name in self.broker.list_topic_subscriptions(topic_name):
            try:
                infos.append(self.broker.get_subscription(name))
            except BrokerError as e:
                logger.warning(f"Could not fetch details for subscription {name}: {e}")
        return infos
