"""
Service layer wiring the broker client to reconciliation, publishing and activation.

One broker client is created per process and injected into every component.
"""

import asyncio
import logging
from typing import Optional

from pubsub_topology.broker.client import PubSubBrokerClient
from pubsub_topology.broker.config import BrokerConfig
from pubsub_topology.broker.topics import TopicManager
from pubsub_topology.common.interface import BrokerClient
from pubsub_topology.manager.config import ServiceConfig
from pubsub_topology.messaging.activator import ActivationHandle, SubscriptionActivator
from pubsub_topology.messaging.models import PublishReceipt
from pubsub_topology.messaging.publisher import Publisher
from pubsub_topology.topology.loader import load_topology_or_empty
from pubsub_topology.topology.models import TopologyConfig
from pubsub_topology.topology.notifications import CreationNotifier
from pubsub_topology.topology.reconciler import ReconcileReport, Reconciler

logger = logging.getLogger(__name__)


class PubSubService:
    """Facade used by the HTTP surface."""

    def __init__(
        self,
        broker: Optional[BrokerClient] = None,
        config: Optional[ServiceConfig] = None,
        broker_config: Optional[BrokerConfig] = None,
    ):
        """
        Initialize the service.

        Args:
            broker: Broker capability; a PubSubBrokerClient is created if None
            config: Service configuration, uses default if None
            broker_config: Broker configuration for the default client, uses default if None
        """
        self.config = config or ServiceConfig()
        self.broker = broker or PubSubBrokerClient(broker_config)
        self.topic_manager = TopicManager(self.broker)
        self.notifier = CreationNotifier(self.broker)
        self.reconciler = Reconciler(self.broker, self.topic_manager, self.notifier)
        self.publisher = Publisher(self.broker, self.topic_manager, self.config.post_publish_delay)
        self.activator = SubscriptionActivator(self.broker, self.topic_manager)
        self.topology = TopologyConfig.empty()
        self.last_report: Optional[ReconcileReport] = None
        logger.info("PubSubService initialized.")

    async def initialize(self) -> Optional[ReconcileReport]:
        """
        Load the topology document and reconcile it.

        Returns:
            ReconcileReport, or None when startup reconciliation is disabled
        """
        self.topology = load_topology_or_empty(self.config.config_path)
        if not self.config.reconcile_on_startup:
            logger.info("Startup reconciliation disabled")
            return None
        return await self.reconcile()

    async def reconcile(self, topology: Optional[TopologyConfig] = None) -> ReconcileReport:
        """Run a reconciliation pass off the event loop."""
        topology = topology or self.topology
        self.last_report = await asyncio.to_thread(self.reconciler.reconcile, topology)
        return self.last_report

    async def publish(self, topic_name: Optional[str], message: Optional[str]) -> PublishReceipt:
        if topic_name is None:
            topic_name = self.config.default_topic
        return await self.publisher.publish(topic_name, message)

    async def subscribe(self, topic_name: Optional[str], subscription_name: Optional[str]) -> ActivationHandle:
        if topic_name is None:
            topic_name = self.config.default_topic
        if subscription_name is None:
            subscription_name = self.config.default_subscription
        return await self.activator.activate(topic_name, subscription_name)

    async def close(self) -> None:
        """Detach consumers, drain notifications and close the broker client."""
        self.activator.close()
        await asyncio.to_thread(self.notifier.close)
        self.broker.close()
        logger.info("PubSubService closed")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
