"""
Reconciliation of a declarative topology against live Pub/Sub state.

The pass walks topics and their subscriptions strictly in document order and
only ever creates resources. Existing subscriptions are skipped without
comparing their settings to the declaration. A failing subscription is
recorded and the pass moves on to the next one.
"""

import logging
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import List, Optional

from pubsub_topology.broker.models import TopicHandle
from pubsub_topology.broker.topics import TopicManager
from pubsub_topology.common.exceptions import (
    BrokerError,
    ReconcileError,
    ReconcileFailure,
    SubscriptionReconcileError,
    TopicReconcileError,
)
from pubsub_topology.common.interface import BrokerClient
from pubsub_topology.topology.models import SubscriptionSpec, TopicSpec, TopologyConfig
from pubsub_topology.topology.notifications import CreationNotifier

logger = logging.getLogger(__name__)


@dataclass
class ReconcileReport:
    """What a reconciliation pass did."""

    ensured_topics: List[TopicHandle] = field(default_factory=list)
    created_subscriptions: List[str] = field(default_factory=list)
    skipped_subscriptions: List[str] = field(default_factory=list)
    failures: List[ReconcileFailure] = field(default_factory=list)
    notifications: List[Future] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def raise_for_failures(self) -> None:
        """Raise ReconcileError if any topic or subscription failed."""
        if self.failures:
            raise ReconcileError(self.failures)

    def summary(self) -> str:
        return (
            f"{len(self.ensured_topics)} topics ensured, "
            f"{len(self.created_subscriptions)} subscriptions created, "
            f"{len(self.skipped_subscriptions)} skipped, "
            f"{len(self.failures)} failed"
        )


class Reconciler:
    """Brings live topics and subscriptions in line with a TopologyConfig."""

    def __init__(
        self,
        broker: BrokerClient,
        topic_manager: Optional[TopicManager] = None,
        notifier: Optional[CreationNotifier] = None,
    ):
        """
        Initialize the reconciler.

        Args:
            broker: Broker capability
            topic_manager: Shared topic manager, created from broker if None
            notifier: Receives a notification for every created subscription; none are sent if None
        """
        self.broker = broker
        self.topic_manager = topic_manager or TopicManager(broker)
        self.notifier = notifier

    def reconcile(self, topology: TopologyConfig) -> ReconcileReport:
        """
        Run one reconciliation pass.

        Args:
            topology: Declared topology

        Returns:
            ReconcileReport describing created, skipped and failed resources
        """
        report = ReconcileReport()
        logger.info(f"Reconciling {len(topology.topics)} topics")

        for topic_spec in topology.topics:
            self._reconcile_topic(topic_spec, report)

        if report.ok:
            logger.info(f"PubSub configuration initialized successfully: {report.summary()}")
        else:
            logger.warning(f"PubSub configuration initialized with errors: {report.summary()}")
        return report

    def _reconcile_topic(self, topic_spec: TopicSpec, report: ReconcileReport) -> None:
        try:
            handle = self.topic_manager.ensure_topic(topic_spec.name)
        except BrokerError as e:
            logger.error(f"Error ensuring topic {topic_spec.name}: {e}; skipping its subscriptions")
            report.failures.append(TopicReconcileError(topic_spec.name, e))
            return
        report.ensured_topics.append(handle)

        for subscription_spec in topic_spec.subscriptions:
            self._reconcile_subscription(topic_spec.name, subscription_spec, report)

    def _reconcile_subscription(self, topic_name: str, spec: SubscriptionSpec, report: ReconcileReport) -> None:
        try:
            if self.broker.subscription_exists(spec.name):
                logger.info(f"Subscription {spec.name} already exists on topic {topic_name}, skipping")
                report.skipped_subscriptions.append(spec.name)
                return

            options = spec.to_options()
            if options.push_config is not None:
                logger.info(
                    f"Setting push config: pushEndpoint={options.push_config.push_endpoint}, "
                    f"attributes={options.push_config.attributes}"
                )

            logger.info(f"Creating subscription {spec.name} for topic {topic_name}...")
            self.broker.create_subscription(topic_name, spec.name, options)
            logger.info(f"Subscription {spec.name} created successfully with options: {options}")
            report.created_subscriptions.append(spec.name)
        except BrokerError as e:
            logger.error(f"Error creating subscription {spec.name}: {e}")
            report.failures.append(SubscriptionReconcileError(topic_name, spec.name, e))
            return

        self._notify_created(topic_name, spec, report)

    def _notify_created(self, topic_name: str, spec: SubscriptionSpec, report: ReconcileReport) -> None:
        if self.notifier is None:
            return
        try:
            report.notifications.append(self.notifier.notify(topic_name, spec))
        except RuntimeError as e:
            logger.warning(f"Could not send creation notification for {spec.name}: {e}")
