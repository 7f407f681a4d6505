"""
Post-creation notifications for newly created subscriptions.

After the reconciler creates a subscription it hands the result to a
CreationNotifier. The notifier verifies the created subscription on a worker
thread and reports the outcome through a Future, so a failing verification is
visible without holding up or failing the reconciliation pass.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional

from pubsub_topology.broker.models import SubscriptionInfo
from pubsub_topology.common.interface import BrokerClient
from pubsub_topology.topology.models import DeliveryMode, SubscriptionSpec

logger = logging.getLogger(__name__)


@dataclass
class CreationNotice:
    """Outcome of a post-creation notification."""

    topic: str
    subscription: str
    info: SubscriptionInfo
    mismatches: List[str] = field(default_factory=list)

    @property
    def matches_spec(self) -> bool:
        return not self.mismatches


class CreationNotifier:
    """Runs post-creation verification of subscriptions in the background."""

    def __init__(self, broker: BrokerClient, max_workers: int = 1):
        """
        Initialize the notifier.

        Args:
            broker: Broker capability used to fetch subscription metadata
            max_workers: Worker threads available for notifications
        """
        self.broker = broker
        self._executor: Optional[ThreadPoolExecutor] = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="creation-notifier"
        )

    def notify(self, topic_name: str, spec: SubscriptionSpec) -> Future:
        """
        Submit a notification for a subscription that was just created.

        Args:
            topic_name: Topic the subscription was created on
            spec: Declared subscription

        Returns:
            Future resolving to a CreationNotice, or raising the verification error
        """
        if self._executor is None:
            raise RuntimeError("CreationNotifier is closed")

        future = self._executor.submit(self._verify, topic_name, spec)
        future.add_done_callback(lambda f: self._log_outcome(topic_name, spec.name, f))
        return future

    def _verify(self, topic_name: str, spec: SubscriptionSpec) -> CreationNotice:
        info = self.broker.get_subscription(spec.name)
        logger.info(f"Subscription details: {info.to_dict()}")

        mismatches = []
        if spec.delivery_mode == DeliveryMode.PUSH:
            if info.push_endpoint != spec.push_endpoint:
                mismatches.append(f"pushEndpoint {info.push_endpoint!r} != {spec.push_endpoint!r}")
            if info.attributes != spec.attributes:
                mismatches.append(f"attributes {info.attributes!r} != {spec.attributes!r}")
        return CreationNotice(topic=topic_name, subscription=spec.name, info=info, mismatches=mismatches)

    @staticmethod
    def _log_outcome(topic_name: str, subscription_name: str, future: Future) -> None:
        if future.cancelled():
            logger.debug(f"Notification for subscription {subscription_name} was cancelled")
            return
        error = future.exception()
        if error is not None:
            logger.error(f"Post-creation notification failed for {subscription_name} on {topic_name}: {error}")
            return
        notice = future.result()
        if notice.matches_spec:
            logger.info(f"Subscription {subscription_name} on {topic_name} verified")
        else:
            logger.warning(f"Subscription {subscription_name} differs from its declaration: {notice.mismatches}")

    def close(self, wait: bool = True) -> None:
        """Shut down the worker pool, optionally waiting for pending notifications."""
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None
