"""
Activation of log-and-ack consumers on subscriptions.
"""

import asyncio
import logging
from enum import Enum
from typing import Dict, Optional, Tuple

from pubsub_topology.broker.topics import TopicManager
from pubsub_topology.common.exceptions import ActivationError, BrokerError
from pubsub_topology.common.interface import BrokerClient, ReceivedMessage, StreamingPull

logger = logging.getLogger(__name__)


class ActivationState(str, Enum):
    """Lifecycle of a subscription activation."""

    UNINITIALIZED = "uninitialized"
    TOPIC_ENSURED = "topic_ensured"
    SUBSCRIPTION_ENSURED = "subscription_ensured"
    LISTENING = "listening"
    CANCELLED = "cancelled"


class ActivationHandle:
    """A listening consumer. Cancelling it detaches the message and error observers."""

    def __init__(self, topic: str, subscription: str):
        self.topic = topic
        self.subscription = subscription
        self.state = ActivationState.UNINITIALIZED
        self.messages_received = 0
        self.stream_finished = False
        self._stream: Optional[StreamingPull] = None

    @property
    def active(self) -> bool:
        return self.state == ActivationState.LISTENING

    @property
    def consuming(self) -> bool:
        """True while listening on a stream that has not terminated."""
        return self.active and not self.stream_finished

    def on_message(self, message: ReceivedMessage) -> None:
        """Log the payload and acknowledge unconditionally."""
        self.messages_received += 1
        logger.info(f"Received message on {self.subscription}: {message.data.decode('utf-8', errors='replace')}")
        message.ack()

    def on_stream_done(self, stream: StreamingPull) -> None:
        """Log how the stream ended; a broker error leaves the handle state alone."""
        self.stream_finished = True
        if stream.cancelled():
            logger.info(f"Stream for {self.subscription} stopped")
            return
        error = stream.exception()
        if error is not None:
            logger.error(f"Received error on {self.subscription}: {error}")

    def attach(self, stream: StreamingPull) -> None:
        self._stream = stream
        stream.add_done_callback(self.on_stream_done)
        self.state = ActivationState.LISTENING

    def cancel(self) -> None:
        """Detach the observers. Calling it more than once is harmless."""
        if self.state == ActivationState.CANCELLED:
            return
        if self._stream is not None:
            self._stream.cancel()
        self.state = ActivationState.CANCELLED
        logger.info(f"Unsubscribed from {self.subscription}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cancel()

    def __repr__(self) -> str:
        return f"ActivationHandle(topic={self.topic!r}, subscription={self.subscription!r}, state={self.state.value})"


class SubscriptionActivator:
    """Ensures a topic/subscription pair exists and attaches a log-and-ack consumer to it."""

    def __init__(self, broker: BrokerClient, topic_manager: Optional[TopicManager] = None):
        """
        Initialize the activator.

        Args:
            broker: Broker capability
            topic_manager: Shared topic manager, created from broker if None
        """
        self.broker = broker
        self.topic_manager = topic_manager or TopicManager(broker)
        self._handles: Dict[Tuple[str, str], ActivationHandle] = {}
        self._locks: Dict[Tuple[str, str], asyncio.Lock] = {}

    @property
    def handles(self) -> Dict[Tuple[str, str], ActivationHandle]:
        return dict(self._handles)

    async def activate(self, topic_name: str, subscription_name: str) -> ActivationHandle:
        """
        Activate a consumer on a subscription.

        The subscription is created with broker defaults when missing. If a handle
        with a running stream already exists for the pair it is returned as is;
        a handle whose stream terminated is replaced. Activations of the same
        pair run one at a time.

        Args:
            topic_name: Short topic name
            subscription_name: Short subscription name

        Returns:
            ActivationHandle in LISTENING state

        Raises:
            ActivationError: If any broker step fails
        """
        key = (topic_name, subscription_name)
        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            existing = self._handles.get(key)
            if existing is not None and existing.consuming:
                logger.info(f"Subscription {subscription_name} on {topic_name} is already listening")
                return existing
            if existing is not None and existing.active:
                logger.warning(f"Stream for {subscription_name} has terminated, attaching a new consumer")
                existing.cancel()
            return await self._activate(key)

    async def _activate(self, key: Tuple[str, str]) -> ActivationHandle:
        topic_name, subscription_name = key
        handle = ActivationHandle(topic_name, subscription_name)
        try:
            await asyncio.to_thread(self.topic_manager.ensure_topic, topic_name)
            handle.state = ActivationState.TOPIC_ENSURED

            exists = await asyncio.to_thread(self.broker.subscription_exists, subscription_name)
            if not exists:
                logger.info(f"Subscription {subscription_name} does not exist, creating it...")
                await asyncio.to_thread(self.broker.create_subscription, topic_name, subscription_name)
                logger.info(f"Subscription {subscription_name} created successfully")
            handle.state = ActivationState.SUBSCRIPTION_ENSURED

            stream = await asyncio.to_thread(self.broker.subscribe, subscription_name, handle.on_message)
        except BrokerError as e:
            logger.error(f"Subscription error: error={e.message}, code={e.code}, details={e.details}")
            raise ActivationError("Failed to subscribe", details=e.message) from e

        handle.attach(stream)
        self._handles[key] = handle
        logger.info(f"Listening on subscription {subscription_name} of topic {topic_name}")
        return handle

    def deactivate(self, topic_name: str, subscription_name: str) -> bool:
        """
        Cancel the handle for a pair, if any.

        Returns:
            True if a handle was cancelled
        """
        handle = self._handles.pop((topic_name, subscription_name), None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def close(self) -> None:
        """Cancel every live handle."""
        if self._handles:
            logger.info(f"Cancelling {len(self._handles)} subscription handles")
        for handle in list(self._handles.values()):
            handle.cancel()
        self._handles.clear()
        self._locks.clear()
