"""
Broker module: Pub/Sub client, connection settings and topic management.
"""

from .client import PubSubBrokerClient
from .config import BrokerConfig
from .models import PushConfig, SubscriptionInfo, SubscriptionOptions, TopicHandle
from .topics import TopicManager

__all__ = [
    "BrokerConfig",
    "PubSubBrokerClient",
    "PushConfig",
    "SubscriptionInfo",
    "SubscriptionOptions",
    "TopicHandle",
    "TopicManager",
]
