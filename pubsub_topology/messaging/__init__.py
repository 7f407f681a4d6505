"""
Messaging module: publishing envelopes and activating subscription consumers.
"""

from .activator import ActivationHandle, ActivationState, SubscriptionActivator
from .models import MessageEnvelope, PublishReceipt
from .publisher import Publisher

__all__ = [
    "ActivationHandle",
    "ActivationState",
    "MessageEnvelope",
    "PublishReceipt",
    "Publisher",
    "SubscriptionActivator",
]
