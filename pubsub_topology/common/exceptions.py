"""Custom exceptions for the pubsub_topology package."""

from typing import Any, List, Optional


class ValidationError(ValueError):
    """Raised when caller input is rejected before any broker interaction."""

    pass


class BrokerError(Exception):
    """Raised when a Pub/Sub call fails (existence check, create, publish or metadata fetch)."""

    def __init__(self, message: str, code: Optional[Any] = None, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details


class ConfigLoadError(Exception):
    """Raised when the topology document cannot be read, parsed or validated."""

    pass


class PublishError(Exception):
    """Raised when a publish request fails on the broker side."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ActivationError(Exception):
    """Raised when a subscription cannot be activated."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ReconcileFailure(Exception):
    """Base for a topic or subscription that failed during a reconciliation pass."""

    def __init__(self, message: str, topic: str, cause: Exception):
        super().__init__(message)
        self.topic = topic
        self.cause = cause


class TopicReconcileError(ReconcileFailure):
    """A topic could not be ensured, so none of its subscriptions were attempted."""

    def __init__(self, topic: str, cause: Exception):
        super().__init__(f"Failed to reconcile topic '{topic}': {cause}", topic, cause)


class SubscriptionReconcileError(ReconcileFailure):
    """A single subscription failed during a reconciliation pass."""

    def __init__(self, topic: str, subscription: str, cause: Exception):
        message = f"Failed to reconcile subscription '{subscription}' on topic '{topic}': {cause}"
        super().__init__(message, topic, cause)
        self.subscription = subscription


class ReconcileError(Exception):
    """Raised on demand when a reconciliation pass recorded failures."""

    def __init__(self, failures: List[ReconcileFailure]):
        super().__init__(f"Reconciliation finished with {len(failures)} failure(s)")
        self.failures = failures
