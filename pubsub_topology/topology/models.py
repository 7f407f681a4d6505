"""
Pydantic models for the declarative topology document.
"""

import re
from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from pubsub_topology.broker.models import PushConfig, SubscriptionOptions

_DURATION_PATTERN = re.compile(r"^(\d+)s$")


class DeliveryMode(str, Enum):
    """How the broker hands messages to a consumer."""

    PUSH = "push"
    PULL = "pull"


class PushConfigSpec(BaseModel):
    """Optional push settings of a subscription."""

    attributes: Optional[Dict[str, str]] = Field(None, description="Push attributes forwarded verbatim")

    model_config = {"frozen": True}


class SubscriptionSpec(BaseModel):
    """Declared subscription of a topic."""

    name: str = Field(..., min_length=1, description="Subscription name, unique within its topic")
    delivery_mode: DeliveryMode = Field(..., alias="type", description="Delivery mode: 'push' or 'pull'")
    ack_deadline_seconds: int = Field(
        ..., alias="ackDeadlineSeconds", gt=0, description="Seconds a consumer has to ack before redelivery"
    )
    message_retention_duration: int = Field(
        ...,
        alias="messageRetentionDuration",
        ge=0,
        description="Retention in seconds, written as '<integer>s' in the document",
    )
    push_endpoint: Optional[str] = Field(None, alias="pushEndpoint", description="Endpoint for push delivery")
    push_config: Optional[PushConfigSpec] = Field(None, alias="pushConfig", description="Extra push settings")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("message_retention_duration", mode="before")
    @classmethod
    def parse_duration(cls, v: Union[str, int]) -> int:
        """Parse '600s' into 600."""
        if isinstance(v, bool):
            raise ValueError(f"Invalid duration: {v!r}")
        if isinstance(v, int):
            return v
        if isinstance(v, str):
            match = _DURATION_PATTERN.match(v.strip())
            if match:
                return int(match.group(1))
        raise ValueError(f"Invalid duration: {v!r}. Expected '<integer>s', e.g. '600s'")

    @model_validator(mode="after")
    def validate_push_endpoint(self) -> "SubscriptionSpec":
        """Push subscriptions need somewhere to push to."""
        if self.delivery_mode == DeliveryMode.PUSH and not self.push_endpoint:
            raise ValueError(f"Push subscription '{self.name}' requires pushEndpoint")
        return self

    @property
    def attributes(self) -> Dict[str, str]:
        if self.push_config is None or self.push_config.attributes is None:
            return {}
        return dict(self.push_config.attributes)

    def to_options(self) -> SubscriptionOptions:
        """
        Build broker creation options.

        Push configuration is attached only to push subscriptions with an endpoint.

        Returns:
            SubscriptionOptions for create_subscription
        """
        push_config = None
        if self.delivery_mode == DeliveryMode.PUSH and self.push_endpoint:
            push_config = PushConfig(push_endpoint=self.push_endpoint, attributes=self.attributes)
        return SubscriptionOptions(
            ack_deadline_seconds=self.ack_deadline_seconds,
            message_retention_seconds=self.message_retention_duration,
            push_config=push_config,
        )


class TopicSpec(BaseModel):
    """Declared topic and its subscriptions."""

    name: str = Field(..., min_length=1, description="Topic name")
    subscriptions: List[SubscriptionSpec] = Field(default_factory=list, description="Subscriptions, in order")

    model_config = {"frozen": True}

    def duplicate_subscription_names(self) -> List[str]:
        seen = set()
        duplicates = []
        for subscription in self.subscriptions:
            if subscription.name in seen and subscription.name not in duplicates:
                duplicates.append(subscription.name)
            seen.add(subscription.name)
        return duplicates


class TopologyConfig(BaseModel):
    """Root of the declarative topology: topics in reconciliation order."""

    topics: List[TopicSpec] = Field(default_factory=list, description="Topics, in order")

    model_config = {"frozen": True}

    @classmethod
    def empty(cls) -> "TopologyConfig":
        return cls(topics=[])

    def duplicate_topic_names(self) -> List[str]:
        """Names that appear more than once, in first-repeat order."""
        seen = set()
        duplicates = []
        for topic in self.topics:
            if topic.name in seen and topic.name not in duplicates:
                duplicates.append(topic.name)
            seen.add(topic.name)
        return duplicates
