"""
Pydantic models for HTTP request bodies.
"""

from typing import Optional

from pydantic import BaseModel, Field


class PublishRequest(BaseModel):
    """Body of POST /publish."""

    message: Optional[str] = Field(None, description="Message text to publish")
    topic_name: Optional[str] = Field(None, alias="topicName", description="Target topic, defaults to 'my-topic'")

    model_config = {"populate_by_name": True}


class SubscribeRequest(BaseModel):
    """Body of POST /subscribe."""

    topic_name: Optional[str] = Field(None, alias="topicName", description="Topic, defaults to 'my-topic'")
    subscription_name: Optional[str] = Field(
        None, alias="subscriptionName", description="Subscription, defaults to 'my-subscription'"
    )

    model_config = {"populate_by_name": True}
