"""
Unit tests for HTTP request body models.
"""

import pytest

from pubsub_topology.manager.models import PublishRequest, SubscribeRequest


@pytest.mark.unit
class TestRequestModels:
    """Test camelCase aliases and unset defaults."""

    def test_publish_request_aliases(self):
        request = PublishRequest.model_validate({"message": "hi", "topicName": "orders"})
        assert request.message == "hi"
        assert request.topic_name == "orders"

    def test_publish_request_defaults_are_unset(self):
        request = PublishRequest.model_validate({})
        assert request.message is None
        assert request.topic_name is None

    def test_subscribe_request_aliases(self):
        request = SubscribeRequest.model_validate({"topicName": "orders", "subscriptionName": "audit"})
        assert (request.topic_name, request.subscription_name) == ("orders", "audit")

    def test_subscribe_request_by_field_name(self):
        request = SubscribeRequest(topic_name="orders")
        assert request.topic_name == "orders"
        assert request.subscription_name is None
