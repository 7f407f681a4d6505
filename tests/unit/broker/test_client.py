"""
Unit tests for the Pub/Sub broker client.
"""

import os
from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest
from google.api_core.exceptions import AlreadyExists, NotFound, ServiceUnavailable
from google.pubsub_v1.types import PushConfig as ProtoPushConfig
from google.pubsub_v1.types import Subscription

from pubsub_topology.broker.client import PubSubBrokerClient
from pubsub_topology.broker.config import BrokerConfig
from pubsub_topology.broker.models import PushConfig, SubscriptionOptions
from pubsub_topology.common.exceptions import BrokerError


@pytest.fixture
def mock_pubsub():
    """Patch the google-cloud-pubsub module used by the client."""
    with patch("pubsub_topology.broker.client.pubsub_v1") as module:
        publisher = MagicMock()
        subscriber = MagicMock()
        publisher.topic_path.side_effect = lambda project, topic: f"projects/{project}/topics/{topic}"
        subscriber.subscription_path.side_effect = lambda project, sub: f"projects/{project}/subscriptions/{sub}"
        module.PublisherClient.return_value = publisher
        module.SubscriberClient.return_value = subscriber
        yield module


@pytest.fixture
def client(mock_pubsub, monkeypatch):
    monkeypatch.delenv("PUBSUB_EMULATOR_HOST", raising=False)
    return PubSubBrokerClient(BrokerConfig(project_id="p1"))


@pytest.mark.unit
class TestPubSubBrokerClient:
    """Test PubSubBrokerClient."""

    def test_emulator_host_exported_for_client_library(self, mock_pubsub, monkeypatch):
        monkeypatch.delenv("PUBSUB_EMULATOR_HOST", raising=False)

        PubSubBrokerClient(BrokerConfig(project_id="p1", emulator_host="localhost:8085"))

        assert os.environ["PUBSUB_EMULATOR_HOST"] == "localhost:8085"

    def test_topic_exists(self, client):
        assert client.topic_exists("orders") is True
        client.publisher.get_topic.assert_called_once_with(request={"topic": "projects/p1/topics/orders"})

    def test_topic_not_found(self, client):
        client.publisher.get_topic.side_effect = NotFound("missing")
        assert client.topic_exists("orders") is False

    def test_topic_check_error_wrapped(self, client):
        client.publisher.get_topic.side_effect = ServiceUnavailable("down")

        with pytest.raises(BrokerError) as exc_info:
            client.topic_exists("orders")

        assert exc_info.value.code == 503
        assert "down" in exc_info.value.message

    def test_create_topic_race_is_not_an_error(self, client):
        client.publisher.create_topic.side_effect = AlreadyExists("exists")
        client.create_topic("orders")

    def test_list_topic_subscriptions_returns_short_names(self, client):
        client.publisher.list_topic_subscriptions.return_value = iter(
            ["projects/p1/subscriptions/a", "projects/p1/subscriptions/b"]
        )
        assert client.list_topic_subscriptions("orders") == ["a", "b"]

    def test_subscription_exists(self, client):
        client.subscriber.get_subscription.side_effect = NotFound("missing")
        assert client.subscription_exists("a") is False

    def test_create_subscription_with_push_options(self, client):
        options = SubscriptionOptions(
            ack_deadline_seconds=20,
            message_retention_seconds=600,
            push_config=PushConfig(push_endpoint="http://x/y", attributes={"k": "v"}),
        )

        client.create_subscription("orders", "hook", options)

        request = client.subscriber.create_subscription.call_args.kwargs["request"]
        assert request["name"] == "projects/p1/subscriptions/hook"
        assert request["topic"] == "projects/p1/topics/orders"
        assert request["ack_deadline_seconds"] == 20
        assert request["message_retention_duration"].seconds == 600
        assert request["push_config"] == {"push_endpoint": "http://x/y", "attributes": {"k": "v"}}

    def test_create_subscription_with_broker_defaults(self, client):
        client.create_subscription("orders", "plain")

        request = client.subscriber.create_subscription.call_args.kwargs["request"]
        assert set(request) == {"name", "topic"}

    def test_create_subscription_error_wrapped(self, client):
        client.subscriber.create_subscription.side_effect = AlreadyExists("exists")

        with pytest.raises(BrokerError):
            client.create_subscription("orders", "plain")

    def test_get_subscription(self, client):
        client.subscriber.get_subscription.return_value = Subscription(
            name="projects/p1/subscriptions/hook",
            topic="projects/p1/topics/orders",
            ack_deadline_seconds=20,
            message_retention_duration=timedelta(seconds=600),
            push_config=ProtoPushConfig(push_endpoint="http://x/y", attributes={"k": "v"}),
        )

        info = client.get_subscription("hook")

        assert info.name == "hook"
        assert info.topic == "orders"
        assert info.ack_deadline_seconds == 20
        assert info.message_retention_seconds == 600
        assert info.push_endpoint == "http://x/y"
        assert info.attributes == {"k": "v"}
        assert info.delivery_mode == "push"

    def test_get_pull_subscription(self, client):
        client.subscriber.get_subscription.return_value = Subscription(
            name="projects/p1/subscriptions/audit", topic="projects/p1/topics/orders", ack_deadline_seconds=10
        )

        info = client.get_subscription("audit")

        assert info.push_endpoint is None
        assert info.attributes == {}
        assert info.delivery_mode == "pull"

    def test_publish_returns_message_id(self, client):
        client.publisher.publish.return_value.result.return_value = "42"

        assert client.publish("orders", b"data") == "42"
        client.publisher.publish.assert_called_once_with("projects/p1/topics/orders", b"data")

    def test_publish_failure_wrapped(self, client):
        client.publisher.publish.return_value.result.side_effect = ServiceUnavailable("down")

        with pytest.raises(BrokerError):
            client.publish("orders", b"data")

    def test_subscribe(self, client):
        callback = MagicMock()

        stream = client.subscribe("audit", callback)

        assert stream is client.subscriber.subscribe.return_value
        client.subscriber.subscribe.assert_called_once_with("projects/p1/subscriptions/audit", callback=callback)

    def test_close(self, client):
        client.close()

        client.publisher.stop.assert_called_once()
        client.subscriber.close.assert_called_once()
