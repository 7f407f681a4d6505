"""
Unit tests for broker and service configuration.
"""

import pytest

from pubsub_topology.broker.config import BrokerConfig
from pubsub_topology.manager.config import ServiceConfig


@pytest.mark.unit
class TestBrokerConfig:
    """Test BrokerConfig defaults and environment overrides."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PUBSUB_EMULATOR_HOST", raising=False)
        monkeypatch.delenv("PUBSUB_PROJECT_ID", raising=False)

        config = BrokerConfig()

        assert config.project_id == "gcp-pubsub-456020"
        assert config.emulator_host is None
        assert config.api_endpoint is None
        assert config.uses_emulator is False

    def test_environment_overrides(self, mock_env_vars):
        config = BrokerConfig()

        assert config.project_id == "test-project"
        assert config.emulator_host == "localhost:8085"
        assert config.api_endpoint == "http://localhost:8085"
        assert config.uses_emulator is True


@pytest.mark.unit
class TestServiceConfig:
    """Test ServiceConfig defaults and environment overrides."""

    def test_defaults(self):
        config = ServiceConfig()

        assert config.config_path == "config/pubsub-config.json"
        assert config.port == 3000
        assert config.default_topic == "my-topic"
        assert config.default_subscription == "my-subscription"
        assert config.post_publish_delay == 1.0
        assert config.reconcile_on_startup is True

    def test_environment_overrides(self, mock_env_vars):
        config = ServiceConfig()

        assert config.port == 3100
        assert config.post_publish_delay == 0.25
