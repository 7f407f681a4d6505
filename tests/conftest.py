"""
Shared pytest fixtures and configuration for all tests.
"""

import json

import pytest

from pubsub_topology.broker.topics import TopicManager
from pubsub_topology.manager.config import ServiceConfig
from pubsub_topology.topology.models import TopologyConfig
from tests.utils.mocks import FakeBrokerClient


# ============= Broker Fixtures =============


@pytest.fixture
def fake_broker():
    """Empty in-memory broker."""
    return FakeBrokerClient()


@pytest.fixture
def topic_manager(fake_broker):
    """TopicManager backed by the fake broker."""
    return TopicManager(fake_broker)


# ============= Topology Fixtures =============


@pytest.fixture
def topology_document():
    """Topology document with one pull and one push subscription."""
    return {
        "topics": [
            {
                "name": "orders",
                "subscriptions": [
                    {
                        "name": "orders-audit",
                        "type": "pull",
                        "ackDeadlineSeconds": 10,
                        "messageRetentionDuration": "3600s",
                    },
                    {
                        "name": "orders-webhook",
                        "type": "push",
                        "pushEndpoint": "http://x/y",
                        "ackDeadlineSeconds": 20,
                        "messageRetentionDuration": "600s",
                        "pushConfig": {"attributes": {"k": "v"}},
                    },
                ],
            },
            {"name": "events", "subscriptions": []},
        ]
    }


@pytest.fixture
def topology(topology_document):
    return TopologyConfig.model_validate(topology_document)


@pytest.fixture
def topology_file(tmp_path, topology_document):
    """Topology document written to disk."""
    path = tmp_path / "pubsub-config.json"
    path.write_text(json.dumps(topology_document))
    return path


# ============= Service Fixtures =============


@pytest.fixture
def service_config(topology_file):
    """Service configuration pointing at the temporary topology file, without publish delay."""
    return ServiceConfig(config_path=str(topology_file), post_publish_delay=0)


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Mock environment variables for testing."""
    test_env = {
        "PUBSUB_EMULATOR_HOST": "localhost:8085",
        "PUBSUB_PROJECT_ID": "test-project",
        "PUBSUB_SERVICE_PORT": "3100",
        "PUBSUB_SERVICE_POST_PUBLISH_DELAY": "0.25",
    }

    for key, value in test_env.items():
        monkeypatch.setenv(key, value)

    return test_env


# ============= Pytest Configuration =============


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test (no external dependencies)")
    config.addinivalue_line("markers", "integration: mark test as integration test (requires services)")
