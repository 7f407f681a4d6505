"""
Unit tests for PubSubService wiring.
"""

import pytest

from pubsub_topology.manager.config import ServiceConfig
from pubsub_topology.manager.service import PubSubService
from tests.utils.mocks import FakeBrokerClient


@pytest.mark.unit
class TestPubSubService:
    """Test the service facade."""

    @pytest.mark.asyncio
    async def test_initialize_reconciles_topology(self, fake_broker, service_config):
        service = PubSubService(broker=fake_broker, config=service_config)

        report = await service.initialize()
        await service.close()

        assert report.ok
        assert fake_broker.topics == {"orders", "events"}
        assert set(fake_broker.subscriptions) == {"orders-audit", "orders-webhook"}
        assert service.last_report is report

    @pytest.mark.asyncio
    async def test_initialize_with_missing_config_is_empty(self, fake_broker, tmp_path):
        config = ServiceConfig(config_path=str(tmp_path / "missing.json"), post_publish_delay=0)
        service = PubSubService(broker=fake_broker, config=config)

        report = await service.initialize()
        await service.close()

        assert report.ok
        assert service.topology.topics == []
        assert fake_broker.calls == []

    @pytest.mark.asyncio
    async def test_startup_reconciliation_can_be_disabled(self, fake_broker, topology_file):
        config = ServiceConfig(config_path=str(topology_file), reconcile_on_startup=False)
        service = PubSubService(broker=fake_broker, config=config)

        assert await service.initialize() is None
        assert len(service.topology.topics) == 2
        assert fake_broker.calls == []
        await service.close()

    @pytest.mark.asyncio
    async def test_defaults_applied(self, fake_broker, service_config):
        service = PubSubService(broker=fake_broker, config=service_config)

        receipt = await service.publish(None, "hello")
        handle = await service.subscribe(None, None)
        await service.close()

        assert receipt.topic == "my-topic"
        assert (handle.topic, handle.subscription) == ("my-topic", "my-subscription")
        assert "my-subscription" in fake_broker.subscriptions

    @pytest.mark.asyncio
    async def test_close_releases_resources(self, service_config):
        broker = FakeBrokerClient()
        service = PubSubService(broker=broker, config=service_config)
        handle = await service.subscribe("t", "s")

        async with service:
            pass

        assert broker.closed
        assert not handle.active
