"""Tests for service factory."""

import pytest

from sendivent.client import Sendivent
from sendivent.config import Config
from sendivent.core.entities import Environment
from sendivent.factories.service_factory import ServiceFactory, ServiceFactoryError
from sendivent.providers.dispatchers import HttpDispatcher, NullDispatcher


class TestServiceFactory:
    """Test suite for ServiceFactory."""

    @pytest.fixture
    def basic_config(self):
        """Create a basic configuration for testing."""
        config_data = {
            "api_key": "test_factory_key",
            "client": {
                "timeout_seconds": 12,
                "connect_timeout_seconds": 3,
                "user_agent": "Factory/1.0",
                "base_url": "http://localhost:8080",
            },
            "dispatcher": {"type": "http", "enabled": True},
        }
        return Config(**config_data)

    @pytest.fixture
    def service_factory(self, basic_config):
        """Create service factory instance."""
        return ServiceFactory(basic_config)

    def test_init(self, basic_config):
        factory = ServiceFactory(basic_config)

        assert factory.config == basic_config

    def test_create_http_dispatcher(self, service_factory):
        """Test that client settings flow into the HTTP dispatcher."""
        dispatcher = service_factory.create_dispatcher()

        assert isinstance(dispatcher, HttpDispatcher)
        assert dispatcher.base_url == "http://localhost:8080/"
        assert dispatcher.timeout_seconds == 12
        assert dispatcher.connect_timeout_seconds == 3
        assert dispatcher.user_agent == "Factory/1.0"

    def test_create_null_dispatcher_by_type(self):
        factory = ServiceFactory(Config(dispatcher={"type": "null"}))

        assert isinstance(factory.create_dispatcher(), NullDispatcher)

    def test_create_dispatcher_disabled(self):
        """Test that a disabled dispatcher yields a null dispatcher without a key."""
        factory = ServiceFactory(Config(dispatcher={"type": "http", "enabled": False}))

        assert isinstance(factory.create_dispatcher(), NullDispatcher)

    def test_create_dispatcher_unknown_type(self):
        factory = ServiceFactory(Config(api_key="test_key", dispatcher={"type": "carrier-pigeon"}))

        with pytest.raises(ServiceFactoryError, match="Unknown dispatcher type: carrier-pigeon"):
            factory.create_dispatcher()

    def test_create_dispatcher_missing_key(self):
        factory = ServiceFactory(Config())

        with pytest.raises(ServiceFactoryError, match="API key not configured"):
            factory.create_dispatcher()

    def test_create_dispatcher_invalid_key(self):
        factory = ServiceFactory(Config(api_key="prod_key"))

        with pytest.raises(ServiceFactoryError, match="Invalid Sendivent API key"):
            factory.create_dispatcher()

    def test_create_dispatcher_invalid_base_url(self):
        factory = ServiceFactory(
            Config(api_key="test_key", client={"base_url": "not-a-url"})
        )

        with pytest.raises(ServiceFactoryError, match="Failed to create dispatcher"):
            factory.create_dispatcher()

    def test_create_client(self, service_factory):
        client = service_factory.create_client()

        assert isinstance(client, Sendivent)
        assert isinstance(client.dispatcher, HttpDispatcher)
        assert client.environment == Environment.SANDBOX
        assert client.base_url == "http://localhost:8080/"

    def test_create_client_live_key(self):
        client = ServiceFactory(Config(api_key="live_key")).create_client()

        assert client.environment == Environment.PRODUCTION
        assert client.base_url == "https://api.sendivent.com/"

    def test_create_client_disabled_without_key(self):
        client = ServiceFactory(Config(dispatcher={"enabled": False})).create_client()

        assert isinstance(client.dispatcher, NullDispatcher)
        assert client.environment == Environment.SANDBOX
