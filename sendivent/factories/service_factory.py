"""Service factory for creating dispatcher and client instances based on configuration."""

import logging

from sendivent.config import Config
from sendivent.core.entities import ApiKey
from sendivent.core.interfaces import NotificationDispatcher
from sendivent.providers.dispatchers import HttpDispatcher, NullDispatcher


logger = logging.getLogger(__name__)


class ServiceFactoryError(Exception):
    """Exception raised by ServiceFactory."""
    pass


class ServiceFactory:
    """Factory for creating service instances based on configuration."""

    def __init__(self, config: Config):
        """
        Initialize service factory with configuration.

        Args:
            config: SDK configuration
        """
        self.config = config

    def create_dispatcher(self) -> NotificationDispatcher:
        """
        Create notification dispatcher based on configuration.

        Returns:
            NotificationDispatcher instance

        Raises:
            ServiceFactoryError: If dispatcher creation fails
        """
        logger.debug(f"Creating notification dispatcher: {self.config.dispatcher.type}")

        if not self.config.dispatcher.enabled:
            logger.info("Notification dispatch is disabled, creating null dispatcher")
            return NullDispatcher()

        dispatcher_type = self.config.dispatcher.type.lower()

        try:
            if dispatcher_type == "null":
                return NullDispatcher()
            elif dispatcher_type == "http":
                return HttpDispatcher(
                    api_key=self._api_key(),
                    base_url=self.config.client.base_url,
                    timeout_seconds=self.config.client.timeout_seconds,
                    connect_timeout_seconds=self.config.client.connect_timeout_seconds,
                    user_agent=self.config.client.user_agent,
                )
            else:
                raise ServiceFactoryError(f"Unknown dispatcher type: {self.config.dispatcher.type}")

        except ServiceFactoryError:
            raise
        except Exception as e:
            raise ServiceFactoryError(f"Failed to create dispatcher: {e}") from e

    def create_client(self):
        """
        Create a Sendivent client bound to the configured dispatcher.

        A disabled dispatcher still needs a well-formed key; a sandbox
        placeholder is used when none is configured.

        Raises:
            ServiceFactoryError: If the key or dispatcher cannot be created
        """
        from sendivent.client import Sendivent

        dispatcher = self.create_dispatcher()
        if self.config.api_key:
            api_key = self._api_key()
        else:
            api_key = ApiKey("test_disabled")
        return Sendivent(api_key, dispatcher)

    def _api_key(self) -> ApiKey:
        if not self.config.api_key:
            raise ServiceFactoryError("Sendivent API key not configured")
        try:
            return ApiKey(self.config.api_key)
        except Exception as e:
            raise ServiceFactoryError(f"Invalid Sendivent API key: {e}") from e
