"""Sendivent client: fluent request building bound to a dispatcher."""

import asyncio
import logging
from typing import TYPE_CHECKING, Optional, Set, Union

from .core.entities import ApiKey, Environment, SendResponse, SendRequestBuilder
from .core.interfaces import NotificationDispatcher
from .providers.dispatchers import DEFAULT_USER_AGENT, HttpDispatcher

if TYPE_CHECKING:
    from .config import Config

logger = logging.getLogger(__name__)


class Sendivent(SendRequestBuilder):
    """
    Client for the Sendivent notification API.

    Configure a notification with the chained setters inherited from
    ``SendRequestBuilder`` and dispatch it in one of three ways:

    * ``await send()`` waits for the service's acknowledgement;
    * ``send_async()`` schedules that same send as an ``asyncio.Task`` and
      returns it immediately;
    * ``await send_best_effort()`` writes the request onto a raw connection
      and closes it without reading a response. Failures are not reported.

    Example:
        client = Sendivent("test_...")
        response = await client.event("welcome").to("user@example.com").send()
    """

    def __init__(
        self,
        api_key: Union[str, ApiKey],
        dispatcher: Optional[NotificationDispatcher] = None,
        *,
        base_url: Optional[str] = None,
        timeout_seconds: float = 30,
        connect_timeout_seconds: float = 5,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        """
        Initialize the client.

        Args:
            api_key: API key starting with ``test_`` (sandbox) or ``live_`` (production)
            dispatcher: Dispatcher to use; an HttpDispatcher is created when omitted
            base_url: Override for the environment's base URL
            timeout_seconds: Total timeout of an awaited send
            connect_timeout_seconds: Connect timeout of a best-effort send
            user_agent: Client identifier sent with every request

        Raises:
            ConfigValidationError: If the API key prefix is invalid
        """
        super().__init__()
        self.api_key = api_key if isinstance(api_key, ApiKey) else ApiKey(api_key)
        self.dispatcher = dispatcher or HttpDispatcher(
            self.api_key,
            base_url=base_url,
            timeout_seconds=timeout_seconds,
            connect_timeout_seconds=connect_timeout_seconds,
            user_agent=user_agent,
        )
        self._background_tasks: Set[asyncio.Task] = set()

    @classmethod
    def from_config(cls, config: "Config") -> "Sendivent":
        """Create a client from loaded configuration."""
        from .factories import ServiceFactory

        return ServiceFactory(config).create_client()

    @property
    def environment(self) -> Environment:
        return self.api_key.environment

    @property
    def base_url(self) -> str:
        return getattr(self.dispatcher, "base_url", self.api_key.base_url)

    async def send(self) -> SendResponse:
        """
        Send the notification and wait for the response.

        Returns:
            SendResponse with success flag, queued deliveries and error details

        Raises:
            ConfigValidationError: If no event name has been set
            DispatchError: If the API request fails
        """
        request = self.build()
        return await self.dispatcher.send_and_await(request)

    def send_async(self) -> "asyncio.Task[SendResponse]":
        """
        Schedule the notification on the running loop and return at once.

        The request is built before scheduling, so configuration errors are
        raised here. Await the returned task to get the response; failures of
        tasks that are never awaited are logged.

        Raises:
            ConfigValidationError: If no event name has been set
            RuntimeError: If called outside a running event loop
        """
        request = self.build()
        task = asyncio.get_running_loop().create_task(self.dispatcher.send_and_await(request))
        self._background_tasks.add(task)
        task.add_done_callback(self._on_background_done)
        return task

    async def send_best_effort(self) -> None:
        """
        Fire the notification without waiting for or reading a response.

        Raises:
            ConfigValidationError: If no event name has been set
        """
        request = self.build()
        await self.dispatcher.send_best_effort(request)

    async def wait_pending(self) -> None:
        """Wait for every background send scheduled by ``send_async()``."""
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)

    @property
    def pending_count(self) -> int:
        return len(self._background_tasks)

    def _on_background_done(self, task: asyncio.Task) -> None:
        self._background_tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Background notification send failed: {error}")

    def __str__(self) -> str:
        return f"Sendivent(environment={self.environment.value}, dispatcher={self.dispatcher})"
