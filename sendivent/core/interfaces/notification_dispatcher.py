"""Notification dispatcher interface."""

from abc import ABC, abstractmethod

from sendivent.core.entities import SendRequest, SendResponse


class NotificationDispatcher(ABC):
    """Abstract interface for delivering built send requests."""

    @abstractmethod
    async def send_and_await(self, request: SendRequest) -> SendResponse:
        """
        Send a request and wait for the service's acknowledgement.

        Args:
            request: The built request to send

        Returns:
            The parsed service response

        Raises:
            DispatchError: If the request fails at the network or HTTP level
        """
        pass

    @abstractmethod
    async def send_best_effort(self, request: SendRequest) -> None:
        """
        Send a request without reading any response.

        Delivery failures are not reported to the caller.

        Args:
            request: The built request to send
        """
        pass
