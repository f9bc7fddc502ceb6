"""Null dispatcher for disabled delivery."""

import logging

from ...core.entities import SendRequest, SendResponse
from ...core.interfaces import NotificationDispatcher

logger = logging.getLogger(__name__)


class NullDispatcher(NotificationDispatcher):
    """Dispatcher that accepts every request and sends nothing."""

    def __init__(self):
        self.name = "NullDispatcher"

    async def send_and_await(self, request: SendRequest) -> SendResponse:
        """
        Send request (no-op).

        Returns:
            A successful response without delivery data
        """
        logger.debug(f"NullDispatcher: Would send '{request.path}' (dispatch disabled)")
        return SendResponse(success=True, message="Dispatch disabled")

    async def send_best_effort(self, request: SendRequest) -> None:
        logger.debug(f"NullDispatcher: Would fire '{request.path}' (dispatch disabled)")

    def __str__(self) -> str:
        return "NullDispatcher(disabled)"
