"""HTTP dispatcher for the Sendivent API."""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from ...core.entities import ApiKey, SendRequest, SendResponse
from ...core.interfaces import NotificationDispatcher
from ..exceptions import DispatchError
from .raw_http import build_raw_request, fire_and_forget, parse_base_url

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Sendivent-Python/1.0"


class HttpDispatcher(NotificationDispatcher):
    """
    Dispatcher that talks to the Sendivent HTTP API.

    Awaited sends go through aiohttp with a single attempt and a bounded
    total timeout. Best-effort sends bypass the HTTP client and write the
    request straight onto a socket, never reading the response.
    """

    def __init__(
        self,
        api_key: ApiKey,
        base_url: Optional[str] = None,
        timeout_seconds: float = 30,
        connect_timeout_seconds: float = 5,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        """
        Initialize HTTP dispatcher.

        Args:
            api_key: Validated API key; its prefix selects the environment
            base_url: Override for the environment's base URL
            timeout_seconds: Total timeout of an awaited send
            connect_timeout_seconds: Connect timeout of a best-effort send
            user_agent: Client identifier sent with every request

        Raises:
            DispatchError: If the base URL is not an absolute http(s) URL or
                the user agent contains a line break
        """
        self.api_key = api_key
        self.base_url = base_url or api_key.base_url
        self.timeout_seconds = timeout_seconds
        self.connect_timeout_seconds = connect_timeout_seconds
        self.user_agent = user_agent

        try:
            parse_base_url(self.base_url)
        except ValueError as e:
            raise DispatchError(str(e)) from e

        if any(c in user_agent for c in "\r\n\0"):
            raise DispatchError("User agent must not contain CR, LF or NUL")

        if not self.base_url.endswith("/"):
            self.base_url += "/"

    def _get_headers(self, request: SendRequest) -> Dict[str, str]:
        """
        Get HTTP headers for a request.

        Returns:
            Fixed client headers plus the request's own headers
        """
        headers = {
            "Authorization": self.api_key.authorization_header,
            "Content-Type": "application/json",
            "User-Agent": self.user_agent,
        }
        headers.update(request.headers)
        return headers

    def url_for(self, request: SendRequest) -> str:
        return f"{self.base_url}{request.path}"

    async def send_and_await(self, request: SendRequest) -> SendResponse:
        """
        POST the request and parse the acknowledgement.

        Args:
            request: The built request to send

        Returns:
            SendResponse parsed from the JSON body

        Raises:
            DispatchError: On connection errors, timeouts, non-2xx statuses or
                a body that is not a valid response object
        """
        url = self.url_for(request)
        logger.debug(f"Sending {request.path} to {self.base_url}")

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    url,
                    data=request.encode_body(),
                    headers=self._get_headers(request),
                    timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                ) as response:

                    if response.status < 200 or response.status >= 300:
                        response_text = await response.text()
                        logger.warning(
                            f"Sendivent returned HTTP {response.status} for {request.path}: {response_text}"
                        )
                        raise DispatchError(
                            f"Sendivent API request failed: HTTP {response.status}",
                            status=response.status,
                            body=response_text,
                        )

                    body: Any = await response.json(content_type=None)

        except DispatchError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Sendivent API request to {request.path} failed: {e}")
            raise DispatchError(f"Sendivent API request failed: {e}") from e

        try:
            result = SendResponse.from_dict(body)
        except ValueError as e:
            raise DispatchError(f"Sendivent API returned an invalid response: {e}") from e

        if result.is_success():
            logger.info(f"Notification {request.path} accepted")
        else:
            logger.warning(f"Notification {request.path} rejected: {result.error}")

        return result

    async def send_best_effort(self, request: SendRequest) -> None:
        """
        Write the request onto a raw connection and return.

        Nothing is read back and connection failures are not raised.

        Raises:
            DispatchError: If the request cannot be serialized, before any
                connection is opened
        """
        try:
            data = build_raw_request(self.base_url, request, self._get_headers(request))
        except ValueError as e:
            raise DispatchError(f"Cannot build best-effort request: {e}") from e

        await fire_and_forget(self.base_url, data, connect_timeout=self.connect_timeout_seconds)

    def __str__(self) -> str:
        return f"HttpDispatcher(url={self.base_url}, key={self.api_key})"
