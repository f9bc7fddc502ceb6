"""Fire-and-forget HTTP/1.1 transport over a raw socket."""

import asyncio
import logging
import ssl
from typing import Dict, Optional, Tuple
from urllib.parse import urlsplit

from ...core.entities import SendRequest

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"http": 80, "https": 443}


def parse_base_url(base_url: str) -> Tuple[str, str, int, str]:
    """
    Split a base URL into scheme, host, port and path prefix.

    Raises:
        ValueError: If the URL is not an absolute http(s) URL
    """
    parts = urlsplit(base_url)
    if parts.scheme not in DEFAULT_PORTS or not parts.hostname:
        raise ValueError(f"Base URL must be an absolute http(s) URL: {base_url}")

    port = parts.port or DEFAULT_PORTS[parts.scheme]
    prefix = parts.path or "/"
    if not prefix.endswith("/"):
        prefix += "/"
    return parts.scheme, parts.hostname, port, prefix


def _safe_header(name: str, value: str) -> str:
    """Render one header line, rejecting names or values that would split it."""
    if not name or ":" in name or any(c in name for c in "\r\n\0 "):
        raise ValueError(f"Invalid HTTP header name: {name!r}")
    if any(c in value for c in "\r\n\0"):
        raise ValueError(f"Newline or NUL in value of HTTP header {name}")
    return f"{name}: {value}"


def build_raw_request(base_url: str, request: SendRequest, headers: Dict[str, str]) -> bytes:
    """
    Serialize a complete HTTP/1.1 POST for ``request``.

    The head is UTF-8 encoded, as aiohttp encodes it, so both dispatch modes
    put the same bytes on the wire for non-ASCII header values.

    Args:
        base_url: Service base URL the request path is relative to
        request: The built send request
        headers: Headers to send besides Host, Content-Length and Connection

    Returns:
        Request line, headers and JSON body as bytes

    Raises:
        ValueError: If the base URL is invalid or a header would split the head
    """
    scheme, host, port, prefix = parse_base_url(base_url)
    body = request.encode_body()

    host_header = host if port == DEFAULT_PORTS[scheme] else f"{host}:{port}"
    lines = [f"POST {prefix}{request.path} HTTP/1.1", f"Host: {host_header}"]
    for name, value in headers.items():
        lines.append(_safe_header(name, str(value)))
    lines.append(f"Content-Length: {len(body)}")
    lines.append("Connection: close")

    head = "\r\n".join(lines) + "\r\n\r\n"
    return head.encode("utf-8") + body


async def fire_and_forget(
    base_url: str,
    data: bytes,
    connect_timeout: float = 5.0,
    ssl_context: Optional[ssl.SSLContext] = None,
) -> None:
    """
    Write ``data`` to the service and close without reading a response.

    The connection is opened with TLS for https URLs. The write is complete
    before the socket is closed: the transport's high-water mark is set to
    zero so ``drain()`` returns only once the buffer is empty. Connection,
    TLS and write failures are logged at debug level and swallowed.
    """
    scheme, host, port, _ = parse_base_url(base_url)
    context = None
    if scheme == "https":
        context = ssl_context or ssl.create_default_context()

    try:
        _reader, writer = await asyncio.wait_for(
            asyncio.open_connection(
                host, port, ssl=context, server_hostname=host if context else None
            ),
            timeout=connect_timeout,
        )
    except (OSError, asyncio.TimeoutError) as e:
        logger.debug(f"Best-effort send to {host}:{port} could not connect: {e}")
        return

    try:
        writer.transport.set_write_buffer_limits(high=0)
        writer.write(data)
        await asyncio.wait_for(writer.drain(), timeout=connect_timeout)
        logger.debug(f"Best-effort send wrote {len(data)} bytes to {host}:{port}")
    except (OSError, asyncio.TimeoutError) as e:
        logger.debug(f"Best-effort send to {host}:{port} failed during write: {e}")
    finally:
        writer.close()
        try:
            await asyncio.wait_for(writer.wait_closed(), timeout=connect_timeout)
        except (OSError, asyncio.TimeoutError) as e:
            logger.debug(f"Best-effort connection to {host}:{port} did not close cleanly: {e}")
