"""Unit tests for the fire-and-forget raw HTTP transport."""

import asyncio
import json
import time
from unittest.mock import patch

import pytest

from sendivent import DispatchError, Sendivent
from sendivent.core.entities import SendRequest
from sendivent.providers.dispatchers.raw_http import (
    build_raw_request,
    fire_and_forget,
    parse_base_url,
)


def _split_raw_request(data: bytes):
    head, _, body = data.partition(b"\r\n\r\n")
    lines = head.decode("utf-8").split("\r\n")
    headers = dict(line.split(": ", 1) for line in lines[1:])
    return lines[0], headers, body


class CapturingServer:
    """Local TCP server that stores everything a client writes until EOF."""

    def __init__(self):
        self.received = asyncio.Queue()
        self.server = None

    async def start(self) -> int:
        self.server = await asyncio.start_server(self._handle, "127.0.0.1", 0)
        return self.server.sockets[0].getsockname()[1]

    async def _handle(self, reader, writer):
        data = await reader.read()
        await self.received.put(data)
        writer.close()

    async def stop(self):
        self.server.close()
        await self.server.wait_closed()


class TestParseBaseUrl:
    """Tests for base URL parsing."""

    def test_https_default_port(self):
        assert parse_base_url("https://api.sendivent.com/") == (
            "https", "api.sendivent.com", 443, "/"
        )

    def test_http_explicit_port_and_path(self):
        assert parse_base_url("http://127.0.0.1:8080/v1") == (
            "http", "127.0.0.1", 8080, "/v1/"
        )

    def test_missing_path_defaults_to_root(self):
        assert parse_base_url("https://api.sendivent.com")[3] == "/"

    @pytest.mark.parametrize("url", ["api.sendivent.com", "ftp://host/", "https:///path"])
    def test_invalid_urls_raise(self, url):
        with pytest.raises(ValueError):
            parse_base_url(url)


class TestBuildRawRequest:
    """Tests for raw HTTP/1.1 request serialization."""

    def test_request_line_and_headers(self, welcome_request):
        """Test a complete, well-formed HTTP/1.1 request."""
        data = build_raw_request(
            "https://api-sandbox.sendivent.com/",
            welcome_request,
            {
                "Authorization": "Bearer test_abc",
                "Content-Type": "application/json",
                "User-Agent": "Sendivent-Python/1.0",
                "X-Idempotency-Key": "order-12345",
            },
        )

        request_line, headers, body = _split_raw_request(data)

        assert request_line == "POST /send/welcome HTTP/1.1"
        assert headers["Host"] == "api-sandbox.sendivent.com"
        assert headers["Authorization"] == "Bearer test_abc"
        assert headers["Content-Type"] == "application/json"
        assert headers["User-Agent"] == "Sendivent-Python/1.0"
        assert headers["X-Idempotency-Key"] == "order-12345"
        assert headers["Connection"] == "close"
        assert int(headers["Content-Length"]) == len(body)
        assert json.loads(body) == welcome_request.body

    def test_host_header_includes_non_default_port(self, welcome_request):
        data = build_raw_request("http://localhost:8080/api/", welcome_request, {})
        request_line, headers, _ = _split_raw_request(data)

        assert request_line == "POST /api/send/welcome HTTP/1.1"
        assert headers["Host"] == "localhost:8080"

    def test_content_length_counts_utf8_bytes(self):
        request = SendRequest(path="send/welcome", body={"payload": {"name": "Åsa 🚀"}})
        data = build_raw_request("https://api.sendivent.com/", request, {})
        _, headers, body = _split_raw_request(data)

        assert int(headers["Content-Length"]) == len(body)
        assert len(body) > len(body.decode("utf-8"))

    def test_non_ascii_header_value_is_utf8_encoded(self, welcome_request):
        data = build_raw_request(
            "https://api.sendivent.com/", welcome_request, {"X-Idempotency-Key": "заказ-1"}
        )

        assert "X-Idempotency-Key: заказ-1\r\n".encode("utf-8") in data
        _, headers, _ = _split_raw_request(data)
        assert headers["X-Idempotency-Key"] == "заказ-1"

    @pytest.mark.parametrize(
        "value", ["k\r\nX-Injected: 1", "k\nX-Injected: 1", "k\rx", "k\0x"]
    )
    def test_line_break_in_header_value_raises(self, welcome_request, value):
        """Test that a header value cannot add lines to the request head."""
        with pytest.raises(ValueError, match="X-Idempotency-Key"):
            build_raw_request(
                "https://api.sendivent.com/", welcome_request, {"X-Idempotency-Key": value}
            )

    @pytest.mark.parametrize("name", ["", "X-Bad Name", "X-Bad:Name", "X-Bad\r\nName"])
    def test_invalid_header_name_raises(self, welcome_request, name):
        with pytest.raises(ValueError, match="Invalid HTTP header name"):
            build_raw_request("https://api.sendivent.com/", welcome_request, {name: "v"})


class TestFireAndForget:
    """Tests for the raw best-effort write."""

    @pytest.mark.asyncio
    async def test_writes_full_request_and_closes(self):
        """Test that the server receives the complete request and then EOF."""
        server = CapturingServer()
        port = await server.start()
        base_url = f"http://127.0.0.1:{port}/"
        payload = {"payload": {"blob": "x" * 512 * 1024}}
        request = SendRequest(path="send/welcome", body=payload)
        data = build_raw_request(base_url, request, {"Content-Type": "application/json"})

        try:
            result = await fire_and_forget(base_url, data, connect_timeout=2)
            received = await asyncio.wait_for(server.received.get(), timeout=5)
        finally:
            await server.stop()

        assert result is None
        assert received == data
        _, headers, body = _split_raw_request(received)
        assert int(headers["Content-Length"]) == len(body)
        assert json.loads(body) == payload

    @pytest.mark.asyncio
    async def test_does_not_read_response(self, welcome_request):
        """Test that the call returns even if the server never answers."""
        server = CapturingServer()
        port = await server.start()
        base_url = f"http://127.0.0.1:{port}/"
        data = build_raw_request(base_url, welcome_request, {})

        try:
            started = time.monotonic()
            await fire_and_forget(base_url, data, connect_timeout=2)
            elapsed = time.monotonic() - started
            await asyncio.wait_for(server.received.get(), timeout=5)
        finally:
            await server.stop()

        assert elapsed < 2

    @pytest.mark.asyncio
    async def test_connection_refused_is_swallowed(self, welcome_request):
        """Test that a refused connection returns silently."""
        server = await asyncio.start_server(lambda r, w: None, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        server.close()
        await server.wait_closed()

        base_url = f"http://127.0.0.1:{port}/"
        data = build_raw_request(base_url, welcome_request, {})

        result = await fire_and_forget(base_url, data, connect_timeout=1)

        assert result is None

    @pytest.mark.asyncio
    async def test_unresolvable_host_is_swallowed(self, welcome_request):
        base_url = "https://sendivent.invalid/"
        data = build_raw_request(base_url, welcome_request, {})

        started = time.monotonic()
        result = await fire_and_forget(base_url, data, connect_timeout=1)

        assert result is None
        assert time.monotonic() - started < 5

    @pytest.mark.asyncio
    async def test_connect_timeout_bounds_the_call(self, welcome_request):
        """Test that a hanging connect returns within the connect timeout."""
        base_url = "https://api.sendivent.com/"
        data = build_raw_request(base_url, welcome_request, {})

        async def hanging_connect(*args, **kwargs):
            await asyncio.sleep(60)

        with patch(
            "sendivent.providers.dispatchers.raw_http.asyncio.open_connection",
            side_effect=hanging_connect,
        ):
            started = time.monotonic()
            result = await fire_and_forget(base_url, data, connect_timeout=0.2)
            elapsed = time.monotonic() - started

        assert result is None
        assert elapsed < 2

    @pytest.mark.asyncio
    async def test_tls_handshake_failure_is_swallowed(self, welcome_request):
        """Test that a TLS handshake against a plain TCP server is swallowed."""
        async def plain_handler(reader, writer):
            writer.write(b"HTTP/1.1 400 Bad Request\r\n\r\n")
            await writer.drain()
            writer.close()

        server = await asyncio.start_server(plain_handler, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        base_url = f"https://127.0.0.1:{port}/"
        data = build_raw_request(base_url, welcome_request, {})

        try:
            result = await fire_and_forget(base_url, data, connect_timeout=1)
        finally:
            server.close()
            await server.wait_closed()

        assert result is None

    @pytest.mark.asyncio
    async def test_client_sends_non_ascii_idempotency_key(self):
        """Test that a Unicode idempotency key reaches the server intact."""
        server = CapturingServer()
        port = await server.start()
        client = Sendivent(
            "test_key", base_url=f"http://127.0.0.1:{port}/", connect_timeout_seconds=1
        )

        try:
            result = await client.event("welcome").idempotency_key("заказ-1").send_best_effort()
            received = await asyncio.wait_for(server.received.get(), timeout=5)
        finally:
            await server.stop()

        assert result is None
        _, headers, _ = _split_raw_request(received)
        assert headers["X-Idempotency-Key"] == "заказ-1"

    @pytest.mark.asyncio
    async def test_header_injection_rejected_before_connecting(self):
        """Test that a request carrying a split header never opens a socket."""
        client = Sendivent("test_key", connect_timeout_seconds=1)
        request = SendRequest(
            path="send/welcome",
            body={"payload": {}},
            headers={"X-Idempotency-Key": "k\r\nX-Injected: 1"},
        )

        with patch(
            "sendivent.providers.dispatchers.raw_http.asyncio.open_connection"
        ) as mock_connect:
            with pytest.raises(DispatchError, match="Cannot build best-effort request"):
                await client.dispatcher.send_best_effort(request)

        mock_connect.assert_not_called()
