"""
Integration Tests - SSE transport over HTTP

Module: tests.test_sse_transport
Date: 2025-12-02
Version: 1.0.0

DESCRIPTION:
HTTP-level tests of transport.sse_transport with aiohttp's test server:
- Info endpoint
- Event stream: endpoint event, message events, keepalive comments
- POST /messages status codes (202, 400, 404)
- CORS headers and preflight
"""

import asyncio
import json
import logging
import unittest
from unittest.mock import AsyncMock, patch

import aiohttp
from aiohttp import web
from aiohttp.test_utils import AioHTTPTestCase

from mcp_sse_server.capabilities import BraveSearchClient, register_builtin_capabilities
from mcp_sse_server.core.config import ServerConfig
from mcp_sse_server.core.mcp_server import MCPServer
from mcp_sse_server.transport.sse_transport import SSEConfig, SSETransport, format_event

logging.basicConfig(level=logging.WARNING)


async def read_event(response):
    """Read one SSE block (comments included) from a streaming response"""
    lines = []
    while True:
        raw = await asyncio.wait_for(response.content.readline(), timeout=2.0)
        line = raw.decode("utf-8").rstrip("\n")
        if line == "":
            if lines:
                return lines
            continue
        lines.append(line)


def parse_event(lines):
    event = {"event": None, "data": []}
    for line in lines:
        if line.startswith("event: "):
            event["event"] = line[len("event: "):]
        elif line.startswith("data: "):
            event["data"].append(line[len("data: "):])
    event["data"] = "\n".join(event["data"])
    return event


class SSETransportTestCase(AioHTTPTestCase):
    """SSE transport bound to a server with the built-in capabilities"""

    keepalive_interval = 5.0

    async def get_application(self):
        config = ServerConfig(keepalive_interval=self.keepalive_interval)
        self.mcp_server = MCPServer(config)
        register_builtin_capabilities(self.mcp_server, config, search=BraveSearchClient(None))
        self.mcp_server.registry.freeze()

        self.transport = SSETransport(SSEConfig(keepalive_interval=self.keepalive_interval))
        self.mcp_server.set_transport(self.transport)
        return self.transport.create_app()

    async def open_stream(self):
        """Open /sse and return (response, messages endpoint)"""
        response = await self.client.get("/sse")
        self.assertEqual(response.status, 200)
        self.assertEqual(response.headers["Content-Type"], "text/event-stream")
        event = parse_event(await read_event(response))
        self.assertEqual(event["event"], "endpoint")
        return response, event["data"]

    async def post(self, endpoint, message):
        body = message if isinstance(message, (str, bytes)) else json.dumps(message)
        return await self.client.post(endpoint, data=body)


class TestInfoEndpoint(SSETransportTestCase):
    """GET /"""

    async def test_info(self):
        response = await self.client.get("/")
        self.assertEqual(response.status, 200)
        self.assertEqual(response.headers["Access-Control-Allow-Origin"], "*")
        info = await response.json()
        self.assertEqual(info["name"], "MCP SSE Server")
        self.assertEqual(info["version"], "1.0.0")
        self.assertEqual(set(info["endpoints"]), {"/", "/sse", "/messages"})
        self.assertEqual(
            info["tools"],
            [
                {"name": "add", "description": "Add two numbers together"},
                {"name": "search", "description": "Search the web using Brave Search API"},
            ],
        )

    async def test_preflight(self):
        response = await self.client.options("/messages")
        self.assertEqual(response.status, 204)
        self.assertEqual(response.headers["Access-Control-Allow-Origin"], "*")
        self.assertIn("POST", response.headers["Access-Control-Allow-Methods"])


class TestEventStream(SSETransportTestCase):
    """GET /sse and POST /messages"""

    async def test_endpoint_event(self):
        stream, endpoint = await self.open_stream()
        self.assertTrue(endpoint.startswith("/messages?sessionId="))
        session_id = endpoint.split("=", 1)[1]
        self.assertIsNotNone(await self.mcp_server.session_manager.get(session_id))
        self.assertEqual(self.transport.get_stream_count(), 1)
        stream.close()

    async def test_request_answered_on_stream(self):
        stream, endpoint = await self.open_stream()

        response = await self.post(endpoint, {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "tools/call",
            "params": {"name": "add", "arguments": {"a": 2, "b": 3}},
        })
        self.assertEqual(response.status, 202)

        event = parse_event(await read_event(stream))
        self.assertEqual(event["event"], "message")
        message = json.loads(event["data"])
        self.assertEqual(message["id"], 1)
        self.assertEqual(message["result"]["content"][0]["text"], "5")
        stream.close()

    async def test_two_streams_are_isolated(self):
        first, first_endpoint = await self.open_stream()
        second, second_endpoint = await self.open_stream()
        self.assertNotEqual(first_endpoint, second_endpoint)

        await self.post(second_endpoint, {
            "jsonrpc": "2.0", "id": "b", "method": "resources/read",
            "params": {"uri": "greeting://Bob"},
        })
        await self.post(first_endpoint, {
            "jsonrpc": "2.0", "id": "a", "method": "resources/read",
            "params": {"uri": "greeting://Ada"},
        })

        first_message = json.loads(parse_event(await read_event(first))["data"])
        second_message = json.loads(parse_event(await read_event(second))["data"])
        self.assertEqual(first_message["result"]["contents"][0]["text"], "Hello, Ada!")
        self.assertEqual(second_message["result"]["contents"][0]["text"], "Hello, Bob!")
        first.close()
        second.close()

    async def test_missing_session_id(self):
        response = await self.post("/messages", {"jsonrpc": "2.0", "id": 1, "method": "ping"})
        self.assertEqual(response.status, 400)

    async def test_unknown_session(self):
        response = await self.post(
            "/messages?sessionId=does-not-exist",
            {"jsonrpc": "2.0", "id": 1, "method": "ping"},
        )
        self.assertEqual(response.status, 404)
        body = await response.json()
        self.assertEqual(body["error"]["data"]["kind"], "SessionNotFoundError")

    async def test_malformed_frame(self):
        stream, endpoint = await self.open_stream()

        response = await self.post(endpoint, "{not json")
        self.assertEqual(response.status, 400)

        message = json.loads(parse_event(await read_event(stream))["data"])
        self.assertIsNone(message["id"])
        self.assertEqual(message["error"]["code"], -32700)
        stream.close()


class TestKeepalive(SSETransportTestCase):
    """Idle streams receive comments"""

    keepalive_interval = 0.05

    async def test_keepalive_comment(self):
        stream, _ = await self.open_stream()
        self.assertEqual(await read_event(stream), [": keepalive"])
        stream.close()


class TestStreamTeardown(SSETransportTestCase):
    """Sessions end with their stream"""

    keepalive_interval = 0.05

    async def test_client_disconnect_closes_session(self):
        stream, endpoint = await self.open_stream()
        self.assertEqual(self.mcp_server.session_manager.active_count, 1)

        stream.close()
        await asyncio.sleep(0.3)

        self.assertEqual(self.mcp_server.session_manager.active_count, 0)
        self.assertEqual(self.transport.get_stream_count(), 0)
        response = await self.post(endpoint, {"jsonrpc": "2.0", "id": 1, "method": "ping"})
        self.assertEqual(response.status, 404)

    async def test_failed_stream_setup_closes_session(self):
        failing_prepare = AsyncMock(side_effect=ConnectionResetError("reset during prepare"))
        with patch.object(web.StreamResponse, "prepare", failing_prepare):
            try:
                response = await self.client.get("/sse")
                response.close()
            except aiohttp.ClientError:
                pass

        self.assertTrue(failing_prepare.await_count >= 1)
        self.assertEqual(self.mcp_server.session_manager.active_count, 0)
        self.assertEqual(self.transport.get_stream_count(), 0)


class TestFormatEvent(unittest.TestCase):
    """SSE encoding"""

    def test_multiline_data(self):
        self.assertEqual(
            format_event("message", "a\nb"),
            b"event: message\ndata: a\ndata: b\n\n",
        )


if __name__ == "__main__":
    unittest.main()
