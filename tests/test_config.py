"""
Unit Tests - Configuration and server lifecycle

Module: tests.test_config
Date: 2025-12-02
Version: 1.0.0

DESCRIPTION:
Tests for core.config and MCPServer start/stop:
- Defaults and environment parsing
- Rejection of invalid numbers
- API key kept out of repr()
- Registry frozen once the server starts
"""

import unittest
from unittest.mock import AsyncMock, MagicMock

from mcp_sse_server.core.config import ServerConfig
from mcp_sse_server.core.mcp_server import MCPServer


class TestServerConfig(unittest.TestCase):
    """Test ServerConfig"""

    def test_defaults(self):
        config = ServerConfig.from_env({})
        self.assertEqual(config.host, "0.0.0.0")
        self.assertEqual(config.port, 3001)
        self.assertIsNone(config.brave_api_key)
        self.assertEqual(config.invocation_timeout, 30.0)
        self.assertEqual(config.keepalive_interval, 15.0)
        self.assertEqual(config.log_level, "INFO")

    def test_from_env(self):
        config = ServerConfig.from_env({
            "PORT": "8080",
            "MCP_HOST": "127.0.0.1",
            "BRAVE_API_KEY": "secret-key",
            "MCP_CONTENT_DIR": "/srv/content",
            "MCP_KEEPALIVE_INTERVAL": "2.5",
            "MCP_LOG_LEVEL": "debug",
        })
        self.assertEqual(config.port, 8080)
        self.assertEqual(config.host, "127.0.0.1")
        self.assertEqual(config.brave_api_key, "secret-key")
        self.assertEqual(config.content_dir, "/srv/content")
        self.assertEqual(config.keepalive_interval, 2.5)
        self.assertEqual(config.log_level, "DEBUG")

    def test_empty_key_is_missing(self):
        self.assertIsNone(ServerConfig.from_env({"BRAVE_API_KEY": ""}).brave_api_key)

    def test_zero_timeout_is_unbounded(self):
        config = ServerConfig.from_env({"MCP_INVOCATION_TIMEOUT": "0"})
        self.assertIsNone(config.invocation_timeout)

    def test_invalid_numbers(self):
        for env in (
            {"PORT": "http"},
            {"PORT": "70000"},
            {"MCP_SEARCH_TIMEOUT": "soon"},
            {"MCP_KEEPALIVE_INTERVAL": "0"},
        ):
            with self.subTest(env=env):
                with self.assertRaises(ValueError):
                    ServerConfig.from_env(env)

    def test_key_not_in_repr(self):
        config = ServerConfig(brave_api_key="secret-key")
        self.assertNotIn("secret-key", repr(config))


class TestServerLifecycle(unittest.IsolatedAsyncioTestCase):
    """Test MCPServer start/stop with a mock transport"""

    def make_transport(self):
        transport = MagicMock()
        transport.name = "mock"
        transport.start = AsyncMock()
        transport.stop = AsyncMock()
        return transport

    async def test_start_without_transport(self):
        server = MCPServer(ServerConfig())
        with self.assertRaises(RuntimeError):
            await server.start()
        self.assertFalse(server.is_running)

    async def test_start_freezes_registry(self):
        server = MCPServer(ServerConfig())

        @server.tool("echo", "Echo text", input_schema={"text": {"type": "string"}})
        def echo(ctx, params):
            return params["text"]

        transport = self.make_transport()
        server.set_transport(transport)
        transport.set_message_handler.assert_called_once_with(server.submit)

        await server.start()
        self.assertTrue(server.is_running)
        self.assertTrue(server.registry.is_frozen)
        transport.start.assert_awaited_once()

        with self.assertRaises(RuntimeError):
            server.tool("late", "Registered too late")(echo)

        await server.stop()
        self.assertFalse(server.is_running)
        transport.stop.assert_awaited_once()

    async def test_stop_closes_sessions(self):
        server = MCPServer(ServerConfig())
        server.set_transport(self.make_transport())
        await server.start()
        await server.session_manager.open_session()

        status = server.get_status()
        self.assertTrue(status.is_running)
        self.assertEqual(status.active_sessions, 1)
        self.assertEqual(status.total_requests, 0)

        await server.stop()
        self.assertEqual(server.session_manager.active_count, 0)
        self.assertEqual(server.get_info()["status"], "stopped")


if __name__ == "__main__":
    unittest.main()
