"""
Unit Tests - Built-in capabilities

Module: tests.test_builtin_capabilities
Date: 2025-12-02
Version: 1.0.0

DESCRIPTION:
Tests for the capabilities package:
- DocumentStore seed data and misses
- FileSource confinement to the content root
- BraveSearchClient against a local fake of the search API
- Number rendering of the add tool
"""

import json
import tempfile
import unittest
from pathlib import Path

from aiohttp import web
from aiohttp.test_utils import AioHTTPTestCase

from mcp_sse_server.capabilities import BraveSearchClient, DocumentStore, FileSource
from mcp_sse_server.capabilities.builtin import format_number
from mcp_sse_server.core.errors import (
    InvalidArgumentsError,
    MissingCredentialError,
    NotFoundError,
    UpstreamError,
)

SEARCH_RESULTS = [
    {"title": "Model Context Protocol", "url": "https://modelcontextprotocol.io"},
]


class TestDocumentStore(unittest.TestCase):
    """Test the db:// record store"""

    def test_seeded(self):
        store = DocumentStore.seeded()
        self.assertEqual(len(store), 4)
        self.assertEqual(
            store.get("users", "2"),
            {"id": 2, "name": "Jane Smith", "email": "jane@example.com"},
        )
        self.assertEqual(store.get("products", "2")["price"], 149.99)

    def test_miss(self):
        store = DocumentStore.seeded()
        with self.assertRaises(NotFoundError) as ctx:
            store.get("orders", "1")
        self.assertEqual(ctx.exception.message, "Resource not found: orders:1")

    def test_put_and_delete(self):
        store = DocumentStore()
        store.put("orders", 1, {"id": 1})
        self.assertEqual(store.keys(), [("orders", "1")])
        self.assertTrue(store.delete("orders", "1"))
        self.assertFalse(store.delete("orders", "1"))

    def test_colon_in_key_does_not_collide(self):
        store = DocumentStore({("a:b", "c"): {"v": 1}})
        with self.assertRaises(NotFoundError):
            store.get("a", "b:c")
        self.assertEqual(store.get("a:b", "c"), {"v": 1})

    def test_records_are_copies(self):
        store = DocumentStore.seeded()
        store.get("users", "1")["name"] = "Mallory"
        self.assertEqual(store.get("users", "1")["name"], "John Doe")


class TestFileSource(unittest.IsolatedAsyncioTestCase):
    """Test confined file reads"""

    async def asyncSetUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name) / "content"
        (self.root / "logs").mkdir(parents=True)
        (self.root / "logs" / "app.log").write_text("hello", encoding="utf-8")
        (Path(self._tmp.name) / "secret.txt").write_text("secret", encoding="utf-8")
        self.files = FileSource(self.root)

    async def asyncTearDown(self):
        self._tmp.cleanup()

    async def test_read_text(self):
        self.assertEqual(await self.files.read_text("logs", "app.log"), "hello")
        self.assertEqual(await self.files.read_bytes("logs", "app.log"), b"hello")

    async def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            await self.files.read_text("logs", "missing.log")

    async def test_escaping_segments(self):
        for segments in (("..", "secret.txt"), ("logs", ".."), ("", "x"), ("a/b",), ("a\\b",)):
            with self.subTest(segments=segments):
                with self.assertRaises(InvalidArgumentsError):
                    await self.files.read_text(*segments)


class TestSearchWithoutKey(unittest.IsolatedAsyncioTestCase):
    """Missing credentials fail the call, never the construction"""

    async def test_missing_key(self):
        client = BraveSearchClient(api_key=None)
        self.assertFalse(client.has_credentials)
        with self.assertRaises(MissingCredentialError):
            await client.search("mcp")


class TestSearchClient(AioHTTPTestCase):
    """BraveSearchClient against a local fake API"""

    async def get_application(self):
        self.requests = []
        app = web.Application()
        app.router.add_get("/res/v1/web/search", self._search)
        app.router.add_get("/broken", self._broken)
        app.router.add_get("/empty", self._empty)
        return app

    async def _search(self, request):
        self.requests.append(request)
        return web.json_response({"web": {"results": SEARCH_RESULTS}})

    async def _broken(self, request):
        return web.Response(status=503, reason="Service Unavailable")

    async def _empty(self, request):
        return web.json_response({"query": {"original": "nothing"}})

    def client_for(self, path):
        return BraveSearchClient("test-key", timeout=2.0, endpoint=str(self.server.make_url(path)))

    async def test_search(self):
        results = await self.client_for("/res/v1/web/search").search("mcp protocol", 3)
        self.assertEqual(results, SEARCH_RESULTS)

        request = self.requests[0]
        self.assertEqual(request.query["q"], "mcp protocol")
        self.assertEqual(request.query["count"], "3")
        self.assertEqual(request.headers["X-Subscription-Token"], "test-key")
        self.assertEqual(request.headers["Accept"], "application/json")

    async def test_integral_float_count(self):
        await self.client_for("/res/v1/web/search").search("mcp", 5.0)
        self.assertEqual(self.requests[0].query["count"], "5")

    async def test_upstream_failure(self):
        with self.assertRaises(UpstreamError) as ctx:
            await self.client_for("/broken").search("mcp")
        self.assertEqual(ctx.exception.message, "Brave search failed: Service Unavailable")

    async def test_missing_results(self):
        self.assertEqual(await self.client_for("/empty").search("nothing"), [])

    async def test_results_serialize_for_tool(self):
        results = await self.client_for("/res/v1/web/search").search("mcp")
        self.assertEqual(json.loads(json.dumps(results, indent=2)), SEARCH_RESULTS)


class TestFormatNumber(unittest.TestCase):
    """Test add tool output"""

    def test_integers(self):
        self.assertEqual(format_number(2 + 3), "5")
        self.assertEqual(format_number(2.0 + 3.0), "5")
        self.assertEqual(format_number(-1), "-1")

    def test_fractions(self):
        self.assertEqual(format_number(1.5 + 2), "3.5")


if __name__ == "__main__":
    unittest.main()
