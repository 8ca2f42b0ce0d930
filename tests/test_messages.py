"""
Unit Tests - Request decoding

Module: tests.test_messages
Date: 2025-12-02
Version: 1.0.0

DESCRIPTION:
Tests for protocol.messages:
- Every method maps to its request kind and typed params
- Malformed frames (no correlation id possible)
- Correlated failures (unknown method, ill-shaped params)
- Response rendering
"""

import json
import unittest

from mcp_sse_server.core.constants import INVALID_REQUEST, PARSE_ERROR
from mcp_sse_server.core.errors import (
    InvalidArgumentsError,
    MalformedRequestError,
    MethodNotFoundError,
    NotFoundError,
)
from mcp_sse_server.protocol.messages import (
    CallToolParams,
    GetPromptParams,
    InitializeParams,
    ListParams,
    Notification,
    ReadResourceParams,
    Request,
    RequestDecodeError,
    RequestKind,
    Response,
    check_decoder_table,
    decode_request,
)


def frame(method, params=None, request_id=1):
    message = {"jsonrpc": "2.0", "method": method, "id": request_id}
    if params is not None:
        message["params"] = params
    return json.dumps(message)


class TestDecodeRequests(unittest.TestCase):
    """Test successful decoding"""

    def test_read_resource(self):
        request = decode_request(frame("resources/read", {"uri": "greeting://Ada"}))
        self.assertIsInstance(request, Request)
        self.assertEqual(request.kind, RequestKind.READ_RESOURCE)
        self.assertEqual(request.params, ReadResourceParams(uri="greeting://Ada"))
        self.assertEqual(request.target, "greeting://Ada")

    def test_call_tool(self):
        request = decode_request(
            frame("tools/call", {"name": "add", "arguments": {"a": 2, "b": 3}}, "req-7")
        )
        self.assertEqual(request.request_id, "req-7")
        self.assertEqual(request.kind, RequestKind.CALL_TOOL)
        self.assertEqual(request.params, CallToolParams("add", {"a": 2, "b": 3}))

    def test_get_prompt_without_arguments(self):
        request = decode_request(frame("prompts/get", {"name": "greet-user"}))
        self.assertEqual(request.params, GetPromptParams("greet-user", {}))

    def test_listing_kinds(self):
        for method, kind in (
            ("resources/list", RequestKind.LIST_RESOURCES),
            ("resources/templates/list", RequestKind.LIST_RESOURCE_TEMPLATES),
            ("tools/list", RequestKind.LIST_TOOLS),
            ("prompts/list", RequestKind.LIST_PROMPTS),
        ):
            with self.subTest(method=method):
                request = decode_request(frame(method))
                self.assertEqual(request.kind, kind)
                self.assertEqual(request.params, ListParams())

    def test_initialize(self):
        request = decode_request(
            frame(
                "initialize",
                {
                    "protocolVersion": "2024-11-05",
                    "clientInfo": {"name": "test-client", "version": "1.0"},
                    "capabilities": {},
                },
            )
        )
        self.assertEqual(request.kind, RequestKind.INITIALIZE)
        self.assertIsInstance(request.params, InitializeParams)
        self.assertEqual(request.params.client_info["name"], "test-client")

    def test_parsed_object_and_bytes(self):
        parsed = {"jsonrpc": "2.0", "method": "ping", "id": 3}
        self.assertEqual(decode_request(parsed).kind, RequestKind.PING)
        self.assertEqual(decode_request(json.dumps(parsed).encode()).request_id, 3)

    def test_notification(self):
        message = decode_request({"jsonrpc": "2.0", "method": "notifications/initialized"})
        self.assertIsInstance(message, Notification)
        self.assertEqual(message.method, "notifications/initialized")


class TestDecodeFailures(unittest.TestCase):
    """Test rejected frames"""

    def test_invalid_json(self):
        with self.assertRaises(MalformedRequestError) as ctx:
            decode_request("{not json")
        self.assertEqual(ctx.exception.code, PARSE_ERROR)

    def test_invalid_envelope(self):
        for bad in (
            "[1, 2]",
            json.dumps({"method": "ping", "id": 1}),
            json.dumps({"jsonrpc": "2.0", "id": 1}),
            json.dumps({"jsonrpc": "2.0", "method": "ping", "id": 1, "params": [1]}),
            json.dumps({"jsonrpc": "2.0", "method": "ping", "id": True}),
            json.dumps({"jsonrpc": "2.0", "method": "ping", "id": {"a": 1}}),
        ):
            with self.subTest(frame=bad):
                with self.assertRaises(MalformedRequestError) as ctx:
                    decode_request(bad)
                self.assertEqual(ctx.exception.code, INVALID_REQUEST)

    def test_unknown_method_is_correlated(self):
        with self.assertRaises(RequestDecodeError) as ctx:
            decode_request(frame("resources/write", {}, 9))
        self.assertEqual(ctx.exception.request_id, 9)
        self.assertIsInstance(ctx.exception.error, MethodNotFoundError)

    def test_bad_params_are_correlated(self):
        for method, params, field in (
            ("resources/read", {}, "uri"),
            ("resources/read", {"uri": 5}, "uri"),
            ("tools/call", {"arguments": {}}, "name"),
            ("tools/call", {"name": "add", "arguments": [1, 2]}, "arguments"),
            ("prompts/get", {"name": ""}, "name"),
            ("tools/list", {"cursor": 3}, "cursor"),
        ):
            with self.subTest(method=method, params=params):
                with self.assertRaises(RequestDecodeError) as ctx:
                    decode_request(frame(method, params, "x"))
                self.assertEqual(ctx.exception.request_id, "x")
                self.assertIsInstance(ctx.exception.error, InvalidArgumentsError)
                self.assertEqual(ctx.exception.error.field, field)


class TestResponse(unittest.TestCase):
    """Test response rendering"""

    def test_success(self):
        response = Response.success(4, {"tools": []})
        self.assertTrue(response.is_success)
        self.assertEqual(
            response.to_jsonrpc(),
            {"jsonrpc": "2.0", "id": 4, "result": {"tools": []}},
        )

    def test_failure(self):
        response = Response.failure(5, NotFoundError("Resource not found: db://orders/1"))
        self.assertFalse(response.is_success)
        self.assertEqual(
            response.to_jsonrpc(),
            {
                "jsonrpc": "2.0",
                "id": 5,
                "error": {
                    "code": -32002,
                    "message": "Resource not found: db://orders/1",
                    "data": {"kind": "NotFoundError"},
                },
            },
        )

    def test_uncorrelated_failure(self):
        message = Response.failure(None, MalformedRequestError("Parse error")).to_jsonrpc()
        self.assertIsNone(message["id"])
        self.assertEqual(message["error"]["code"], PARSE_ERROR)


class TestDecoderTable(unittest.TestCase):
    """Test the params decoder table check"""

    def test_incomplete_table_rejected(self):
        with self.assertRaises(RuntimeError) as ctx:
            check_decoder_table({RequestKind.PING: lambda params: None})
        self.assertIn("tools/call", str(ctx.exception))

    def test_complete_table_accepted(self):
        check_decoder_table({kind: None for kind in RequestKind})


if __name__ == "__main__":
    unittest.main()
