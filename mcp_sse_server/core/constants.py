"""
Constants for MCP SSE Server

Module: core.constants
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] SSE server constants
  - Server identity reported by initialize and the info endpoint
  - Resource / tool / prompt method names
  - MCP error codes plus server-specific codes
  - SSE endpoint paths and configuration defaults

[2025-11-23 v0.1.0-alpha] Initial constants definition
  - MCP protocol version constants
  - Error codes and status codes
"""

from typing import Final

# ============================================================================
# MCP Protocol Constants
# ============================================================================

MCP_PROTOCOL_VERSION: Final[str] = "2024-11-05"
SUPPORTED_PROTOCOL_VERSIONS: Final[tuple] = ("2024-11-05", "2025-03-26")

# Supported JSON-RPC version
JSONRPC_VERSION: Final[str] = "2.0"

# ============================================================================
# Server Identity
# ============================================================================

SERVER_NAME: Final[str] = "mcp-sse-server"
SERVER_VERSION: Final[str] = "1.0.0"
SERVER_DISPLAY_NAME: Final[str] = "MCP SSE Server"

# ============================================================================
# Configuration Defaults
# ============================================================================

DEFAULT_HOST: Final[str] = "0.0.0.0"
DEFAULT_PORT: Final[int] = 3001
DEFAULT_CONTENT_DIR: Final[str] = "./content"

# Timeouts (in seconds)
DEFAULT_INVOCATION_TIMEOUT: Final[float] = 30.0
DEFAULT_SEARCH_TIMEOUT: Final[float] = 10.0
DEFAULT_KEEPALIVE_INTERVAL: Final[float] = 15.0

# Limits
MAX_REQUEST_SIZE: Final[int] = 4 * 1024 * 1024  # 4 MB

# Environment variables
ENV_HOST: Final[str] = "MCP_HOST"
ENV_PORT: Final[str] = "PORT"
ENV_BRAVE_API_KEY: Final[str] = "BRAVE_API_KEY"
ENV_CONTENT_DIR: Final[str] = "MCP_CONTENT_DIR"
ENV_INVOCATION_TIMEOUT: Final[str] = "MCP_INVOCATION_TIMEOUT"
ENV_SEARCH_TIMEOUT: Final[str] = "MCP_SEARCH_TIMEOUT"
ENV_KEEPALIVE_INTERVAL: Final[str] = "MCP_KEEPALIVE_INTERVAL"
ENV_LOG_LEVEL: Final[str] = "MCP_LOG_LEVEL"

# ============================================================================
# Transport (SSE over HTTP)
# ============================================================================

INFO_PATH: Final[str] = "/"
SSE_PATH: Final[str] = "/sse"
MESSAGES_PATH: Final[str] = "/messages"
SESSION_QUERY_PARAM: Final[str] = "sessionId"

SSE_EVENT_ENDPOINT: Final[str] = "endpoint"
SSE_EVENT_MESSAGE: Final[str] = "message"

# ============================================================================
# MCP Messages - JSON-RPC Method Names
# ============================================================================

# Lifecycle methods
METHOD_INITIALIZE: Final[str] = "initialize"
METHOD_INITIALIZED: Final[str] = "notifications/initialized"
METHOD_PING: Final[str] = "ping"

# Tool methods
METHOD_TOOLS_LIST: Final[str] = "tools/list"
METHOD_TOOLS_CALL: Final[str] = "tools/call"

# Resource methods
METHOD_RESOURCES_LIST: Final[str] = "resources/list"
METHOD_RESOURCES_TEMPLATES_LIST: Final[str] = "resources/templates/list"
METHOD_RESOURCES_READ: Final[str] = "resources/read"

# Prompt methods
METHOD_PROMPTS_LIST: Final[str] = "prompts/list"
METHOD_PROMPTS_GET: Final[str] = "prompts/get"

# ============================================================================
# Server Capabilities
# ============================================================================

DEFAULT_CAPABILITIES = {
    "tools": {
        "listChanged": False
    },
    "resources": {
        "subscribe": False,
        "listChanged": False
    },
    "prompts": {
        "listChanged": False
    }
}

# ============================================================================
# Error Codes
# ============================================================================

# JSON-RPC error codes
PARSE_ERROR: Final[int] = -32700
INVALID_REQUEST: Final[int] = -32600
METHOD_NOT_FOUND: Final[int] = -32601
INVALID_PARAMS: Final[int] = -32602
INTERNAL_ERROR: Final[int] = -32603

# MCP / server error codes
RESOURCE_NOT_FOUND: Final[int] = -32002
SESSION_NOT_FOUND: Final[int] = -32001
UPSTREAM_ERROR: Final[int] = -32010
EXECUTION_ERROR: Final[int] = -32011

# Error messages
ERROR_MESSAGES = {
    PARSE_ERROR: "Parse error",
    INVALID_REQUEST: "Invalid Request",
    METHOD_NOT_FOUND: "Method not found",
    INVALID_PARAMS: "Invalid params",
    INTERNAL_ERROR: "Internal error",
    RESOURCE_NOT_FOUND: "Not found",
    SESSION_NOT_FOUND: "Session not found",
    UPSTREAM_ERROR: "Upstream error",
    EXECUTION_ERROR: "Execution error",
}


# Unit tests for constants
if __name__ == "__main__":
    import unittest

    class TestConstants(unittest.TestCase):
        """Test suite for constants module"""

        def test_protocol_version_supported(self):
            """Test default protocol version is in the supported list"""
            self.assertIn(MCP_PROTOCOL_VERSION, SUPPORTED_PROTOCOL_VERSIONS)

        def test_error_codes_are_negative(self):
            """Test error codes are negative integers"""
            for code in ERROR_MESSAGES:
                self.assertLess(code, 0)

        def test_paths_are_absolute(self):
            """Test endpoint paths start with a slash"""
            for path in (INFO_PATH, SSE_PATH, MESSAGES_PATH):
                self.assertTrue(path.startswith("/"))

    unittest.main()
