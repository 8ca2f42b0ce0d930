"""
MCP SSE Server (Model Context Protocol over Server-Sent Events)

A multi-session MCP server exposing resources, tools and prompts to AI
clients over HTTP: one event stream per client, requests POSTed alongside.

CHANGELOG:
[2025-12-02 v1.0.0] SSE server
  - Capability registry (resources with URI templates, tools, prompts)
  - Session-keyed response routing
  - aiohttp SSE transport
  - Built-in demo capabilities

[2025-11-23 v0.1.0-alpha] Initial project setup
  - Project structure initialized
  - Core modules organized in layers

ARCHITECTURE:
- Layer 1 : Transport (SSE over HTTP)
- Layer 2 : Protocol & Routing (decoding, MCP handler, sessions)
- Layer 3 : Capabilities (registry, execution manager)
- Layer 4 : Built-in content (files, records, web search)

SECURITY NOTES:
- All inputs validated strictly before execution
- File reads confined to the content directory
- No authentication (local / trusted network use)
"""

__version__ = "1.0.0"
__author__ = "MCP Development Team"

# Version info
VERSION_MAJOR = 1
VERSION_MINOR = 0
VERSION_PATCH = 0

# Export main classes
from .core.config import ServerConfig
from .core.mcp_server import MCPServer
from .registry.capability_registry import CapabilityRegistry
from .transport.base_transport import BaseTransport
from .transport.sse_transport import SSETransport, SSEConfig
from .tools.tool import Tool
from .prompts.prompt import Prompt
from .resources.resource import ResourceDescriptor

__all__ = [
    "ServerConfig",
    "MCPServer",
    "CapabilityRegistry",
    "BaseTransport",
    "SSETransport",
    "SSEConfig",
    "Tool",
    "Prompt",
    "ResourceDescriptor",
]
