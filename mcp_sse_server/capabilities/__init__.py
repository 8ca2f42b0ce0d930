"""
Built-in capabilities - Demo content served by the MCP SSE Server

Provides:
- DocumentStore: In-memory records behind db:// resources
- FileSource: Confined reads below the content directory
- BraveSearchClient: Outbound web search for the search tool
- register_builtin_capabilities: Registers tools, resources and prompts
"""

from .document_store import DocumentStore
from .file_source import FileSource
from .search import BraveSearchClient
from .builtin import register_builtin_capabilities

__all__ = [
    "DocumentStore",
    "FileSource",
    "BraveSearchClient",
    "register_builtin_capabilities",
]
