"""
Built-in Capabilities - Demo tools, resources and prompts

Module: capabilities.builtin
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Initial implementation
  - Tools: add, search
  - Resources: config, documentation, greeting, logs, documents, texts, database
  - Prompts: summarize-log, greet-user, inspect-record

ARCHITECTURE:
register_builtin_capabilities() registers everything on an MCPServer before
it starts. Collaborators (document store, file source, search client) are
explicit arguments so tests can substitute their own.

Resource table:
    config://app                   static text
    documentation://i75corridor    texts/documentation/i75corridor/llms-full.txt
    greeting://{name}              "Hello, {name}!"
    log://{filename}               logs/<filename>
    doc://{type}/{filename}        documents/<type>/<filename> (base64)
    text://{category}/{filename}   texts/<category>/<filename>
    db://{collection}/{id}         DocumentStore record (JSON)
"""

import json
import logging
from typing import Any, Dict, Optional, Union

from .document_store import DocumentStore
from .file_source import FileSource
from .search import BraveSearchClient, DEFAULT_RESULT_COUNT
from ..core.config import ServerConfig
from ..protocol.content import BlobContent, ResourceReference
from ..registry.uri_template import UriTemplate

logger = logging.getLogger("capabilities.builtin")

TEXT_MIME = "text/plain"
JSON_MIME = "application/json"
PNG_MIME = "image/png"
PDF_MIME = "application/pdf"

# Templates shared by the resources and the prompts that reference them
LOG_TEMPLATE = UriTemplate.compile("log://{filename}")
RECORD_TEMPLATE = UriTemplate.compile("db://{collection}/{id}")


def format_number(value: Union[int, float]) -> str:
    """Render a number the way a JSON client expects (5, not 5.0)"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def register_builtin_capabilities(
    server,
    config: Optional[ServerConfig] = None,
    store: Optional[DocumentStore] = None,
    files: Optional[FileSource] = None,
    search: Optional[BraveSearchClient] = None,
) -> None:
    """
    Register the built-in tools, resources and prompts

    Args:
        server: MCPServer (not started yet)
        config: Configuration (defaults to server.config)
        store: Records behind db:// (defaults to the seeded demo store)
        files: File source (defaults to config.content_dir)
        search: Search client (defaults to a Brave client from config)

    Raises:
        DuplicateNameError: If a capability is already registered
    """
    config = config or server.config
    store = store if store is not None else DocumentStore.seeded()
    files = files or FileSource(config.content_dir)
    search = search or BraveSearchClient(config.brave_api_key, config.search_timeout)

    # ========================================================================
    # Tools
    # ========================================================================

    @server.tool(
        name="add",
        description="Add two numbers together",
        input_schema={"a": {"type": "number"}, "b": {"type": "number"}},
    )
    def add(ctx, params: Dict[str, Any]) -> str:
        return format_number(params["a"] + params["b"])

    @server.tool(
        name="search",
        description="Search the web using Brave Search API",
        input_schema={
            "query": {"type": "string"},
            "count": {"type": "number", "optional": True},
        },
    )
    async def web_search(ctx, params: Dict[str, Any]) -> str:
        count = params.get("count")
        results = await search.search(
            params["query"], DEFAULT_RESULT_COUNT if count is None else count
        )
        return json.dumps(results, indent=2)

    # ========================================================================
    # Resources
    # ========================================================================

    @server.resource("config", "config://app")
    def app_config(uri: str, params: Dict[str, str]) -> str:
        return "App configuration here"

    @server.resource("documentation", "documentation://i75corridor", mime_type=TEXT_MIME)
    async def documentation(uri: str, params: Dict[str, str]) -> str:
        return await files.read_text("texts", "documentation", "i75corridor", "llms-full.txt")

    @server.resource("greeting", "greeting://{name}")
    def greeting(uri: str, params: Dict[str, str]) -> str:
        return f"Hello, {params['name']}!"

    @server.resource("logs", LOG_TEMPLATE.pattern, mime_type=TEXT_MIME)
    async def log_file(uri: str, params: Dict[str, str]) -> str:
        return await files.read_text("logs", params["filename"])

    @server.resource("documents", "doc://{type}/{filename}")
    async def document(uri: str, params: Dict[str, str]) -> BlobContent:
        data = await files.read_bytes("documents", params["type"], params["filename"])
        mime_type = PNG_MIME if params["type"] == "images" else PDF_MIME
        return BlobContent(data, mime_type)

    @server.resource("texts", "text://{category}/{filename}", mime_type=TEXT_MIME)
    async def text_file(uri: str, params: Dict[str, str]) -> str:
        return await files.read_text("texts", params["category"], params["filename"])

    @server.resource("database", RECORD_TEMPLATE.pattern, mime_type=JSON_MIME)
    def database(uri: str, params: Dict[str, str]) -> Dict[str, Any]:
        return store.get(params["collection"], params["id"])

    # ========================================================================
    # Prompts
    # ========================================================================

    @server.prompt(
        name="summarize-log",
        description="Summarize a log file",
        input_schema={"filename": {"type": "string"}},
    )
    def summarize_log(ctx, params: Dict[str, Any]):
        filename = params["filename"]
        return [
            ("user", f"Please summarize the log file {filename}, highlighting errors."),
            ("user", ResourceReference(LOG_TEMPLATE.expand(filename=filename), filename, TEXT_MIME)),
        ]

    @server.prompt(
        name="greet-user",
        description="Write a friendly greeting",
        input_schema={"name": {"type": "string"}},
    )
    def greet_user(ctx, params: Dict[str, Any]):
        return [("user", f"Write a short, friendly greeting for {params['name']}.")]

    @server.prompt(
        name="inspect-record",
        description="Explain a database record",
        input_schema={"collection": {"type": "string"}, "id": {"type": "string"}},
    )
    def inspect_record(ctx, params: Dict[str, Any]):
        uri = RECORD_TEMPLATE.expand(collection=params["collection"], id=params["id"])
        return [
            ("user", f"Describe the record stored at {uri}."),
            ("user", ResourceReference(uri, f"{params['collection']}:{params['id']}", JSON_MIME)),
        ]

    logger.info(
        f"Built-in capabilities registered: {server.registry.get_summary()} "
        f"(search {'enabled' if search.has_credentials else 'without API key'})"
    )
