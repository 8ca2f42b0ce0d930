"""
MCP Protocol Handler - Routes decoded requests to capabilities

Module: protocol.mcp_protocol_handler
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Registry-backed dispatch
  - Exhaustive RequestKind -> handler table
  - resources/read, tools/call, prompts/get through the ExecutionManager
  - resources/list, resources/templates/list, tools/list, prompts/list
  - Exactly one Response per Request, success or failure

[2025-11-23 v0.1.0-alpha] Initial implementation
  - Lifecycle methods: initialize, shutdown
  - Capabilities exposure
  - Error handling and request/response routing

ARCHITECTURE:
MCPProtocolHandler is stateless between requests: capabilities live in the
CapabilityRegistry, per-client state lives in the Session. For each Request
it:
  1. Picks the handler of request.kind
  2. Resolves the target through the registry
  3. Invokes it through the ExecutionManager
  4. Wraps the result or the MCPError into a Response

Any unexpected exception becomes an internal-error Response; nothing
escapes handle_request().
"""

import logging
from typing import Any, Awaitable, Callable, Dict

from .messages import (
    Request,
    RequestKind,
    Response,
    Notification,
    InitializeParams,
    ReadResourceParams,
    CallToolParams,
    GetPromptParams,
)
from ..core.constants import (
    SERVER_NAME,
    SERVER_VERSION,
    MCP_PROTOCOL_VERSION,
    SUPPORTED_PROTOCOL_VERSIONS,
    DEFAULT_CAPABILITIES,
    METHOD_INITIALIZED,
)
from ..core.errors import MCPError
from ..core.execution_manager import ExecutionManager, InvocationContext
from ..registry.capability_registry import CapabilityRegistry
from ..session.session import Session

Handler = Callable[[Session, Request], Awaitable[Dict[str, Any]]]


class MCPProtocolHandler:
    """
    MCP request dispatcher

    Responsibilities:
    1. Route every RequestKind to its handler
    2. Resolve targets through the CapabilityRegistry
    3. Run invocations through the ExecutionManager
    4. Produce exactly one Response per Request

    Not responsible for:
    - Framing and session routing (transport / SessionManager)
    - Executing capability code (ExecutionManager)
    """

    def __init__(
        self,
        registry: CapabilityRegistry,
        execution_manager: ExecutionManager,
        server_name: str = SERVER_NAME,
        server_version: str = SERVER_VERSION,
    ):
        """
        Initialize protocol handler

        Args:
            registry: Capability registry
            execution_manager: Invocation layer
            server_name: Name reported by initialize
            server_version: Version reported by initialize
        """
        self.logger = logging.getLogger("protocol.mcp_protocol_handler")

        self.registry = registry
        self.execution_manager = execution_manager
        self.server_name = server_name
        self.server_version = server_version
        self._capabilities = {key: dict(value) for key, value in DEFAULT_CAPABILITIES.items()}

        self._handlers: Dict[RequestKind, Handler] = {
            RequestKind.INITIALIZE: self._handle_initialize,
            RequestKind.PING: self._handle_ping,
            RequestKind.READ_RESOURCE: self._handle_read_resource,
            RequestKind.LIST_RESOURCES: self._handle_list_resources,
            RequestKind.LIST_RESOURCE_TEMPLATES: self._handle_list_resource_templates,
            RequestKind.CALL_TOOL: self._handle_call_tool,
            RequestKind.LIST_TOOLS: self._handle_list_tools,
            RequestKind.GET_PROMPT: self._handle_get_prompt,
            RequestKind.LIST_PROMPTS: self._handle_list_prompts,
        }
        missing = set(RequestKind) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for request kinds: {sorted(k.value for k in missing)}")

    async def handle_request(self, session: Session, request: Request) -> Response:
        """
        Handle one decoded request

        Args:
            session: Session that issued the request
            request: Decoded request

        Returns:
            Response: Always exactly one, correlated to request.request_id
        """
        session.record_request()
        self.logger.debug(
            f"Request from {session.session_id[:8]}: "
            f"kind={request.kind.value}, id={request.request_id}"
        )

        handler = self._handlers[request.kind]
        try:
            result = await handler(session, request)
            return Response.success(request.request_id, result)

        except MCPError as e:
            self.logger.info(
                f"{request.kind.value} {request.target or ''} failed: {e.kind}: {e.message}"
            )
            return Response.failure(request.request_id, e)

        except Exception as e:
            self.logger.error(
                f"Unexpected error in {request.kind.value}: {e}", exc_info=True
            )
            return Response.failure(
                request.request_id,
                MCPError(f"Internal error while handling {request.kind.value}"),
            )

    async def handle_notification(self, session: Session, notification: Notification) -> None:
        """
        Handle a notification (never answered)

        Args:
            session: Session that sent it
            notification: Decoded notification
        """
        if notification.method == METHOD_INITIALIZED:
            session.initialized = True
            self.logger.info(f"Client initialized on {session.session_id[:8]}")
        else:
            self.logger.debug(f"Ignoring notification: {notification.method}")

    # ========================================================================
    # Lifecycle
    # ========================================================================

    async def _handle_initialize(self, session: Session, request: Request) -> Dict[str, Any]:
        params: InitializeParams = request.params

        if params.protocol_version in SUPPORTED_PROTOCOL_VERSIONS:
            version = params.protocol_version
        else:
            version = MCP_PROTOCOL_VERSION

        session.protocol_version = version
        session.metadata.client_info = dict(params.client_info)
        self.logger.info(
            f"Initialize from {session.session_id[:8]}: "
            f"client={params.client_info.get('name', 'unknown')}, protocol={version}"
        )

        return {
            "protocolVersion": version,
            "capabilities": self._capabilities,
            "serverInfo": {
                "name": self.server_name,
                "version": self.server_version,
            },
        }

    async def _handle_ping(self, session: Session, request: Request) -> Dict[str, Any]:
        return {}

    # ========================================================================
    # Resources
    # ========================================================================

    async def _handle_read_resource(self, session: Session, request: Request) -> Dict[str, Any]:
        params: ReadResourceParams = request.params
        descriptor, bound = self.registry.resolve_resource(params.uri)
        return await self.execution_manager.invoke_resource(descriptor, params.uri, bound)

    async def _handle_list_resources(self, session: Session, request: Request) -> Dict[str, Any]:
        return {
            "resources": [d.get_info() for d in self.registry.list_resources()]
        }

    async def _handle_list_resource_templates(
        self, session: Session, request: Request
    ) -> Dict[str, Any]:
        return {
            "resourceTemplates": [
                d.get_info() for d in self.registry.list_resource_templates()
            ]
        }

    # ========================================================================
    # Tools
    # ========================================================================

    async def _handle_call_tool(self, session: Session, request: Request) -> Dict[str, Any]:
        params: CallToolParams = request.params
        tool = self.registry.resolve_tool(params.name)
        return await self.execution_manager.invoke_tool(
            tool, params.arguments, self._context(session, request)
        )

    async def _handle_list_tools(self, session: Session, request: Request) -> Dict[str, Any]:
        return {"tools": self.registry.tools.get_info_list()}

    # ========================================================================
    # Prompts
    # ========================================================================

    async def _handle_get_prompt(self, session: Session, request: Request) -> Dict[str, Any]:
        params: GetPromptParams = request.params
        prompt = self.registry.resolve_prompt(params.name)
        return await self.execution_manager.invoke_prompt(
            prompt, params.arguments, self._context(session, request)
        )

    async def _handle_list_prompts(self, session: Session, request: Request) -> Dict[str, Any]:
        return {"prompts": self.registry.prompts.get_info_list()}

    def _context(self, session: Session, request: Request) -> InvocationContext:
        return InvocationContext(
            session_id=session.session_id,
            request_id=request.request_id,
        )
