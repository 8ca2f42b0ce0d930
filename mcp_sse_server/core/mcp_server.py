"""
MCP Server - Main server orchestrator

Module: core.mcp_server
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Multi-session SSE server
  - CapabilityRegistry for resources, tools and prompts
  - SessionManager routing every response to its own session
  - submit(): per-request dispatch tasks tracked by their session
  - Registry frozen when the server starts
  - Info endpoint payload built from the registry

[2025-11-23 v0.2.0-alpha] Phase 2 integration
  - Integrated ToolManager for tool registration
  - Integrated ExecutionManager for execution
  - Added @server.tool() decorator support

[2025-11-23 v0.1.0-alpha] Initial implementation
  - Main MCP server class
  - Transport management (start/stop)
  - Protocol handler orchestration
  - Health check support
  - Graceful shutdown

ARCHITECTURE:
MCPServer is the main entry point that:
1. Owns the CapabilityRegistry, ExecutionManager and SessionManager
2. Hands posted frames from the transport to submit()
3. Dispatches each request in its own task
4. Delivers each Response to the session that issued the request
5. Provides status and info for monitoring

Request flow:
    transport POST -> submit(session_id, frame)
                   -> decode_request()
                   -> task: protocol_handler.handle_request()
                   -> session_manager.deliver(session_id, response)
                   -> transport SSE stream

SECURITY NOTES:
- All frames go through protocol decoding before dispatch
- Responses are routed by session id, never broadcast
- Registry is read-only while serving
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from .config import ServerConfig
from .constants import (
    SERVER_NAME,
    SERVER_VERSION,
    SERVER_DISPLAY_NAME,
    MCP_PROTOCOL_VERSION,
    INFO_PATH,
    SSE_PATH,
    MESSAGES_PATH,
)
from .errors import MalformedRequestError
from .execution_manager import ExecutionManager
from ..protocol.messages import (
    Notification,
    Request,
    RequestDecodeError,
    Response,
    decode_request,
)
from ..protocol.mcp_protocol_handler import MCPProtocolHandler
from ..registry.capability_registry import CapabilityRegistry
from ..session.session import Session
from ..session.session_manager import SessionManager
from ..transport.base_transport import BaseTransport


@dataclass
class ServerStatus:
    """Status information about the server"""
    name: str
    version: str
    protocol_version: str
    is_running: bool
    is_listening: bool
    uptime_seconds: float
    total_requests: int
    active_sessions: int
    capabilities: Dict[str, Any]
    timestamp: datetime


class MCPServer:
    """
    Main MCP Server

    Orchestrates the entire MCP server:
    - Holds the capability registry
    - Manages the transport layer
    - Dispatches requests concurrently
    - Routes responses to their sessions
    - Provides health checks

    Typical usage:
        server = MCPServer(ServerConfig.from_env())

        @server.tool("add", "Add two numbers", {"a": {"type": "number"}})
        def add(ctx, params):
            ...

        server.set_transport(SSETransport(...))
        await server.run()
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        server_name: str = SERVER_NAME,
        server_version: str = SERVER_VERSION,
    ):
        """
        Initialize MCP Server

        Args:
            config: Runtime configuration (defaults if None)
            server_name: Name reported by initialize
            server_version: Version string
        """
        self.logger = logging.getLogger("core.mcp_server")

        self.config = config or ServerConfig()

        # Server identity
        self.server_name = server_name
        self.server_version = server_version

        # Transport layer
        self.transport: Optional[BaseTransport] = None

        # Capabilities and execution
        self.registry = CapabilityRegistry()
        self.execution_manager = ExecutionManager(
            default_timeout=self.config.invocation_timeout
        )

        # Sessions
        self.session_manager = SessionManager()

        # Protocol handler
        self.protocol_handler = MCPProtocolHandler(
            self.registry,
            self.execution_manager,
            server_name,
            server_version,
        )

        # Server state
        self._is_running = False
        self._startup_time: Optional[datetime] = None
        self._total_requests = 0

        self.logger.info(f"Server initialized: {server_name} v{server_version}")

    @property
    def is_running(self) -> bool:
        """Check if server is running"""
        return self._is_running

    @property
    def is_listening(self) -> bool:
        """Check if transport is listening"""
        return self.transport is not None and self.transport.is_running

    @property
    def uptime_seconds(self) -> float:
        """Get uptime in seconds"""
        if not self._startup_time:
            return 0.0
        return (datetime.now(timezone.utc) - self._startup_time).total_seconds()

    # ========================================================================
    # Registration
    # ========================================================================

    def tool(self, name: str, description: str, **kwargs):
        """
        Decorator to register a tool

        Usage:
            @server.tool(
                name="add",
                description="Add two numbers together",
                input_schema={"a": {"type": "number"}, "b": {"type": "number"}},
            )
            def add(ctx, params):
                return str(params["a"] + params["b"])

        Args:
            name: Tool name
            description: Tool description
            **kwargs: input_schema, timeout

        Returns:
            decorator: Function decorator
        """
        return self.registry.tool(name, description, **kwargs)

    def resource(self, name: str, uri: str, **kwargs):
        """
        Decorator to register a resource (exact URI or template)

        Usage:
            @server.resource("greeting", "greeting://{name}")
            def greeting(uri, params):
                return f"Hello, {params['name']}!"
        """
        return self.registry.resource(name, uri, **kwargs)

    def prompt(self, name: str, description: str = "", **kwargs):
        """Decorator to register a prompt"""
        return self.registry.prompt(name, description, **kwargs)

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def set_transport(self, transport: BaseTransport) -> None:
        """
        Set the transport layer

        Args:
            transport: Transport instance to use

        Raises:
            RuntimeError: If server already running
        """
        if self._is_running:
            raise RuntimeError("Cannot change transport while running")

        transport.set_message_handler(self.submit)
        transport.set_session_manager(self.session_manager)
        transport.set_info_provider(self.get_info)

        self.transport = transport
        self.logger.info(f"Transport set: {transport.name}")

    async def start(self) -> None:
        """
        Start the server

        Freezes the registry and starts the transport.

        Raises:
            RuntimeError: If transport not configured
        """
        if self._is_running:
            self.logger.warning("Server already running")
            return

        if not self.transport:
            raise RuntimeError("No transport configured")

        self.registry.freeze()

        try:
            await self.transport.start()
        except Exception as e:
            self.logger.error(f"Failed to start server: {e}")
            raise

        self._is_running = True
        self._startup_time = datetime.now(timezone.utc)

        self.logger.info(f"Server started: {self.server_name} v{self.server_version}")
        self.logger.info(f"Transport: {self.transport.name}")
        self.logger.info(f"Protocol: MCP {MCP_PROTOCOL_VERSION}")

    async def stop(self) -> None:
        """
        Stop the server

        Closes all sessions (cancelling in-flight requests) and stops the
        transport.
        """
        if not self._is_running:
            return

        self._is_running = False

        closed = await self.session_manager.close_all(cancel_inflight=True)
        self.logger.info(f"Closed {closed} sessions")

        if self.transport:
            try:
                await self.transport.stop()
                self.logger.info("Transport stopped")
            except Exception as e:
                self.logger.error(f"Error stopping transport: {e}")

        self.logger.info("Server stopped")

    async def run(self) -> None:
        """
        Run server until interrupted

        Starts server and runs forever (until SIGINT/SIGTERM)
        """
        await self.start()

        try:
            while self._is_running:
                await asyncio.sleep(1)
        except asyncio.CancelledError:
            self.logger.info("Interrupted")
        finally:
            await self.stop()

    # ========================================================================
    # Dispatch
    # ========================================================================

    async def submit(self, session_id: Optional[str], frame: Union[bytes, str]) -> None:
        """
        Accept one posted frame for a session

        Returns as soon as the request is scheduled; its Response is
        delivered to the session stream later.

        Args:
            session_id: Session the frame was posted to
            frame: Raw JSON-RPC frame

        Raises:
            SessionNotFoundError: If the session is unknown or closed
            MalformedRequestError: If the frame cannot be decoded (an error
                with id null is also pushed on the session stream)
        """
        session = await self.session_manager.get(session_id)
        self._total_requests += 1

        try:
            message = decode_request(frame)

        except MalformedRequestError as e:
            self.logger.warning(f"Malformed frame on {session.session_id[:8]}: {e.message}")
            await self.session_manager.deliver(
                session.session_id, Response.failure(None, e).to_jsonrpc()
            )
            raise

        except RequestDecodeError as e:
            self.logger.info(
                f"Rejected request {e.request_id} on {session.session_id[:8]}: "
                f"{e.error.kind}: {e.error.message}"
            )
            await self.session_manager.deliver(
                session.session_id, Response.failure(e.request_id, e.error).to_jsonrpc()
            )
            return

        if isinstance(message, Notification):
            await self.protocol_handler.handle_notification(session, message)
            return

        task = asyncio.create_task(
            self._dispatch(session, message),
            name=f"mcp-{session.session_id[:8]}-{message.request_id}",
        )
        session.track(task)

    async def _dispatch(self, session: Session, request: Request) -> None:
        """Run one request and deliver its Response to its own session"""
        response = await self.protocol_handler.handle_request(session, request)
        await self.session_manager.deliver(session.session_id, response.to_jsonrpc())

    # ========================================================================
    # Monitoring
    # ========================================================================

    def get_info(self) -> Dict[str, Any]:
        """
        Server identity for the info endpoint

        Returns:
            dict: name, version, status, endpoints and tools
        """
        return {
            "name": SERVER_DISPLAY_NAME,
            "version": self.server_version,
            "status": "running" if self._is_running else "stopped",
            "endpoints": {
                INFO_PATH: "Server information (this response)",
                SSE_PATH: "Server-Sent Events endpoint for MCP connection",
                MESSAGES_PATH: "POST endpoint for MCP messages",
            },
            "tools": [
                {"name": tool.name, "description": tool.description}
                for tool in self.registry.list_tools()
            ],
        }

    def get_status(self) -> ServerStatus:
        """
        Get server status

        Returns:
            ServerStatus: Current server status
        """
        return ServerStatus(
            name=self.server_name,
            version=self.server_version,
            protocol_version=MCP_PROTOCOL_VERSION,
            is_running=self._is_running,
            is_listening=self.is_listening,
            uptime_seconds=self.uptime_seconds,
            total_requests=self._total_requests,
            active_sessions=self.session_manager.active_count,
            capabilities=self.registry.get_summary(),
            timestamp=datetime.now(timezone.utc),
        )
