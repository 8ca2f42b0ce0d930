"""
SSE Transport for MCP Protocol

Module: transport.sse_transport
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Server-Sent Events transport (replaces WebSocket)
  - GET /sse opens one session and streams its responses
  - POST /messages?sessionId=<id> submits one JSON-RPC frame
  - GET / serves the server identity
  - Keepalive comments on idle streams
  - CORS for browser clients

[2025-11-23 v0.1.0-alpha] WebSocket Transport Implementation
  - aiohttp HTTP server
  - Multiple concurrent clients
  - JSON-RPC over WebSocket

ARCHITECTURE:
SSETransport runs an aiohttp web.Application:

    GET  /sse       -> text/event-stream
                       event: endpoint  data: /messages?sessionId=<id>
                       event: message   data: <JSON-RPC response>
                       : keepalive
    POST /messages  -> 202 Accepted (response arrives on the stream)
                       400 missing sessionId / malformed frame
                       404 unknown or closed session
    GET  /          -> server identity (JSON)

Each stream owns exactly one session; the stream handler drains that
session's outbound queue and closes the session when the client goes away.

SECURITY NOTES:
- CORS allows every origin (GET, POST, OPTIONS), without credentials
- Request bodies bounded by max_request_size
- No authentication (out of scope)
"""

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from aiohttp import web

from .base_transport import BaseTransport
from ..core.constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_KEEPALIVE_INTERVAL,
    MAX_REQUEST_SIZE,
    INFO_PATH,
    SSE_PATH,
    MESSAGES_PATH,
    SESSION_QUERY_PARAM,
    SSE_EVENT_ENDPOINT,
    SSE_EVENT_MESSAGE,
)
from ..core.errors import MalformedRequestError, SessionNotFoundError
from ..session.session import STREAM_END

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

SSE_HEADERS = {
    "Content-Type": "text/event-stream",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


@dataclass
class SSEConfig:
    """SSE Transport Configuration"""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    keepalive_interval: float = DEFAULT_KEEPALIVE_INTERVAL
    max_request_size: int = MAX_REQUEST_SIZE


@web.middleware
async def cors_middleware(request: web.Request, handler):
    """Add CORS headers to every non-streaming response"""
    response = await handler(request)
    if not response.prepared:
        response.headers.update(CORS_HEADERS)
    return response


def format_event(event: str, data: str) -> bytes:
    """Encode one SSE event"""
    lines = [f"event: {event}"]
    lines.extend(f"data: {line}" for line in data.split("\n"))
    return ("\n".join(lines) + "\n\n").encode("utf-8")


class SSETransport(BaseTransport):
    """
    SSE Transport for MCP Protocol

    One event stream per client, multiple concurrent clients.
    Uses JSON-RPC 2.0: requests are POSTed, responses are streamed.
    """

    def __init__(self, config: Optional[SSEConfig] = None):
        """
        Initialize SSE Transport

        Args:
            config: SSEConfig instance (uses defaults if None)
        """
        super().__init__(name="sse")
        self.config = config or SSEConfig()
        self.app: Optional[web.Application] = None
        self.runner: Optional[web.AppRunner] = None
        self.streams: Dict[str, web.StreamResponse] = {}

    def create_app(self) -> web.Application:
        """
        Build the aiohttp application

        Returns:
            web.Application: Routes for info, stream and messages
        """
        app = web.Application(
            middlewares=[cors_middleware],
            client_max_size=self.config.max_request_size,
        )
        app.router.add_get(INFO_PATH, self._handle_info)
        app.router.add_get(SSE_PATH, self._handle_sse)
        app.router.add_post(MESSAGES_PATH, self._handle_messages)
        for path in (INFO_PATH, SSE_PATH, MESSAGES_PATH):
            app.router.add_route("OPTIONS", path, self._handle_preflight)
        app.on_shutdown.append(self._on_shutdown)
        return app

    async def start(self) -> None:
        """Start HTTP server"""
        self._check_configured()

        try:
            self.app = self.create_app()

            self.runner = web.AppRunner(self.app)
            await self.runner.setup()
            site = web.TCPSite(
                self.runner,
                self.config.host,
                self.config.port,
            )
            await site.start()

            self.is_running = True
            self.logger.info(
                f"SSE server started on {self.config.host}:{self.config.port}"
            )

        except Exception as e:
            self.logger.error(f"Server startup failed: {e}")
            self.is_running = False
            raise

    async def stop(self) -> None:
        """Stop HTTP server and end all streams"""
        if self.runner:
            await self.runner.cleanup()
            self.runner = None

        self.is_running = False
        self.logger.info("SSE transport stopped")

    async def _on_shutdown(self, app: web.Application) -> None:
        """Close the sessions of open streams so their handlers return"""
        if self._session_manager is None:
            return
        for session_id in list(self.streams):
            await self._session_manager.close_session(session_id, cancel_inflight=True)

    # ========================================================================
    # Handlers
    # ========================================================================

    async def _handle_info(self, request: web.Request) -> web.Response:
        """Handle GET / request"""
        info: Dict[str, Any] = self._info_provider() if self._info_provider else {}
        return web.json_response(info)

    async def _handle_preflight(self, request: web.Request) -> web.Response:
        """Handle CORS preflight"""
        return web.Response(status=204)

    async def _handle_sse(self, request: web.Request) -> web.StreamResponse:
        """Handle GET /sse: open a session and stream its messages"""
        self._check_configured()
        session = await self._session_manager.open_session()
        session_id = session.session_id

        response = web.StreamResponse(status=200, headers={**SSE_HEADERS, **CORS_HEADERS})

        # Everything after open_session() runs under the finally below
        try:
            await response.prepare(request)
            self.streams[session_id] = response
            self.logger.info(f"SSE client connected: {session_id}")

            endpoint = f"{MESSAGES_PATH}?{SESSION_QUERY_PARAM}={session_id}"
            await response.write(format_event(SSE_EVENT_ENDPOINT, endpoint))

            while True:
                try:
                    message = await asyncio.wait_for(
                        session.next_outbound(),
                        timeout=self.config.keepalive_interval,
                    )
                except asyncio.TimeoutError:
                    await response.write(b": keepalive\n\n")
                    continue

                if message is STREAM_END:
                    break
                await response.write(format_event(SSE_EVENT_MESSAGE, json.dumps(message)))

        except ConnectionResetError:
            self.logger.info(f"SSE client went away: {session_id}")

        finally:
            self.streams.pop(session_id, None)
            await self._session_manager.close_session(session_id)
            self.logger.info(f"SSE client disconnected: {session_id}")

        return response

    async def _handle_messages(self, request: web.Request) -> web.Response:
        """Handle POST /messages?sessionId=<id>"""
        session_id = request.query.get(SESSION_QUERY_PARAM)
        if not session_id:
            return web.json_response(
                {"error": f"Missing {SESSION_QUERY_PARAM} query parameter"},
                status=400,
            )

        body = await request.read()

        try:
            await self._message_handler(session_id, body)

        except SessionNotFoundError as e:
            self.logger.warning(f"POST for unknown session: {session_id}")
            return web.json_response({"error": e.to_error_dict()}, status=404)

        except MalformedRequestError as e:
            return web.json_response({"error": e.to_error_dict()}, status=400)

        return web.Response(status=202, text="Accepted")

    def get_stream_count(self) -> int:
        """Get number of open event streams"""
        return len(self.streams)
