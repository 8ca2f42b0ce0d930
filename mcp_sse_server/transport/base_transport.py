"""
Base Transport Class - Abstract interface for all transport implementations

Module: transport.base_transport
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Session-aware transports
  - Message handler receives (session_id, frame)
  - SessionManager attached by the server
  - Info provider for the server identity endpoint

[2025-11-23 v0.1.0-alpha] Initial implementation
  - Abstract BaseTransport class
  - Connection lifecycle methods
  - Async-first design using asyncio

ARCHITECTURE:
BaseTransport is the abstract base class that transport implementations
inherit from. It defines the contract for:
- Starting/stopping the transport
- Handing posted frames to the server (message handler)
- Opening/closing sessions through the SessionManager
- Draining session streams onto the wire

SECURITY NOTES:
- Message validation delegated to protocol layer
- Session routing delegated to the SessionManager
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from ..session.session_manager import SessionManager

MessageHandler = Callable[[Optional[str], Union[bytes, str]], Awaitable[None]]
InfoProvider = Callable[[], Dict[str, Any]]


class BaseTransport(ABC):
    """
    Abstract base class for all transport implementations

    The transport layer is responsible for:
    1. Physical message transmission/reception
    2. Connection management (one session per stream)
    3. Encoding (JSON for MCP)
    4. Transport-specific error handling

    Not responsible for:
    1. Message validation (Protocol layer)
    2. Capability execution (ExecutionManager)
    """

    def __init__(self, name: str):
        """
        Initialize transport

        Args:
            name: Name of this transport instance
        """
        self.name = name
        self.is_running = False
        self.logger = logging.getLogger(f"transport.{name}")

        self._message_handler: Optional[MessageHandler] = None
        self._session_manager: Optional[SessionManager] = None
        self._info_provider: Optional[InfoProvider] = None

    @property
    def status(self) -> str:
        """Get current transport status"""
        return "running" if self.is_running else "stopped"

    def set_message_handler(self, handler: MessageHandler) -> None:
        """
        Set handler for posted frames

        Args:
            handler: Async callable(session_id, frame)
        """
        self._message_handler = handler

    def set_session_manager(self, session_manager: SessionManager) -> None:
        """Attach the SessionManager used to open and close streams"""
        self._session_manager = session_manager

    def set_info_provider(self, provider: InfoProvider) -> None:
        """Set callable returning the server identity payload"""
        self._info_provider = provider

    def _check_configured(self) -> None:
        if self._message_handler is None or self._session_manager is None:
            raise RuntimeError(f"Transport {self.name} is not attached to a server")

    @abstractmethod
    async def start(self) -> None:
        """
        Start the transport

        Must be implemented by subclasses to:
        1. Bind to address/socket
        2. Start listening for connections

        Raises:
            Exception: If transport cannot be started
        """

    @abstractmethod
    async def stop(self) -> None:
        """
        Stop the transport

        Must be implemented by subclasses to:
        1. Close all streams
        2. Unbind from address/socket
        3. Set is_running = False
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name}, status={self.status})"
