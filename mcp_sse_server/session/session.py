"""
Session - Server-side state of one connected client

Module: session.session
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Streaming sessions
  - Session id, creation time and lifecycle state
  - One outbound queue per session (its only outbound stream)
  - Tracking of in-flight dispatch tasks
  - Client info recorded from initialize

[2025-11-23 v0.1.0-alpha] Initial implementation (ClientContext)
  - Client ID and metadata
  - Request count and timestamps

ARCHITECTURE:
A Session is created by the SessionManager when a client opens the event
stream:

    CONNECTING -> OPEN -> CLOSED

The transport drains the outbound queue onto the HTTP stream. Responses
are pushed with put_nowait() so that delivery never suspends. Once CLOSED,
pushes are refused and the stream writer is woken with a sentinel.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Set

# Sentinel pushed onto the outbound queue to stop the stream writer
STREAM_END = None


class SessionState(Enum):
    """Lifecycle state of a session"""
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


@dataclass
class SessionMetadata:
    """
    Metadata about a session

    Attributes:
        session_id: Unique session identifier
        created_at: When the stream was opened
        last_activity: Last message time
        request_count: Number of requests received
        client_info: clientInfo sent with initialize
    """
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_activity: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    request_count: int = 0
    client_info: Dict[str, Any] = field(default_factory=dict)

    def update_activity(self) -> None:
        self.last_activity = datetime.now(timezone.utc)

    def increment_request_count(self) -> None:
        self.request_count += 1


class Session:
    """
    One client connection

    Owns exactly one outbound stream (an asyncio.Queue drained by the
    transport) and the tasks dispatching its requests.
    """

    def __init__(self, session_id: Optional[str] = None):
        """
        Initialize session

        Args:
            session_id: Optional pre-assigned id (uuid4 otherwise)
        """
        self.metadata = SessionMetadata(
            session_id=session_id or str(uuid.uuid4())
        )
        self.logger = logging.getLogger(f"session.{self.session_id[:8]}")

        self._state = SessionState.CONNECTING
        self._outbound: asyncio.Queue = asyncio.Queue()
        self._tasks: Set[asyncio.Task] = set()

        self.protocol_version: Optional[str] = None
        self.initialized = False

    @property
    def session_id(self) -> str:
        return self.metadata.session_id

    @property
    def created_at(self) -> datetime:
        return self.metadata.created_at

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is SessionState.OPEN

    @property
    def request_count(self) -> int:
        return self.metadata.request_count

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    def mark_open(self) -> None:
        """CONNECTING -> OPEN"""
        if self._state is SessionState.CONNECTING:
            self._state = SessionState.OPEN
            self.logger.info("Session open")

    def mark_closed(self) -> None:
        """Any state -> CLOSED; wakes the stream writer"""
        if self._state is SessionState.CLOSED:
            return
        self._state = SessionState.CLOSED
        self._outbound.put_nowait(STREAM_END)
        self.logger.info(
            f"Session closed after {self.request_count} requests "
            f"({len(self._tasks)} still in flight)"
        )

    def record_request(self) -> None:
        """Record that a request was received on this session"""
        self.metadata.increment_request_count()
        self.metadata.update_activity()

    def push(self, message: Dict[str, Any]) -> bool:
        """
        Queue one outbound message

        Args:
            message: JSON-RPC message dict

        Returns:
            bool: False if the session is no longer open
        """
        if self._state is not SessionState.OPEN:
            return False
        self._outbound.put_nowait(message)
        return True

    async def next_outbound(self) -> Optional[Dict[str, Any]]:
        """Wait for the next outbound message (None = end of stream)"""
        return await self._outbound.get()

    def track(self, task: asyncio.Task) -> None:
        """Keep a dispatch task alive until it completes"""
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def cancel_pending(self) -> int:
        """
        Cancel in-flight dispatch tasks

        Returns:
            int: Number of tasks cancelled
        """
        cancelled = 0
        for task in list(self._tasks):
            if not task.done():
                task.cancel()
                cancelled += 1
        return cancelled

    def get_info(self) -> Dict[str, Any]:
        """Session summary for logs and diagnostics"""
        return {
            "session_id": self.session_id,
            "state": self._state.value,
            "created_at": self.metadata.created_at.isoformat(),
            "last_activity": self.metadata.last_activity.isoformat(),
            "request_count": self.metadata.request_count,
            "pending_tasks": len(self._tasks),
            "client_info": self.metadata.client_info,
        }

    def __repr__(self) -> str:
        return f"Session({self.session_id[:8]}, {self._state.value})"
