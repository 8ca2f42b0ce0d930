"""
Session Manager - Session-keyed routing of outbound messages

Module: session.session_manager
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Initial implementation
  - One Session per connected client, keyed by session id
  - Lookup, delivery and teardown serialized by one lock
  - Responses for closed sessions discarded, never re-routed
  - Optional cancellation of in-flight requests at shutdown

ARCHITECTURE:
The SessionManager owns the mapping session id -> Session. Every delivery
looks its session up by id at delivery time, so a response can only reach
the stream of the session that issued the request. Mutations (open, close)
and lookups (get, deliver) take the same asyncio.Lock; the lock is never
held across any other await.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from .session import Session
from ..core.errors import SessionNotFoundError


class SessionManager:
    """
    Tracks open sessions

    Typical usage (by the transport):
        session = await manager.open_session()
        ...
        await manager.close_session(session.session_id)
    """

    def __init__(self):
        """Initialize session manager"""
        self.logger = logging.getLogger("session.manager")
        self._sessions: Dict[str, Session] = {}
        self._lock = asyncio.Lock()
        self._total_opened = 0

    @property
    def active_count(self) -> int:
        return len(self._sessions)

    @property
    def total_opened(self) -> int:
        return self._total_opened

    async def open_session(self, session_id: Optional[str] = None) -> Session:
        """
        Allocate and open a new session

        Args:
            session_id: Optional pre-assigned id

        Returns:
            Session: The open session
        """
        session = Session(session_id)
        async with self._lock:
            if session.session_id in self._sessions:
                raise ValueError(f"Session id already in use: {session.session_id}")
            self._sessions[session.session_id] = session
            session.mark_open()
            self._total_opened += 1

        self.logger.info(
            f"Session opened: {session.session_id} ({len(self._sessions)} active)"
        )
        return session

    async def get(self, session_id: Optional[str]) -> Session:
        """
        Look up an open session

        Raises:
            SessionNotFoundError: If the id is unknown or the session closed
        """
        async with self._lock:
            session = self._sessions.get(session_id) if session_id else None
            if session is None or not session.is_open:
                raise SessionNotFoundError(session_id)
            return session

    async def deliver(self, session_id: str, message: Dict[str, Any]) -> bool:
        """
        Push a message onto the stream of one session

        Args:
            session_id: Target session
            message: JSON-RPC message dict

        Returns:
            bool: False if the session is gone (message discarded)
        """
        async with self._lock:
            session = self._sessions.get(session_id)
            delivered = session is not None and session.push(message)

        if not delivered:
            self.logger.debug(
                f"Discarding message {message.get('id')} for closed session {session_id}"
            )
        return delivered

    async def close_session(self, session_id: str, cancel_inflight: bool = False) -> bool:
        """
        Close and forget a session

        In-flight requests keep running and their responses are discarded,
        unless cancel_inflight is set.

        Args:
            session_id: Session to close
            cancel_inflight: Cancel the session's pending dispatch tasks

        Returns:
            bool: True if a session was closed
        """
        async with self._lock:
            session = self._sessions.pop(session_id, None)
            if session is not None:
                session.mark_closed()

        if session is None:
            return False

        if cancel_inflight:
            cancelled = session.cancel_pending()
            if cancelled:
                self.logger.info(f"Cancelled {cancelled} requests of {session_id}")

        self.logger.info(
            f"Session closed: {session_id} ({len(self._sessions)} active)"
        )
        return True

    async def close_all(self, cancel_inflight: bool = True) -> int:
        """
        Close every session (process shutdown)

        Returns:
            int: Number of sessions closed
        """
        async with self._lock:
            session_ids = list(self._sessions)

        closed = 0
        for session_id in session_ids:
            if await self.close_session(session_id, cancel_inflight=cancel_inflight):
                closed += 1
        return closed

    def list_sessions(self) -> List[Dict[str, Any]]:
        """Snapshot of open sessions"""
        return [session.get_info() for session in self._sessions.values()]
