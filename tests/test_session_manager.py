"""
Unit Tests - Sessions

Module: tests.test_session_manager
Date: 2025-12-02
Version: 1.0.0

DESCRIPTION:
Tests for session.session and session.session_manager:
- Session lifecycle (CONNECTING -> OPEN -> CLOSED)
- Lookup of unknown and closed sessions
- Delivery to the right stream only
- Discarding of messages for closed sessions
- Cancellation of in-flight tasks at shutdown
"""

import asyncio
import unittest
from datetime import timezone

from mcp_sse_server.core.errors import SessionNotFoundError
from mcp_sse_server.session.session import STREAM_END, Session, SessionState
from mcp_sse_server.session.session_manager import SessionManager


class TestSession(unittest.IsolatedAsyncioTestCase):
    """Test a single session"""

    async def test_lifecycle(self):
        session = Session()
        self.assertEqual(session.state, SessionState.CONNECTING)
        self.assertFalse(session.push({"id": 1}))

        session.mark_open()
        self.assertTrue(session.is_open)
        self.assertTrue(session.push({"id": 1}))
        self.assertEqual(await session.next_outbound(), {"id": 1})

        session.mark_closed()
        self.assertEqual(session.state, SessionState.CLOSED)
        self.assertFalse(session.push({"id": 2}))
        self.assertIs(await session.next_outbound(), STREAM_END)

    async def test_unique_ids(self):
        ids = {Session().session_id for _ in range(50)}
        self.assertEqual(len(ids), 50)

    async def test_record_request(self):
        session = Session()
        session.record_request()
        session.record_request()
        self.assertEqual(session.get_info()["request_count"], 2)

    async def test_timestamps_are_utc_aware(self):
        session = Session()
        session.record_request()
        self.assertEqual(session.created_at.tzinfo, timezone.utc)
        self.assertEqual(session.metadata.last_activity.tzinfo, timezone.utc)
        self.assertTrue(session.get_info()["created_at"].endswith("+00:00"))


class TestSessionManager(unittest.IsolatedAsyncioTestCase):
    """Test session routing"""

    async def asyncSetUp(self):
        self.manager = SessionManager()

    async def test_open_and_get(self):
        session = await self.manager.open_session()
        self.assertIs(await self.manager.get(session.session_id), session)
        self.assertEqual(self.manager.active_count, 1)
        self.assertEqual(self.manager.total_opened, 1)

    async def test_unknown_session(self):
        for session_id in ("nope", "", None):
            with self.subTest(session_id=session_id):
                with self.assertRaises(SessionNotFoundError):
                    await self.manager.get(session_id)

    async def test_closed_session_never_resolves(self):
        old = await self.manager.open_session()
        await self.manager.close_session(old.session_id)
        newer = await self.manager.open_session()

        with self.assertRaises(SessionNotFoundError):
            await self.manager.get(old.session_id)
        self.assertNotEqual(old.session_id, newer.session_id)
        self.assertIs(await self.manager.get(newer.session_id), newer)

    async def test_delivery_reaches_only_its_session(self):
        a = await self.manager.open_session()
        b = await self.manager.open_session()

        self.assertTrue(await self.manager.deliver(a.session_id, {"id": "for-a"}))
        self.assertTrue(await self.manager.deliver(b.session_id, {"id": "for-b"}))

        self.assertEqual(await a.next_outbound(), {"id": "for-a"})
        self.assertEqual(await b.next_outbound(), {"id": "for-b"})

    async def test_delivery_after_close_is_discarded(self):
        a = await self.manager.open_session()
        b = await self.manager.open_session()
        await self.manager.close_session(a.session_id)

        self.assertFalse(await self.manager.deliver(a.session_id, {"id": 1}))
        self.assertIs(await a.next_outbound(), STREAM_END)
        self.assertTrue(b.is_open)

    async def test_close_twice(self):
        session = await self.manager.open_session()
        self.assertTrue(await self.manager.close_session(session.session_id))
        self.assertFalse(await self.manager.close_session(session.session_id))

    async def test_in_flight_task_survives_close(self):
        session = await self.manager.open_session()
        release = asyncio.Event()

        async def pending():
            await release.wait()
            return "done"

        task = asyncio.create_task(pending())
        session.track(task)
        await self.manager.close_session(session.session_id)

        release.set()
        self.assertEqual(await task, "done")
        self.assertEqual(session.pending_tasks, 0)

    async def test_close_all_cancels_in_flight(self):
        session = await self.manager.open_session()
        task = asyncio.create_task(asyncio.sleep(10))
        session.track(task)

        closed = await self.manager.close_all(cancel_inflight=True)
        self.assertEqual(closed, 1)
        with self.assertRaises(asyncio.CancelledError):
            await task
        self.assertEqual(self.manager.active_count, 0)

    async def test_list_sessions(self):
        await self.manager.open_session("fixed-id")
        sessions = self.manager.list_sessions()
        self.assertEqual(sessions[0]["session_id"], "fixed-id")
        self.assertEqual(sessions[0]["state"], "open")
        with self.assertRaises(ValueError):
            await self.manager.open_session("fixed-id")


if __name__ == "__main__":
    unittest.main()
