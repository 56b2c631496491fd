"""
Unit tests for WebSocketConnection.

Tests FIFO writing through the single writer task, drain on close and
behaviour when the socket fails.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

from messager.infrastructure.websocket import WebSocketConnection


def make_websocket() -> MagicMock:
    websocket = MagicMock()
    websocket.send_json = AsyncMock()
    websocket.close = AsyncMock()
    return websocket


class TestWebSocketConnection:
    """Unit tests for WebSocketConnection."""

    async def test_events_written_in_push_order(self):
        """Test writer sends events in enqueue order."""
        websocket = make_websocket()
        conn = WebSocketConnection(websocket, "alice")
        conn.start()

        for i in range(5):
            assert conn.push({"type": "n", "i": i}) is True
        await conn.close()

        sent = [call.args[0]["i"] for call in websocket.send_json.await_args_list]
        assert sent == [0, 1, 2, 3, 4]
        websocket.close.assert_awaited_once()

    async def test_push_after_close_dropped(self):
        """Test push returns False once closed."""
        websocket = make_websocket()
        conn = WebSocketConnection(websocket, "alice")
        conn.start()

        await conn.close(code=1001, reason="bye")

        assert conn.is_closed
        assert conn.push({"type": "ping"}) is False
        websocket.close.assert_awaited_once_with(code=1001, reason="bye")

    async def test_push_does_not_wait_for_socket(self):
        """Test push returns immediately even while a send is blocked."""
        release = asyncio.Event()
        websocket = make_websocket()

        async def slow_send(event):
            await release.wait()

        websocket.send_json.side_effect = slow_send
        conn = WebSocketConnection(websocket, "alice")
        conn.start()

        assert conn.push({"type": "a"}) is True
        assert conn.push({"type": "b"}) is True

        release.set()
        await conn.close()
        assert websocket.send_json.await_count == 2

    async def test_send_failure_marks_closed(self):
        """Test a failing send stops the writer and closes the handle."""
        websocket = make_websocket()
        websocket.send_json.side_effect = RuntimeError("socket gone")
        conn = WebSocketConnection(websocket, "alice")
        conn.start()

        conn.push({"type": "a"})
        await asyncio.sleep(0.01)

        assert conn.is_closed
        assert conn.push({"type": "b"}) is False

    async def test_drain_timeout_cancels_writer(self):
        """Test drain gives up after timeout."""
        websocket = make_websocket()

        async def never_returns(event):
            await asyncio.sleep(3600)

        websocket.send_json.side_effect = never_returns
        conn = WebSocketConnection(websocket, "alice")
        conn.start()
        conn.push({"type": "a"})
        await asyncio.sleep(0)

        await conn.drain(timeout=0.05)

        assert conn.is_closed

    async def test_close_tolerates_closed_socket(self):
        """Test closing an already-closed socket does not raise."""
        websocket = make_websocket()
        websocket.close.side_effect = RuntimeError("already closed")
        conn = WebSocketConnection(websocket, "alice")
        conn.start()

        await conn.close()

    async def test_abort_stops_writer(self):
        """Test abort cancels the writer without flushing."""
        websocket = make_websocket()
        conn = WebSocketConnection(websocket, "alice")
        conn.start()

        await conn.abort()

        assert conn.is_closed
        websocket.close.assert_not_called()
