"""
WebSocket-backed connection handle.
"""

import asyncio
from typing import Any, Dict, Optional

from fastapi import WebSocket, status

from messager.domain.entities import Connection
from messager.reporter import Emoji, SystemReporter

_CLOSE = object()


class WebSocketConnection(Connection):
    """
    Connection handle with an outbound queue and a single writer task.

    push() only enqueues, the writer sends events in enqueue order.
    This keeps fan-out non-blocking while preserving per-connection
    ordering.
    """

    def __init__(
        self,
        websocket: WebSocket,
        user_id: str,
        reporter: Optional[SystemReporter] = None,
    ):
        super().__init__(user_id=user_id)
        self.websocket = websocket
        self.reporter = reporter
        self._queue: "asyncio.Queue[Any]" = asyncio.Queue()
        self._writer: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        """Start the writer task. Must be called from the event loop."""
        if self._writer is None:
            self._writer = asyncio.create_task(
                self._write_loop(), name=f"ws-writer-{self.id}"
            )

    def push(self, event: Dict[str, Any]) -> bool:
        if self._closed:
            return False
        self._queue.put_nowait(event)
        return True

    async def _write_loop(self) -> None:
        while True:
            event = await self._queue.get()
            if event is _CLOSE:
                return
            try:
                await self.websocket.send_json(event)
            except Exception as e:
                self._closed = True
                if self.reporter:
                    self.reporter.warning(
                        f"{Emoji.NETWORK.DISCONNECT} Send failed, dropping "
                        f"writer [connection={self.id}] "
                        f"[user={self.user_id}]: {type(e).__name__}: {e}",
                        context="WebSocketConnection",
                        verbose_level=2,
                    )
                return

    async def drain(self, timeout: float = 5.0) -> None:
        """
        Stop accepting events and wait for queued ones to be written.

        Args:
            timeout: Seconds to wait before cancelling the writer
        """
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(_CLOSE)

        if self._writer is None or self._writer.done():
            return

        try:
            await asyncio.wait_for(asyncio.shield(self._writer), timeout=timeout)
        except asyncio.TimeoutError:
            self._writer.cancel()
            if self.reporter:
                self.reporter.warning(
                    f"{Emoji.NETWORK.TIMEOUT} Writer drain timed out "
                    f"[connection={self.id}]",
                    context="WebSocketConnection",
                    verbose_level=2,
                )

    async def close(
        self,
        code: int = status.WS_1000_NORMAL_CLOSURE,
        reason: Optional[str] = None,
        timeout: float = 5.0,
    ) -> None:
        """
        Drain queued events, then close the socket.

        Closing a socket the peer already closed is logged and ignored.
        """
        await self.drain(timeout=timeout)
        try:
            await self.websocket.close(code=code, reason=reason)
        except RuntimeError as e:
            if self.reporter:
                self.reporter.debug(
                    f"Socket already closed [connection={self.id}]: {e}",
                    context="WebSocketConnection",
                )

    async def abort(self) -> None:
        """Stop the writer without flushing (peer is gone)."""
        self._closed = True
        if self._writer is not None and not self._writer.done():
            self._writer.cancel()
            await asyncio.wait({self._writer})
