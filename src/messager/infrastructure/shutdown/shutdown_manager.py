"""
Graceful shutdown coordination.

Owns the service's running/shutting-down/shutdown state, translates
SIGTERM and SIGINT into a shutdown request and runs the registered
cleanup callbacks exactly once, bounded by shutdown_timeout.
"""

import asyncio
import inspect
import signal
import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from messager.reporter import Emoji, SystemReporter

HANDLED_SIGNALS = (signal.SIGTERM, signal.SIGINT)


class ShutdownState(Enum):
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    SHUTDOWN = "shutdown"


class ShutdownManager:
    """
    Shutdown state machine: RUNNING -> SHUTTING_DOWN -> SHUTDOWN.

    While SHUTTING_DOWN the WebSocket endpoint refuses new handshakes
    with 1001 and health reports 503. Callbacks (sync or async) run in
    registration order; a failing or slow callback is logged and the
    rest still run.
    """

    def __init__(
        self,
        shutdown_timeout: int = 30,
        grace_period: int = 5,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Args:
            shutdown_timeout: Seconds each cleanup callback may take
            grace_period: Seconds connected clients get to leave on their own
            reporter: Optional reporter
        """
        self.shutdown_timeout = shutdown_timeout
        self.grace_period = grace_period
        self.reporter = reporter

        self.state = ShutdownState.RUNNING
        self.shutdown_started_at: Optional[datetime] = None
        self.shutdown_reason: Optional[str] = None
        self._initiated = asyncio.Event()
        self._callbacks: List[Callable] = []
        self._saved_handlers: Dict[int, Any] = {}

    def is_running(self) -> bool:
        return self.state is ShutdownState.RUNNING

    def is_shutting_down(self) -> bool:
        return not self.is_running()

    def register_shutdown_callback(self, callback: Callable) -> None:
        self._callbacks.append(callback)

    # ============================================================
    # Signals
    # ============================================================

    def setup_signal_handlers(self) -> bool:
        """
        Route SIGTERM/SIGINT to initiate_shutdown.

        Returns:
            False when called off the main thread, where Python does
            not allow installing signal handlers
        """
        if threading.current_thread() is not threading.main_thread():
            self._log_warning("Signal handlers skipped: not on the main thread")
            return False

        for sig in HANDLED_SIGNALS:
            self._saved_handlers[sig] = signal.getsignal(sig)
            signal.signal(sig, self._on_signal)
        return True

    def restore_signal_handlers(self) -> None:
        while self._saved_handlers:
            sig, handler = self._saved_handlers.popitem()
            signal.signal(sig, handler)

    def _on_signal(self, signum: int, frame) -> None:
        reason = signal.Signals(signum).name
        asyncio.get_event_loop().create_task(self.initiate_shutdown(reason))

    # ============================================================
    # Shutdown sequence
    # ============================================================

    async def initiate_shutdown(self, reason: str = "manual") -> None:
        """
        Enter SHUTTING_DOWN and run the cleanup callbacks.

        Only the first call does anything.
        """
        if not self.is_running():
            return

        self.state = ShutdownState.SHUTTING_DOWN
        self.shutdown_started_at = datetime.now(timezone.utc)
        self.shutdown_reason = reason
        self._initiated.set()

        if self.reporter:
            self.reporter.warning(
                f"{Emoji.SYSTEM.SHUTDOWN} Shutdown initiated (reason: {reason})",
                context="ShutdownManager",
            )

        for callback in self._callbacks:
            await self._run_callback(callback)

    async def _run_callback(self, callback: Callable) -> None:
        name = getattr(callback, "__name__", repr(callback))
        try:
            if inspect.iscoroutinefunction(callback):
                await asyncio.wait_for(callback(), timeout=self.shutdown_timeout)
            else:
                callback()
        except asyncio.TimeoutError:
            if self.reporter:
                self.reporter.error(
                    f"{Emoji.NETWORK.TIMEOUT} Shutdown callback {name} exceeded "
                    f"{self.shutdown_timeout}s",
                    context="ShutdownManager",
                )
        except Exception as e:
            if self.reporter:
                self.reporter.error(
                    f"{Emoji.ERROR.ERROR} Shutdown callback {name} failed: {e}",
                    context="ShutdownManager",
                )

    async def wait_for_shutdown(self) -> None:
        """Block until shutdown has been initiated."""
        await self._initiated.wait()

    def mark_shutdown_complete(self) -> None:
        self.state = ShutdownState.SHUTDOWN

    def get_shutdown_info(self) -> Dict[str, Any]:
        started = self.shutdown_started_at
        return {
            "state": self.state.value,
            "is_shutting_down": self.is_shutting_down(),
            "reason": self.shutdown_reason,
            "shutdown_started_at": started.isoformat() if started else None,
            "shutdown_timeout": self.shutdown_timeout,
            "grace_period": self.grace_period,
        }

    def _log_warning(self, msg: str) -> None:
        if self.reporter:
            self.reporter.warning(msg, context="ShutdownManager", verbose_level=2)
