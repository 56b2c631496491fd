"""
Messager - real-time one-to-one chat backend.

Orchestrates Clean Architecture components: token-based sessions,
presence tracking and message delivery over REST and WebSocket.
"""

import asyncio
import sys
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Callable, Optional

import uvicorn
from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware

from messager.config.settings import Settings, load_config
from messager.di import Container
from messager.infrastructure.websocket import WebSocketConnection
from messager.presentation.api.error_handler import register_error_handlers
from messager.presentation.api.routes import (
    auth_router,
    health_router,
    messages_router,
    websocket_router,
)
from messager.reporter import Emoji, SystemReporter


class MessagerApp:
    """
    Messager application orchestrator (composition root).

    Responsibilities:
        - Create reporter and DI container
        - Setup FastAPI application, middleware and error handlers
        - Manage lifecycle with graceful shutdown
        - Run uvicorn server
    """

    def __init__(
        self,
        settings: Settings,
        clock: Optional[Callable[[], datetime]] = None,
        **adapters: Any,
    ):
        """
        Initialize Messager application.

        Args:
            settings: Application settings
            clock: Optional clock for tokens and timestamps
            **adapters: Optional store/hasher/mail adapters for the container
        """
        self.settings = settings

        # Reporter first, everything else logs through it
        self.reporter = self._create_reporter()

        self.container = Container(
            settings, reporter=self.reporter, clock=clock, **adapters
        )
        self.app = self._create_app()
        self.server: Optional[uvicorn.Server] = None

        self.reporter.info(
            f"{Emoji.SYSTEM.READY} Messager initialized",
            context="Messager",
        )

    def _create_reporter(self) -> SystemReporter:
        return SystemReporter(
            name="messager",
            log_dir=self.settings.log_dir,
            level=self.settings.log_level,
            verbose=self.settings.verbose,
        )

    def _create_app(self) -> FastAPI:
        """
        Create FastAPI application with lifespan management.

        Returns:
            Configured FastAPI application
        """

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            await self._on_startup()
            yield
            await self._on_shutdown()

        app = FastAPI(
            title=self.settings.APP_NAME,
            description="Real-time one-to-one chat backend",
            version=self.settings.APP_VERSION,
            lifespan=lifespan,
        )
        app.state.container = self.container

        app.add_middleware(
            CORSMiddleware,
            allow_origins=self.settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
        register_error_handlers(app, self.reporter)

        app.include_router(auth_router)
        app.include_router(messages_router)
        app.include_router(websocket_router)
        app.include_router(health_router)

        return app

    async def _on_startup(self) -> None:
        """
        Validate configuration, open the database and install shutdown
        handling.

        Raises:
            ConfigError: Token secrets missing or identical (fatal)
            sqlalchemy.exc.SQLAlchemyError: Database unreachable (fatal)
        """
        self.reporter.info(
            f"{Emoji.SYSTEM.STARTUP} Messager starting...", context="Messager"
        )

        try:
            self.container.validate_configuration()
            await self.container.connect()
        except Exception as e:
            self.reporter.critical(
                f"{Emoji.SYSTEM.CONFIG_ERROR} Startup failed: {e}",
                context="Messager",
            )
            raise

        shutdown_manager = self.container.shutdown_manager
        shutdown_manager.setup_signal_handlers()
        shutdown_manager.register_shutdown_callback(self._graceful_shutdown_callback)

        self.reporter.info(
            f"Host: {self.settings.host}:{self.settings.port} "
            f"(access ttl {self.settings.access_token_expire_minutes}m, "
            f"refresh ttl {self.settings.refresh_token_expire_days}d)",
            context="Messager",
        )

    async def _graceful_shutdown_callback(self) -> None:
        """Notify and close every live connection, then stop uvicorn."""
        await self._close_all_connections_gracefully()

        if self.server:
            self.server.should_exit = True

    async def _on_shutdown(self) -> None:
        self.reporter.info(
            f"{Emoji.SYSTEM.SHUTDOWN} Messager shutting down...", context="Messager"
        )

        shutdown_manager = self.container.shutdown_manager
        await shutdown_manager.initiate_shutdown("lifespan")
        await self.container.close()

        shutdown_manager.restore_signal_handlers()
        shutdown_manager.mark_shutdown_complete()

        self.reporter.info("Messager stopped", context="Messager")

    async def _close_all_connections_gracefully(self) -> None:
        """
        Send a shutdown notice to every connection, wait the grace period,
        then close what is left with 1001.
        """
        registry = self.container.presence_registry
        total = registry.push_to_all(
            {
                "type": "shutdown",
                "message": "Server is shutting down",
                "code": status.WS_1001_GOING_AWAY,
            }
        )
        if total == 0:
            return

        grace_period = self.settings.shutdown_grace_period
        self.reporter.info(
            f"Notified {total} connections, waiting {grace_period}s for graceful close",
            context="Messager",
        )
        if grace_period:
            await asyncio.sleep(grace_period)

        closed = 0
        for connection in registry.get_all_connections():
            registry.on_disconnect(connection)
            if isinstance(connection, WebSocketConnection):
                await connection.close(
                    code=status.WS_1001_GOING_AWAY, reason="Server shutdown"
                )
                closed += 1

        if closed:
            self.reporter.info(
                f"{Emoji.SYSTEM.CLEANUP} Closed {closed} connections",
                context="Messager",
            )

    async def serve(self) -> None:
        """Run uvicorn with shutdown control."""
        config = uvicorn.Config(
            self.app,
            host=self.settings.host,
            port=self.settings.port,
            log_level=self.settings.log_level,
        )
        self.server = uvicorn.Server(config)
        await self.server.serve()

    def start(self) -> None:
        """Start the server. Blocks until stopped."""
        asyncio.run(self.serve())


def main() -> None:
    """
    Main entry point for Messager.

    Loads configuration and starts the server. An optional first
    argument overrides the port.
    """
    config = load_config()

    if len(sys.argv) > 1:
        try:
            config.port = int(sys.argv[1])
        except ValueError:
            print(f"Invalid port: {sys.argv[1]}")
            sys.exit(1)

    app = MessagerApp(config)

    try:
        app.start()
    except KeyboardInterrupt:
        print("\nMessager stopped by user")
        sys.exit(0)


if __name__ == "__main__":
    main()
