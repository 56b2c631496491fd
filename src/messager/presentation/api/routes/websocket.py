"""
WebSocket endpoint: authenticated real-time channel per client tab.
"""

import asyncio
import json
import time
from typing import Any, Dict

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status

from messager.di import Container
from messager.domain.auth import AuthenticatedUser
from messager.infrastructure.presence import ConnectionLimitExceeded
from messager.infrastructure.websocket import WebSocketConnection
from messager.presentation.api.dependencies import authenticate_websocket, get_container
from messager.reporter import Emoji

router = APIRouter(tags=["websocket"])


@router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    auth: AuthenticatedUser = Depends(authenticate_websocket),
    container: Container = Depends(get_container),
):
    """
    Real-time channel for one authenticated client.

    The handshake must carry an access token (Authorization header or
    `token` query parameter); otherwise it was already closed with 1008.
    After accept, the client first receives a presence-snapshot, then
    new-message, message-status, presence-update and other events.

    Connection examples:
        - ws://localhost:3000/ws  (Authorization: Bearer eyJ...)
        - ws://localhost:3000/ws?token=eyJ...
    """
    if auth is None:
        return

    reporter = container.reporter
    shutdown_manager = container.shutdown_manager

    if shutdown_manager.is_shutting_down():
        reporter.warning(
            f"Connection rejected: server shutting down [user={auth.user_id}]",
            context="WebSocket",
        )
        await websocket.close(
            code=status.WS_1001_GOING_AWAY, reason="Server is shutting down"
        )
        return

    await websocket.accept()

    registry = container.presence_registry
    connection = WebSocketConnection(websocket, auth.user_id, reporter=reporter)
    connection.start()

    try:
        registry.on_connect(auth.user_id, connection)
    except ConnectionLimitExceeded as e:
        connection.push(
            {
                "type": "error",
                "code": "CONNECTION_LIMIT_EXCEEDED",
                "message": str(e),
            }
        )
        await connection.close(
            code=status.WS_1008_POLICY_VIOLATION, reason="Connection limit exceeded"
        )
        return

    container.increment_stat("total_connections")
    connection.push(
        {
            "type": "presence-snapshot",
            "onlineUsers": sorted(registry.broadcast_presence_snapshot()),
        }
    )

    reporter.info(
        f"{Emoji.NETWORK.CONNECTED} Client connected [conn={connection.id}] "
        f"[user={auth.user_id}] [total={registry.get_total_connections()}]",
        context="WebSocket",
    )

    connection_start_time = time.time()
    events_received = 0
    heartbeat = container.settings.heartbeat_interval

    try:
        while not shutdown_manager.is_shutting_down():
            try:
                data = await asyncio.wait_for(
                    websocket.receive_text(), timeout=heartbeat
                )
            except asyncio.TimeoutError:
                connection.push({"type": "ping"})
                reporter.debug(
                    f"{Emoji.SYSTEM.HEARTBEAT} Heartbeat ping: user={auth.user_id}",
                    context="WebSocket",
                )
                continue

            events_received += 1
            _handle_client_event(data, connection, container)

    except WebSocketDisconnect:
        reporter.info(
            f"{Emoji.NETWORK.DISCONNECT} Client disconnected [conn={connection.id}] "
            f"[user={auth.user_id}]",
            context="WebSocket",
        )

    except Exception as e:
        reporter.error(
            f"WebSocket connection error [conn={connection.id}]: "
            f"{type(e).__name__}: {e}",
            context="WebSocket",
        )

    finally:
        registry.on_disconnect(connection)
        if shutdown_manager.is_shutting_down():
            await connection.close(
                code=status.WS_1001_GOING_AWAY,
                reason="Server shutdown",
                timeout=shutdown_manager.grace_period or 1,
            )
        else:
            await connection.abort()

        reporter.info(
            f"Connection closed [conn={connection.id}] "
            f"[duration={time.time() - connection_start_time:.2f}s] "
            f"[events={events_received}]",
            context="WebSocket",
            verbose_level=2,
        )


def _handle_client_event(
    raw: str, connection: WebSocketConnection, container: Container
) -> None:
    """
    Handle one client frame.

    Supported: "ping" (plain or JSON) and typing indicators. Sending
    messages goes through the REST API so it shares validation and
    persistence with every other client.
    """
    if raw == "ping":
        connection.push({"type": "pong"})
        return

    try:
        event: Dict[str, Any] = json.loads(raw)
    except json.JSONDecodeError:
        connection.push(
            {"type": "error", "code": "INVALID_JSON", "message": "Invalid JSON"}
        )
        return

    if not isinstance(event, dict):
        connection.push(
            {"type": "error", "code": "INVALID_EVENT", "message": "Expected object"}
        )
        return

    event_type = event.get("type")

    if event_type == "ping":
        connection.push({"type": "pong"})

    elif event_type == "typing":
        target = event.get("to")
        if not isinstance(target, str) or not target or target == connection.user_id:
            connection.push(
                {
                    "type": "error",
                    "code": "INVALID_EVENT",
                    "message": "typing requires a recipient",
                }
            )
            return
        is_typing = bool(event.get("isTyping", True))
        relayed = container.presence_registry.push_to_user(
            target,
            {"type": "typing", "from": connection.user_id, "isTyping": is_typing},
        )
        container.reporter.debug(
            f"{Emoji.MESSAGE.TYPING} Typing={is_typing} {connection.user_id} -> "
            f"{target} ({relayed} connection(s))",
            context="WebSocket",
        )

    else:
        connection.push(
            {
                "type": "error",
                "code": "UNKNOWN_EVENT",
                "message": f"Unknown event type: {event_type}",
            }
        )
