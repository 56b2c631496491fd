"""
WebSocket infrastructure for Messager.
"""

from messager.infrastructure.websocket.websocket_connection import WebSocketConnection

__all__ = ["WebSocketConnection"]
