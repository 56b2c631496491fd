"""
API routes for Messager.
"""

from messager.presentation.api.routes.auth import router as auth_router
from messager.presentation.api.routes.health import router as health_router
from messager.presentation.api.routes.messages import router as messages_router
from messager.presentation.api.routes.websocket import router as websocket_router

__all__ = ["auth_router", "health_router", "messages_router", "websocket_router"]
