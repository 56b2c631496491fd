"""
Request/response schemas for Messager API.
"""

from messager.presentation.schemas.auth import (
    AuthResponse,
    LoginRequest,
    LogoutResponse,
    RefreshResponse,
    SignupRequest,
    UpdateProfileRequest,
)
from messager.presentation.schemas.messages import ReactionRequest, SendMessageRequest

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "LogoutResponse",
    "ReactionRequest",
    "RefreshResponse",
    "SendMessageRequest",
    "SignupRequest",
    "UpdateProfileRequest",
]
