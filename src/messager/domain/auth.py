"""
Authentication domain models for Messager.

Defines the JWT payload, issued token pairs and the authenticated
user context attached to requests and connections.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from messager.domain.entities import User
from messager.domain.value_objects import TokenKind


class TokenPayload(BaseModel):
    """
    JWT token payload structure.

    Attributes:
        sub: User identity
        type: Token kind (access or refresh)
        exp: Expiration time (Unix timestamp)
        iat: Issued at time (Unix timestamp)
        jti: Unique token id
    """

    sub: str = Field(..., min_length=1, description="User identity")
    type: TokenKind = Field(..., description="Token kind")
    exp: int = Field(..., description="Expiration time (Unix timestamp)")
    iat: int = Field(..., description="Issued at time (Unix timestamp)")
    jti: str = Field(..., description="Unique token id")


class TokenPair(BaseModel):
    """Access and refresh token issued together."""

    access_token: str
    refresh_token: str


class AuthenticatedUser(BaseModel):
    """
    Identity resolved by the session middleware.

    Attached to requests and WebSocket connections. The user entity is
    kept for downstream handlers, only public fields are ever
    serialized.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    user_id: str
    token: TokenPayload
    user: User

    def public_profile(self) -> Dict[str, Any]:
        """User profile without secret material."""
        return self.user.to_public_dict()
