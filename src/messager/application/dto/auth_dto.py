"""
DTOs for authentication flows.
"""

from dataclasses import dataclass
from typing import Any, Dict

from messager.domain.auth import TokenPair
from messager.domain.entities import User


@dataclass
class AuthResult:
    """
    Outcome of a successful signup or login.

    Attributes:
        user: Authenticated user entity
        tokens: Freshly issued access and refresh tokens
    """

    user: User
    tokens: TokenPair

    def to_dict(self) -> Dict[str, Any]:
        """Public profile plus tokens, as returned by the auth endpoints."""
        return {
            **self.user.to_public_dict(),
            "accessToken": self.tokens.access_token,
            "refreshToken": self.tokens.refresh_token,
        }
