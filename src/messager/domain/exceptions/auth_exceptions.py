"""
Authentication and authorization exceptions.
"""

from typing import Optional

from messager.domain.exceptions.base import MessagerError


class AuthenticationError(MessagerError):
    """Base for credential failures (HTTP 401)."""

    def __init__(self, message: str = "Unauthorized", code: str = "UNAUTHENTICATED"):
        super().__init__(message, code=code)


class UnauthenticatedError(AuthenticationError):
    """No credential was presented, or it did not resolve to a user."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="UNAUTHENTICATED")


class TokenExpiredError(AuthenticationError):
    """Token is past its expiry; access tokens may be refreshed."""

    def __init__(self, message: str = "Token expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class TokenInvalidError(AuthenticationError):
    """Token is malformed, tampered with, or of the wrong kind."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, code="TOKEN_INVALID")


class InvalidCredentialsError(MessagerError):
    """Login failed. Never says whether email or password was wrong."""

    def __init__(self):
        super().__init__("Invalid credentials", code="INVALID_CREDENTIALS")


class ForbiddenError(MessagerError):
    """Raised when an identity acts on a resource it does not own."""

    def __init__(
        self,
        message: str = "Forbidden",
        user_id: Optional[str] = None,
        resource: Optional[str] = None,
    ):
        self.user_id = user_id
        self.resource = resource
        super().__init__(message, code="FORBIDDEN")
