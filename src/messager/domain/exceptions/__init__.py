"""
Domain exceptions for Messager.
"""

from messager.domain.exceptions.auth_exceptions import (
    AuthenticationError,
    ForbiddenError,
    InvalidCredentialsError,
    TokenExpiredError,
    TokenInvalidError,
    UnauthenticatedError,
)
from messager.domain.exceptions.base import (
    ConfigError,
    DuplicateEmailError,
    MessagerError,
    NotFoundError,
    PersistenceError,
    RateLimitExceededError,
    ValidationError,
)
from messager.domain.exceptions.message_exceptions import PayloadTooLargeError

__all__ = [
    "AuthenticationError",
    "ConfigError",
    "DuplicateEmailError",
    "ForbiddenError",
    "InvalidCredentialsError",
    "MessagerError",
    "NotFoundError",
    "PayloadTooLargeError",
    "PersistenceError",
    "RateLimitExceededError",
    "TokenExpiredError",
    "TokenInvalidError",
    "UnauthenticatedError",
    "ValidationError",
]
