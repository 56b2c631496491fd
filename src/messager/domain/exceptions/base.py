"""
Base domain exceptions.
"""

from typing import Optional


class MessagerError(Exception):
    """Base exception for all Messager domain errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class ConfigError(MessagerError):
    """Raised when required configuration (e.g. a signing secret) is missing."""

    def __init__(self, message: str):
        super().__init__(message, code="CONFIG_ERROR")


class ValidationError(MessagerError):
    """Raised when request input fails validation."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(MessagerError):
    """Raised when an entity is not found in a repository."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} not found", code="NOT_FOUND")


class DuplicateEmailError(MessagerError):
    """Raised when signing up with an email that is already registered."""

    def __init__(self):
        super().__init__("Email already exists", code="DUPLICATE_EMAIL")


class PersistenceError(MessagerError):
    """Raised when the backing store rejects or fails a write."""

    def __init__(self, message: str = "Failed to persist data"):
        super().__init__(message, code="PERSISTENCE_ERROR")


class RateLimitExceededError(MessagerError):
    """Raised when a client exceeds a request rate limit."""

    def __init__(self, retry_after: int):
        self.retry_after = retry_after
        super().__init__(
            "Too many requests, please try again later", code="RATE_LIMITED"
        )
