"""
Unit tests for domain exceptions.

Tests error codes, messages and the authentication hierarchy.
"""

import pytest

from messager.domain.exceptions import (
    AuthenticationError,
    ConfigError,
    DuplicateEmailError,
    ForbiddenError,
    InvalidCredentialsError,
    MessagerError,
    NotFoundError,
    PayloadTooLargeError,
    PersistenceError,
    TokenExpiredError,
    TokenInvalidError,
    UnauthenticatedError,
    ValidationError,
)


class TestExceptionCodes:
    """Unit tests for exception codes."""

    @pytest.mark.parametrize(
        "exc,code",
        [
            (ConfigError("missing"), "CONFIG_ERROR"),
            (ValidationError("bad"), "VALIDATION_ERROR"),
            (NotFoundError("User", "u1"), "NOT_FOUND"),
            (DuplicateEmailError(), "DUPLICATE_EMAIL"),
            (PersistenceError(), "PERSISTENCE_ERROR"),
            (UnauthenticatedError(), "UNAUTHENTICATED"),
            (TokenExpiredError(), "TOKEN_EXPIRED"),
            (TokenInvalidError(), "TOKEN_INVALID"),
            (InvalidCredentialsError(), "INVALID_CREDENTIALS"),
            (ForbiddenError(), "FORBIDDEN"),
            (PayloadTooLargeError(2, 1), "PAYLOAD_TOO_LARGE"),
        ],
    )
    def test_codes(self, exc, code):
        """Test each exception carries its code and is a MessagerError."""
        assert isinstance(exc, MessagerError)
        assert exc.code == code

    def test_token_errors_are_authentication_errors(self):
        """Test expired and invalid tokens share the authentication base."""
        assert issubclass(TokenExpiredError, AuthenticationError)
        assert issubclass(TokenInvalidError, AuthenticationError)
        assert issubclass(UnauthenticatedError, AuthenticationError)
        assert not issubclass(InvalidCredentialsError, AuthenticationError)

    def test_messages(self):
        """Test user-facing messages."""
        assert NotFoundError("User", "u1").message == "User not found"
        assert DuplicateEmailError().message == "Email already exists"
        assert InvalidCredentialsError().message == "Invalid credentials"
        assert TokenExpiredError().message == "Token expired"
        assert str(ValidationError("All fields are required")) == (
            "All fields are required"
        )

    def test_forbidden_keeps_context(self):
        """Test ForbiddenError records who and what."""
        exc = ForbiddenError("nope", user_id="bob", resource="m1")

        assert exc.user_id == "bob"
        assert exc.resource == "m1"
