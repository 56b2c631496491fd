"""
Use case for signing up a new user.
"""

from typing import Optional

from messager.application.dto import AuthResult
from messager.domain.entities import User
from messager.domain.exceptions import ValidationError
from messager.domain.repositories import IUserRepository
from messager.domain.services import IPasswordHasher
from messager.domain.value_objects import EmailAddress
from messager.infrastructure.auth import TokenService
from messager.reporter import Emoji, SystemReporter

MIN_PASSWORD_LENGTH = 6


class RegisterUserUseCase:
    """Validates signup input, stores the user and issues tokens."""

    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: IPasswordHasher,
        token_service: TokenService,
        reporter: Optional[SystemReporter] = None,
    ):
        self.user_repository = user_repository
        self.password_hasher = password_hasher
        self.token_service = token_service
        self.reporter = reporter

    async def execute(self, full_name: str, email: str, password: str) -> AuthResult:
        """
        Register a user.

        Args:
            full_name: Display name
            email: Email address (normalized to lowercase)
            password: Plain password, at least 6 characters

        Returns:
            AuthResult with the new user and its token pair

        Raises:
            ValidationError: Missing field, short password or bad email
            DuplicateEmailError: Email already registered
            ConfigError: Token secrets are not configured
        """
        full_name = (full_name or "").strip()
        if not full_name or not email or not password:
            raise ValidationError("All fields are required")

        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

        try:
            address = EmailAddress(email)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        password_hash = await self.password_hasher.hash(password)
        user = await self.user_repository.create(
            User(full_name=full_name, email=address.value, password_hash=password_hash)
        )
        tokens = self.token_service.issue_token_pair(user.id)

        if self.reporter:
            self.reporter.info(
                f"{Emoji.SECURITY.KEY} User registered: user={user.id}",
                context="RegisterUser",
                verbose_level=1,
            )

        return AuthResult(user=user, tokens=tokens)
