"""
Use case for logging in with email and password.
"""

from typing import Optional

from messager.application.dto import AuthResult
from messager.domain.exceptions import InvalidCredentialsError, ValidationError
from messager.domain.repositories import IUserRepository
from messager.domain.services import IPasswordHasher
from messager.infrastructure.auth import TokenService
from messager.reporter import Emoji, SystemReporter

_DUMMY_PASSWORD = "messager-dummy-password"


class LoginUserUseCase:
    """
    Verifies credentials and issues a token pair.

    An unknown email and a wrong password produce the same error and
    cost the same: an unknown email is still checked against a dummy hash.
    """

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
        self._dummy_hash: Optional[str] = None

    async def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = await self.password_hasher.hash(_DUMMY_PASSWORD)
        return self._dummy_hash

    async def execute(self, email: str, password: str) -> AuthResult:
        """
        Log a user in.

        Raises:
            ValidationError: Email or password missing
            InvalidCredentialsError: Unknown email or wrong password
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = await self.user_repository.get_by_email(email)
        if user is None:
            await self.password_hasher.verify(password, await self._get_dummy_hash())
            verified = False
        else:
            verified = await self.password_hasher.verify(password, user.password_hash)

        if not verified:
            if self.reporter:
                self.reporter.info(
                    f"{Emoji.SECURITY.DENIED} Login failed",
                    context="LoginUser",
                    verbose_level=2,
                )
            raise InvalidCredentialsError()

        tokens = self.token_service.issue_token_pair(user.id)

        if self.reporter:
            self.reporter.info(
                f"{Emoji.SECURITY.GRANTED} User logged in: user={user.id}",
                context="LoginUser",
                verbose_level=2,
            )

        return AuthResult(user=user, tokens=tokens)
