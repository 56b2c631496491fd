"""
Use case for authenticating requests and WebSocket handshakes.
"""

from typing import Optional

from messager.domain.auth import AuthenticatedUser
from messager.domain.exceptions import (
    TokenExpiredError,
    TokenInvalidError,
    UnauthenticatedError,
)
from messager.domain.repositories import IUserRepository
from messager.domain.value_objects import TokenKind
from messager.infrastructure.auth import TokenService
from messager.reporter import Emoji, SystemReporter


class AuthenticateRequestUseCase:
    """
    Resolves a bearer credential to an authenticated user.

    Transport independent: the presentation layer extracts the token
    (header, cookie or query) and hands it over. Expired tokens keep
    their distinct error so clients know to refresh instead of logging
    in again; every other failure becomes UnauthenticatedError.
    """

    def __init__(
        self,
        token_service: TokenService,
        user_repository: IUserRepository,
        reporter: Optional[SystemReporter] = None,
    ):
        self.token_service = token_service
        self.user_repository = user_repository
        self.reporter = reporter

    async def require_access_token(self, token: Optional[str]) -> AuthenticatedUser:
        """
        Authenticate with an access token.

        Raises:
            UnauthenticatedError: Missing, invalid or unresolvable token
            TokenExpiredError: Token is past expiry
        """
        return await self._authenticate(token, TokenKind.ACCESS)

    async def require_refresh_token(self, token: Optional[str]) -> AuthenticatedUser:
        """
        Authenticate with a refresh token.

        Rejects tokens whose user no longer exists.

        Raises:
            UnauthenticatedError: Missing, invalid or unresolvable token
            TokenExpiredError: Token is past expiry
        """
        return await self._authenticate(token, TokenKind.REFRESH)

    async def _authenticate(
        self, token: Optional[str], kind: TokenKind
    ) -> AuthenticatedUser:
        if not token:
            raise UnauthenticatedError("No token provided")

        try:
            payload = self.token_service.decode(token, kind)
        except TokenExpiredError:
            self._log_rejection(f"{Emoji.SECURITY.EXPIRED} Expired {kind.value} token")
            raise
        except TokenInvalidError as e:
            self._log_rejection(
                f"{Emoji.SECURITY.DENIED} Invalid {kind.value} token: {e.message}"
            )
            raise UnauthenticatedError() from e

        user = await self.user_repository.get_by_id(payload.sub)
        if user is None:
            self._log_rejection(
                f"{Emoji.SECURITY.DENIED} {kind.value} token for unknown "
                f"user={payload.sub}"
            )
            raise UnauthenticatedError("User not found")

        return AuthenticatedUser(user_id=user.id, token=payload, user=user)

    def _log_rejection(self, msg: str) -> None:
        if self.reporter:
            self.reporter.debug(msg, context="SessionMiddleware", verbose_level=2)
