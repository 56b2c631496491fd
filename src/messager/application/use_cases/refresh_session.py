"""
Use case for minting a new access token from a refresh token.
"""

from typing import Optional

from messager.domain.auth import AuthenticatedUser, TokenPair
from messager.infrastructure.auth import TokenService
from messager.reporter import Emoji, SystemReporter


class RefreshSessionUseCase:
    """
    Issues a new access token and rotates the refresh token.

    The caller must already have passed require_refresh_token. The
    previous refresh token is not revoked and stays valid until its
    own expiry.
    """

    def __init__(
        self,
        token_service: TokenService,
        reporter: Optional[SystemReporter] = None,
    ):
        self.token_service = token_service
        self.reporter = reporter

    def execute(self, auth: AuthenticatedUser) -> TokenPair:
        tokens = self.token_service.issue_token_pair(auth.user_id)

        if self.reporter:
            self.reporter.debug(
                f"{Emoji.SECURITY.REFRESH} Session refreshed: user={auth.user_id}",
                context="RefreshSession",
                verbose_level=2,
            )

        return tokens
