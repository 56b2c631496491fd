"""
JWT token service for Messager.

Issues and verifies short-lived access tokens and long-lived refresh
tokens. Stateless: validity depends only on signature and expiry.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from uuid import uuid4

import jwt
from pydantic import ValidationError as PydanticValidationError

from messager.domain.auth import TokenPayload, TokenPair
from messager.domain.exceptions import ConfigError, TokenExpiredError, TokenInvalidError
from messager.domain.value_objects import TokenKind

Clock = Callable[[], datetime]

REQUIRED_CLAIMS = ["sub", "type", "iat", "exp", "jti"]


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(timezone.utc)


class TokenService:
    """
    JWT issuer and verifier.

    Access and refresh tokens are signed with distinct secrets and carry
    their kind in the `type` claim, so neither can stand in for the
    other. Expiry is checked against the injected clock.

    Attributes:
        algorithm: JWT algorithm (default: HS256)
        access_ttl: Access token lifetime
        refresh_ttl: Refresh token lifetime
    """

    def __init__(
        self,
        access_secret: Optional[str],
        refresh_secret: Optional[str],
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
        clock: Optional[Clock] = None,
    ):
        """
        Initialize token service.

        Args:
            access_secret: Signing secret for access tokens
            refresh_secret: Signing secret for refresh tokens
            algorithm: JWT algorithm
            access_ttl: Access token lifetime (minutes-scale)
            refresh_ttl: Refresh token lifetime (days-scale)
            clock: Callable returning the current aware datetime

        Raises:
            ConfigError: If both secrets are set and identical
        """
        if access_secret and refresh_secret and access_secret == refresh_secret:
            raise ConfigError("Access and refresh token secrets must differ")

        self._secrets = {
            TokenKind.ACCESS: access_secret,
            TokenKind.REFRESH: refresh_secret,
        }
        self._ttls = {
            TokenKind.ACCESS: access_ttl,
            TokenKind.REFRESH: refresh_ttl,
        }
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.clock: Clock = clock or utc_now

    def _secret_for(self, kind: TokenKind) -> str:
        secret = self._secrets[kind]
        if not secret:
            raise ConfigError(f"{kind.value.upper()}_TOKEN_SECRET is not configured")
        return secret

    def _issue(self, identity: str, kind: TokenKind) -> str:
        secret = self._secret_for(kind)
        if not identity:
            raise ValueError("Cannot issue a token without an identity")

        now = self.clock()
        payload = {
            "sub": str(identity),
            "type": kind.value,
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttls[kind]).timestamp()),
            "jti": uuid4().hex,
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def issue_access_token(self, identity: str) -> str:
        """
        Issue a short-lived access token.

        Raises:
            ConfigError: If the access secret is unset
        """
        return self._issue(identity, TokenKind.ACCESS)

    def issue_refresh_token(self, identity: str) -> str:
        """
        Issue a long-lived refresh token.

        Raises:
            ConfigError: If the refresh secret is unset
        """
        return self._issue(identity, TokenKind.REFRESH)

    def issue_token_pair(self, identity: str) -> TokenPair:
        """Issue access and refresh tokens for one identity."""
        return TokenPair(
            access_token=self.issue_access_token(identity),
            refresh_token=self.issue_refresh_token(identity),
        )

    def decode(self, token: str, expected_kind: TokenKind) -> TokenPayload:
        """
        Verify token and return its payload.

        Args:
            token: Encoded JWT
            expected_kind: Kind the caller requires

        Returns:
            Validated TokenPayload

        Raises:
            ConfigError: If the secret for expected_kind is unset
            TokenExpiredError: If the clock has reached the expiry
            TokenInvalidError: For any other verification failure
        """
        secret = self._secret_for(expected_kind)
        if not token:
            raise TokenInvalidError("Empty token")

        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": REQUIRED_CLAIMS,
                },
            )
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError(f"Invalid token: {e}") from e

        try:
            payload = TokenPayload(**claims)
        except PydanticValidationError as e:
            raise TokenInvalidError("Malformed token payload") from e

        if payload.type != expected_kind:
            raise TokenInvalidError(
                f"Expected {expected_kind.value} token, got {payload.type.value}"
            )

        if int(self.clock().timestamp()) >= payload.exp:
            raise TokenExpiredError()

        return payload

    def verify(self, token: str, expected_kind: TokenKind) -> str:
        """
        Verify token and return the identity it was issued for.

        Side-effect-free. Raises the same errors as decode().
        """
        return self.decode(token, expected_kind).sub
