"""
FastAPI dependencies for Messager API.

Session middleware for REST routes and WebSocket handshakes. The
container lives on app.state, set by the application orchestrator.
"""

from typing import Optional

from fastapi import Depends, Request, WebSocket, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.requests import HTTPConnection

from messager.di import Container
from messager.domain.auth import AuthenticatedUser
from messager.domain.exceptions import (
    AuthenticationError,
    RateLimitExceededError,
    TokenExpiredError,
)
from messager.reporter import Emoji

bearer_scheme = HTTPBearer(auto_error=False)


def get_container(connection: HTTPConnection) -> Container:
    """
    Get DI container instance.

    Raises:
        RuntimeError: If container not initialized
    """
    container = getattr(connection.app.state, "container", None)
    if container is None:
        raise RuntimeError("Container not initialized")
    return container


async def rate_limit_auth(
    request: Request,
    container: Container = Depends(get_container),
) -> None:
    """
    Throttle credential endpoints per client address and path.

    Raises:
        RateLimitExceededError: Over the limit (429 with Retry-After)
    """
    limiter = container.auth_rate_limiter
    if limiter is None:
        return

    client = request.client.host if request.client else "unknown"
    identifier = f"{client}:{request.url.path}"
    if not limiter.check_rate_limit(identifier):
        retry_after = limiter.get_retry_after_seconds(identifier)
        container.reporter.warning(
            f"{Emoji.SECURITY.DENIED} Rate limited {identifier}, "
            f"retry in {retry_after}s",
            context="RateLimit",
        )
        raise RateLimitExceededError(retry_after)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    container: Container = Depends(get_container),
) -> AuthenticatedUser:
    """
    Require a valid access token in the Authorization header.

    Raises:
        UnauthenticatedError: No, invalid or unresolvable token (401)
        TokenExpiredError: Expired token (401, client should refresh)
    """
    token = credentials.credentials if credentials else None
    return await container.get_authenticate_use_case().require_access_token(token)


async def get_refresh_user(
    request: Request,
    container: Container = Depends(get_container),
) -> AuthenticatedUser:
    """
    Require a valid refresh token in the HTTP-only refresh cookie.

    Raises:
        UnauthenticatedError: Missing/invalid cookie or deleted user (401)
        TokenExpiredError: Expired refresh token (401, re-login needed)
    """
    token = request.cookies.get(container.settings.refresh_cookie_name)
    return await container.get_authenticate_use_case().require_refresh_token(token)


def extract_websocket_token(websocket: WebSocket) -> Optional[str]:
    """
    Read the access token from a handshake.

    Authorization: Bearer header first, `token` query parameter for
    browser clients that cannot set handshake headers.
    """
    header = websocket.headers.get("authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return websocket.query_params.get("token") or None


async def authenticate_websocket(
    websocket: WebSocket,
    container: Container = Depends(get_container),
) -> Optional[AuthenticatedUser]:
    """
    Authenticate a WebSocket handshake.

    On failure the socket is closed with 1008 before it is accepted and
    None is returned; the endpoint must stop there.
    """
    token = extract_websocket_token(websocket)
    try:
        return await container.get_authenticate_use_case().require_access_token(token)
    except TokenExpiredError:
        await websocket.close(
            code=status.WS_1008_POLICY_VIOLATION, reason="Token expired"
        )
    except AuthenticationError as e:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=e.message)
    return None
