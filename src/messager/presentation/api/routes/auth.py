"""
Authentication API routes.

The access token travels in the response body and is held in memory
by clients. The refresh token is also set as an HTTP-only cookie,
which is the only place /refresh reads it from.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Response, status

from messager.config.settings import Settings
from messager.di import Container
from messager.domain.auth import AuthenticatedUser
from messager.presentation.api.dependencies import (
    get_container,
    get_current_user,
    get_refresh_user,
    rate_limit_auth,
)
from messager.presentation.schemas import (
    AuthResponse,
    LoginRequest,
    LogoutResponse,
    RefreshResponse,
    SignupRequest,
    UpdateProfileRequest,
)
from messager.reporter import Emoji

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _set_refresh_cookie(response: Response, settings: Settings, token: str) -> None:
    response.set_cookie(
        key=settings.refresh_cookie_name,
        value=token,
        max_age=settings.refresh_token_expire_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.refresh_cookie_secure,
        samesite=settings.refresh_cookie_samesite,
        path=settings.refresh_cookie_path,
    )


async def _send_welcome_email(container: Container, email: str, full_name: str) -> None:
    """Background task: signup never fails because of mail delivery."""
    try:
        await container.mail_sender.send_welcome_email(email, full_name)
    except Exception as e:
        container.reporter.warning(
            f"{Emoji.MESSAGE.MAIL} Welcome email to {email} failed: {e}",
            context="AuthAPI",
        )


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit_auth)],
)
async def signup(
    request: SignupRequest,
    response: Response,
    background_tasks: BackgroundTasks,
    container: Container = Depends(get_container),
):
    """
    Register a user and start a session.

    Returns:
        Public profile with accessToken and refreshToken

    Errors:
        400: Missing fields, short password, bad email, duplicate email
        429: Too many attempts from this client
    """
    result = await container.get_register_user_use_case().execute(
        full_name=request.full_name,
        email=request.email,
        password=request.password,
    )
    _set_refresh_cookie(response, container.settings, result.tokens.refresh_token)
    background_tasks.add_task(
        _send_welcome_email, container, result.user.email, result.user.full_name
    )
    return AuthResponse.model_validate(result.to_dict())


@router.post(
    "/login", response_model=AuthResponse, dependencies=[Depends(rate_limit_auth)]
)
async def login(
    request: LoginRequest,
    response: Response,
    container: Container = Depends(get_container),
):
    """
    Log in with email and password.

    Errors:
        400: Missing fields or invalid credentials (never says which)
        429: Too many attempts from this client
    """
    result = await container.get_login_user_use_case().execute(
        email=request.email, password=request.password
    )
    _set_refresh_cookie(response, container.settings, result.tokens.refresh_token)
    return AuthResponse.model_validate(result.to_dict())


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    dependencies=[Depends(rate_limit_auth)],
)
async def refresh(
    response: Response,
    auth: AuthenticatedUser = Depends(get_refresh_user),
    container: Container = Depends(get_container),
):
    """
    Mint a new access token from the refresh cookie and rotate the cookie.

    Errors:
        401: Cookie missing, invalid or expired, or user deleted
        429: Too many attempts from this client
    """
    tokens = container.get_refresh_session_use_case().execute(auth)
    _set_refresh_cookie(response, container.settings, tokens.refresh_token)
    return RefreshResponse(
        access_token=tokens.access_token, refresh_token=tokens.refresh_token
    )


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    response: Response,
    container: Container = Depends(get_container),
):
    """Clear the refresh cookie."""
    settings = container.settings
    response.delete_cookie(
        key=settings.refresh_cookie_name,
        path=settings.refresh_cookie_path,
        secure=settings.refresh_cookie_secure,
        httponly=True,
        samesite=settings.refresh_cookie_samesite,
    )
    return LogoutResponse()


@router.get("/check")
async def check_auth(auth: AuthenticatedUser = Depends(get_current_user)):
    """Return the authenticated user's public profile."""
    return auth.public_profile()


@router.put("/update-profile")
async def update_profile(
    request: UpdateProfileRequest,
    auth: AuthenticatedUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    """
    Replace the profile picture.

    Returns:
        Updated public profile

    Errors:
        400: profilePic missing or empty
        401: Missing or invalid access token
        413: Picture larger than max_image_bytes
    """
    user = await container.get_update_profile_use_case().execute(
        auth.user_id, request.profile_pic
    )
    return user.to_public_dict()
