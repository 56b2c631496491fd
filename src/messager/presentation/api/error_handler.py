"""
Global error handling.

Converts domain exceptions to HTTP responses of the form
{"error": <code>, "message": <message>}.
"""

from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from messager.domain.exceptions import MessagerError, RateLimitExceededError
from messager.reporter import Emoji, SystemReporter

STATUS_CODE_MAP = {
    "CONFIG_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "UNAUTHENTICATED": status.HTTP_401_UNAUTHORIZED,
    "TOKEN_EXPIRED": status.HTTP_401_UNAUTHORIZED,
    "TOKEN_INVALID": status.HTTP_401_UNAUTHORIZED,
    "INVALID_CREDENTIALS": status.HTTP_400_BAD_REQUEST,
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "DUPLICATE_EMAIL": status.HTTP_400_BAD_REQUEST,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "PAYLOAD_TOO_LARGE": 413,
    "RATE_LIMITED": status.HTTP_429_TOO_MANY_REQUESTS,
    "PERSISTENCE_ERROR": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(exc: MessagerError) -> int:
    """HTTP status for a domain exception (500 for unknown codes)."""
    return STATUS_CODE_MAP.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_error_handlers(
    app: FastAPI, reporter: Optional[SystemReporter] = None
) -> None:
    """
    Install exception handlers on the app.

    Args:
        app: FastAPI application
        reporter: Optional reporter for server-side errors
    """

    async def messager_exception_handler(
        request: Request, exc: MessagerError
    ) -> JSONResponse:
        status_code = status_for(exc)
        headers = None

        if status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        elif isinstance(exc, RateLimitExceededError):
            headers = {"Retry-After": str(exc.retry_after)}
        elif status_code >= 500 and reporter:
            reporter.error(
                f"{Emoji.ERROR.ERROR} {exc.code} on {request.method} "
                f"{request.url.path}: {exc.message}",
                context="ErrorHandler",
            )

        return JSONResponse(
            status_code=status_code,
            content={"error": exc.code, "message": exc.message},
            headers=headers,
        )

    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        if reporter:
            reporter.error(
                f"{Emoji.ERROR.EXCEPTION} Unhandled {type(exc).__name__} on "
                f"{request.method} {request.url.path}: {exc}",
                context="ErrorHandler",
            )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "INTERNAL_ERROR", "message": "Internal server error"},
        )

    app.add_exception_handler(MessagerError, messager_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
