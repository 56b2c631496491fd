"""
Health check API routes.
"""

from fastapi import APIRouter, Depends, Response, status

from messager.di import Container
from messager.presentation.api.dependencies import get_container

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(
    response: Response,
    container: Container = Depends(get_container),
):
    """
    Service health.

    Returns 503 once graceful shutdown has started, or while a configured
    database is unreachable, so load balancers stop routing clients here.
    """
    shutdown_manager = container.shutdown_manager
    shutting_down = shutdown_manager.is_shutting_down()
    database = container.database
    database_ok = await database.health_check() if database else True
    if shutting_down or not database_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    if shutting_down:
        state = "shutting_down"
    elif not database_ok:
        state = "degraded"
    else:
        state = "healthy"

    stats = container.presence_registry.get_stats()
    return {
        "status": state,
        "storage": "sql" if database else "memory",
        "service": container.settings.APP_NAME,
        "version": container.settings.APP_VERSION,
        "connections": stats["connections"],
        "online_users": stats["online_users"],
        "shutdown": shutdown_manager.get_shutdown_info(),
    }
