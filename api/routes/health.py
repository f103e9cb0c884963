"""
Health check endpoints.

Used for monitoring and load balancer health checks.
"""
from fastapi import APIRouter, Depends
import platform

from api.dependencies import Container, get_container
from core.domain.clock import utc_now


router = APIRouter()


@router.get("/health")
async def health_check(container: Container = Depends(get_container)):
    """
    Health check endpoint.

    Returns system health status.
    """
    return {
        "status": "healthy",
        "timestamp": utc_now().isoformat(),
        "service": "marketplace-settlement",
        "version": "1.0.0",
        "python_version": platform.python_version(),
        "storage": container.settings.database.backend,
        "renewal_scheduler": "running" if container.renewal_scheduler.is_running else "stopped",
    }
