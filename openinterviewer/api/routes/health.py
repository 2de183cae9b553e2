"""
Health check endpoints.

Provides system health information for monitoring.
"""

from fastapi import APIRouter, HTTPException
import structlog

from openinterviewer.api.dependencies import RegistryDep
from openinterviewer.core.config import settings
from openinterviewer.persistence.database import check_database_health

log = structlog.get_logger(__name__)

router = APIRouter()

VERSION = "0.1.0"


@router.get("/health")
async def health_check(registry: RegistryDep):
    """
    Health check endpoint.

    Returns:
        System health status including storage connectivity and live sessions.
    """
    db_health = await check_database_health()

    overall_status = "healthy" if db_health["status"] == "healthy" else "unhealthy"

    return {
        "status": overall_status,
        "version": VERSION,
        "debug": settings.debug,
        "components": {
            "database": db_health,
            "sessions": {"live": len(registry)},
        },
    }


@router.get("/health/live")
async def liveness():
    """Liveness check. Returns 200 if the application is running."""
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness():
    """Readiness check. Returns 503 until storage answers."""
    db_health = await check_database_health()

    if db_health["status"] != "healthy":
        log.warning("readiness_check_failed", error=db_health.get("error"))
        raise HTTPException(status_code=503, detail="Database not ready")

    return {"status": "ready"}
