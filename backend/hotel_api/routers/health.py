"""
Health check endpoints for the REST API.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from shared.config.logging import rest_api_logger as logger
from shared.config.settings import settings
from shared.infrastructure.db import SessionLocal


router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health_check():
    """
    Basic health check endpoint.
    Returns service status without checking dependencies.
    """
    return {
        "status": "healthy",
        "service": "hotel-api",
        "environment": settings.environment,
    }


@router.get("/health/detailed")
def detailed_health_check():
    """Health check that also runs ``SELECT 1`` against the database."""
    checks = {
        "service": "hotel-api",
        "environment": settings.environment,
        "dependencies": {},
    }
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        checks["dependencies"]["database"] = {"status": "healthy"}
        checks["status"] = "healthy"
    except Exception as e:
        logger.error("Database health check failed", error=str(e))
        checks["dependencies"]["database"] = {"status": "unhealthy", "error": str(e)}
        checks["status"] = "degraded"
        return JSONResponse(content=checks, status_code=503)
    return checks
