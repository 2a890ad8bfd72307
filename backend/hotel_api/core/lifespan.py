"""
Application lifespan handler.
Manages startup and shutdown events for the FastAPI application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from hotel_api.models import Base
from shared.config.logging import rest_api_logger as logger
from shared.config.logging import setup_logging
from shared.config.settings import settings
from shared.infrastructure.db import engine


def validate_startup_configuration() -> None:
    """
    Log configuration problems; refuse to start in production with them.

    Raises:
        RuntimeError: Production environment with insecure secrets.
    """
    secret_errors = settings.validate_production_secrets()
    if not secret_errors:
        return

    for error in secret_errors:
        logger.error("Configuration error: %s", error)
    if settings.environment == "production":
        raise RuntimeError(
            f"Production configuration errors: {'; '.join(secret_errors)}. "
            "Server will not start with insecure configuration."
        )
    logger.warning("Running with insecure defaults (acceptable for development only)")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    # Initialize logging
    setup_logging()

    validate_startup_configuration()

    # Startup
    logger.info("Starting REST API", port=settings.rest_api_port, env=settings.environment)

    if settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created/verified")

    yield

    # Shutdown
    logger.info("Shutting down REST API")
    engine.dispose()
