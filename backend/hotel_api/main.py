"""
REST API main application.
Entry point for the FastAPI REST server of the hotel and restaurant back office.
"""

from fastapi import FastAPI

from hotel_api.core.cors import configure_cors
from hotel_api.core.lifespan import lifespan
from hotel_api.core.middlewares import register_middlewares
from hotel_api.routers.auth import router as auth_router
from hotel_api.routers.clients import router as clients_router
from hotel_api.routers.health import router as health_router
from hotel_api.routers.hotel import router as hotel_router
from hotel_api.routers.inventory import router as inventory_router
from hotel_api.routers.invitations import router as invitations_router
from hotel_api.routers.lookup import router as lookup_router
from hotel_api.routers.restaurant import router as restaurant_router
from hotel_api.routers.restore import router as restore_router
from hotel_api.routers.supermarket_orders import router as supermarket_router
from hotel_api.routers.users import router as users_router
from shared.config.settings import settings
from shared.infrastructure.correlation import CorrelationIdMiddleware


# Create FastAPI application
app = FastAPI(
    title="Hotel Back Office API",
    description="Multi-tenant hotel and restaurant back office",
    version="0.1.0",
    lifespan=lifespan,
)

# Middlewares run in reverse order of registration: correlation id first
register_middlewares(app)
configure_cors(app)
app.add_middleware(CorrelationIdMiddleware)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router)
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(invitations_router)
app.include_router(hotel_router)
app.include_router(inventory_router)
app.include_router(clients_router)
app.include_router(restaurant_router)
app.include_router(supermarket_router)
app.include_router(lookup_router)
# Last: its path pattern spans every entity prefix
app.include_router(restore_router)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "hotel_api.main:app",
        host="0.0.0.0",
        port=settings.rest_api_port,
        reload=True,
    )
