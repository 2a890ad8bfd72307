"""
CORS for the back-office front end.

The front end lives at ``FRONTEND_URL`` (the same address invitation links
point to). ``ALLOWED_ORIGINS`` replaces the computed list when set.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config.settings import settings


# Dev servers the back office is usually run from
LOCAL_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
)

REQUEST_HEADERS = ("Authorization", "Content-Type", "Accept", "Accept-Language", "X-Request-ID")


def get_cors_origins() -> list[str]:
    if settings.allowed_origins:
        return [origin.strip().rstrip("/") for origin in settings.allowed_origins.split(",") if origin.strip()]

    origins = [settings.frontend_url.rstrip("/")]
    if settings.environment != "production":
        origins += [origin for origin in LOCAL_ORIGINS if origin not in origins]
    return origins


def configure_cors(app: FastAPI) -> None:
    """Preflight answers are not cached in development."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "PUT", "DELETE", "OPTIONS"],
        allow_headers=list(REQUEST_HEADERS),
        expose_headers=["X-Request-ID"],
        max_age=0 if settings.environment == "development" else 600,
    )
